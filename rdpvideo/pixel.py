"""Pixel values, frame buffers and the per-pixel video interface filters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rgba:
    """An 8-bit-per-channel colour; ``a`` often carries coverage instead of alpha."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0


@dataclass
class FrameBuffer:
    """A block of pixels handed to the display, starting at ``offset`` in ``pixels``."""

    pixels: list[Rgba] = field(default_factory=list)
    width: int = 0
    height: int = 0
    height_out: int = 0
    pitch: int = 0
    offset: int = 0


def _median_channel(center: int, left: int, right: int) -> int:
    if (left >= center and right >= left) or (left >= right and center >= left):
        return left
    if (right >= center and left >= right) or (right >= left and center >= right):
        return right
    return center


def divot_filter(center: Rgba, left: Rgba, right: Rgba) -> Rgba:
    """Median of three neighbours per channel, unless all three are fully covered."""
    if (center.a & left.a & right.a) == 7:
        return center
    return Rgba(
        _median_channel(center.r, left.r, right.r),
        _median_channel(center.g, left.g, right.g),
        _median_channel(center.b, left.b, right.b),
        center.a,
    )


def vl_lerp(up: Rgba, down: Rgba, frac: int) -> Rgba:
    """Blend ``up`` towards ``down`` by ``frac``/32; alpha is kept from ``up``."""
    if not frac:
        return up

    def blend(a: int, b: int) -> int:
        return ((((b - a) * frac + 16) >> 5) + a) & 0xFF

    return Rgba(blend(up.r, down.r), blend(up.g, down.g), blend(up.b, down.b), up.a)


def integer_sqrt(a: int) -> int:
    """Floor square root of a 32-bit unsigned value."""
    if not 0 <= a <= 0xFFFFFFFF:
        raise ValueError(f"value out of 32-bit unsigned range: {a}")
    return math.isqrt(a)


_GAMMA_TABLE = tuple((integer_sqrt(i << 6) << 1) & 0xFF for i in range(0x100))
_GAMMA_DITHER_TABLE = tuple((integer_sqrt(i) << 1) & 0xFF for i in range(0x4000))


def gamma_filter(
    pixel: Rgba, gamma_enable: bool, gamma_dither_enable: bool, noise_seed: int
) -> Rgba:
    """Apply the optional gamma correction and dither noise to one pixel."""
    mode = (bool(gamma_enable) << 1) | bool(gamma_dither_enable)

    if mode == 0:
        return pixel

    if mode == 1:
        def dither(value: int, bit: int) -> int:
            return value + ((noise_seed >> bit) & 1) if value < 255 else value

        return Rgba(dither(pixel.r, 0), dither(pixel.g, 1), dither(pixel.b, 2), pixel.a)

    if mode == 2:
        return Rgba(
            _GAMMA_TABLE[pixel.r], _GAMMA_TABLE[pixel.g], _GAMMA_TABLE[pixel.b], pixel.a
        )

    dith_r = noise_seed & 0x3F
    dith_g = (noise_seed >> 6) & 0x3F
    dith_b = ((noise_seed >> 9) & 0x38) | (noise_seed & 7)
    return Rgba(
        _GAMMA_DITHER_TABLE[(pixel.r << 6) | dith_r],
        _GAMMA_DITHER_TABLE[(pixel.g << 6) | dith_g],
        _GAMMA_DITHER_TABLE[(pixel.b << 6) | dith_b],
        pixel.a,
    )