"""Depth buffer encoding and the per-pixel depth comparison."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

Z_MAX = 0x3FFFF

_Z_DEC_TABLE = (
    (6, 0x00000),
    (5, 0x20000),
    (4, 0x30000),
    (3, 0x38000),
    (2, 0x3C000),
    (1, 0x3E000),
    (0, 0x3F000),
    (0, 0x3F800),
)


class ZMode(enum.IntEnum):
    """How a new depth value is tested against the one in memory."""

    OPAQUE = 0
    INTERPENETRATING = 1
    TRANSPARENT = 2
    DECAL = 3


class _DepthMemory(Protocol):
    def read_pair16(self, index: int) -> tuple[int, int]: ...

    def write_pair16(self, index: int, value: int, hidden: int) -> None: ...


@dataclass
class DepthState:
    """Render modes that steer the depth test, and blender shifts it updates."""

    z_compare_en: bool = False
    z_mode: ZMode = ZMode.OPAQUE
    force_blend: bool = False
    antialias_en: bool = False
    real_blender_shifters_needed: bool = False
    interpixel_blender_shifters_needed: bool = False
    blshifta: int = 0
    blshiftb: int = 0
    pastblshifta: int = 0
    pastblshiftb: int = 0
    pastrawdzmem: int = 0

    def __post_init__(self) -> None:
        self.z_mode = ZMode(self.z_mode)


@dataclass(frozen=True)
class ZCompareResult:
    """Outcome of a depth test: whether the pixel passes and what it changed."""

    passed: bool
    blend_en: bool
    prewrap: bool
    curpixel_cvg: int


def z_decompress(zb: int) -> int:
    """Expand a stored 16-bit depth word into an 18-bit depth value."""
    index = (zb >> 2) & 0x3FFF
    shift, add = _Z_DEC_TABLE[(index >> 11) & 7]
    return (((index & 0x7FF) << shift) + add) & Z_MAX


def z_compress(z: int) -> int:
    """Pack an 18-bit depth value into the upper 14 bits of a 16-bit word."""
    z &= Z_MAX
    exponent = (z >> 11) & 0x7F
    if exponent < 0x40:
        return (z >> 4) & 0x1FFC
    if exponent < 0x60:
        return ((z >> 3) & 0x1FFC) | 0x2000
    if exponent < 0x70:
        return ((z >> 2) & 0x1FFC) | 0x4000
    if exponent < 0x78:
        return ((z >> 1) & 0x1FFC) | 0x6000
    if exponent < 0x7C:
        return (z & 0x1FFC) | 0x8000
    if exponent < 0x7E:
        return ((z << 1) & 0x1FFC) | 0xA000
    if exponent == 0x7E:
        return ((z << 2) & 0x1FFC) | 0xC000
    return ((z << 2) & 0x1FFC) | 0xE000


def dz_decompress(dz_compressed: int) -> int:
    """Expand a 4-bit delta-z exponent into its power of two."""
    return 1 << dz_compressed


def dz_compress(value: int) -> int:
    """Encode a 16-bit delta-z as a 4-bit exponent."""
    j = 0
    if value & 0xFF00:
        j |= 8
    if value & 0xF0F0:
        j |= 4
    if value & 0xCCCC:
        j |= 2
    if value & 0xAAAA:
        j |= 1
    return j


def deltaz_compare(value: int) -> int:
    """Keep only the highest set bit of a 16-bit value."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"value out of 16-bit range: {value}")
    return 1 << (value.bit_length() - 1) if value else 0


def z_store(memory: _DepthMemory, zcurpixel: int, z: int, dzpixenc: int) -> None:
    """Write a compressed depth value and its delta-z code to the depth buffer."""
    zval = z_compress(z) | (dzpixenc >> 2)
    memory.write_pair16(zcurpixel, zval & 0xFFFF, dzpixenc & 3)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def z_compare(
    memory: _DepthMemory,
    state: DepthState,
    zcurpixel: int,
    sz: int,
    dzpix: int,
    dzpixenc: int,
    curpixel_cvg: int,
    curpixel_memcvg: int,
) -> ZCompareResult:
    """Test a new depth against the buffer, updating the blender shifts in ``state``."""
    sz &= Z_MAX
    dzpix &= 0xFFFF
    overflow = bool((curpixel_memcvg + curpixel_cvg) & 8)

    if not state.z_compare_en:
        shiftb = 4 if dzpixenc < 0xB else 0xF - dzpixenc
        if state.real_blender_shifters_needed:
            state.blshifta = 0
            state.blshiftb = shiftb
        if state.interpixel_blender_shifters_needed:
            state.pastblshifta = 0
            state.pastblshiftb = shiftb
        state.pastrawdzmem = 0xF
        blend_en = state.force_blend or (not overflow and state.antialias_en)
        return ZCompareResult(True, bool(blend_en), overflow, curpixel_cvg)

    zval, hval = memory.read_pair16(zcurpixel)
    oz = z_decompress(zval)
    rawdzmem = ((zval & 3) << 2) | hval
    dzmem = dz_decompress(rawdzmem)

    if state.real_blender_shifters_needed:
        state.blshifta = _clamp(dzpixenc - rawdzmem, 0, 4)
        state.blshiftb = _clamp(rawdzmem - dzpixenc, 0, 4)
    if state.interpixel_blender_shifters_needed:
        state.pastblshifta = _clamp(dzpixenc - state.pastrawdzmem, 0, 4)
        state.pastblshiftb = _clamp(state.pastrawdzmem - dzpixenc, 0, 4)
    state.pastrawdzmem = rawdzmem

    force_coplanar = False
    precision_factor = (zval >> 13) & 0xF
    if precision_factor < 3:
        if dzmem != 0x8000:
            dzmem = max(dzmem << 1, 16 >> precision_factor)
        else:
            force_coplanar = True
            dzmem = 0xFFFF

    dznotshift = deltaz_compare(dzpix | dzmem)
    dznew = dznotshift << 3

    farther = force_coplanar or (sz + dznew) >= oz
    blend_en = state.force_blend or (not overflow and state.antialias_en and farther)

    infront = sz < oz
    at_max = oz == Z_MAX
    nearer = force_coplanar or (sz - dznew) <= oz
    mode = state.z_mode

    if mode == ZMode.INTERPENETRATING and infront and farther and overflow:
        dzenc = dz_compress(dznotshift & 0xFFFF)
        cvgcoeff = ((oz >> dzenc) - (sz >> dzenc)) & 0xF
        curpixel_cvg = ((cvgcoeff * curpixel_cvg) >> 3) & 0xF
        passed = True
    elif mode in (ZMode.OPAQUE, ZMode.INTERPENETRATING):
        passed = at_max or (infront if overflow else nearer)
    elif mode == ZMode.TRANSPARENT:
        passed = infront or at_max
    else:
        passed = farther and nearer and not at_max

    return ZCompareResult(bool(passed), bool(blend_en), overflow, curpixel_cvg)