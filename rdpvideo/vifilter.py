"""Frame buffer fetch filters: anti-alias restore, dither restore and neighbour search."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from rdpvideo.pixel import Rgba

_U32 = 0xFFFFFFFF
_AA_RESAMP_EXTRA = 1


class _FrameMemory(Protocol):
    def read16(self, index: int) -> int: ...

    def read_pair16(self, index: int) -> tuple[int, int]: ...

    def read32(self, index: int) -> int: ...


def _rgba16(pix: int) -> tuple[int, int, int]:
    return (pix >> 8) & 0xF8, (pix >> 3) & 0xF8, (pix << 2) & 0xF8


def _rgba32(pix: int) -> tuple[int, int, int]:
    return (pix >> 24) & 0xFF, (pix >> 16) & 0xFF, (pix >> 8) & 0xFF


def _restore_step(center: int, neighbour: int) -> int:
    level = (center >> 3) & 0x1F
    return (neighbour > level) - (neighbour < level)


def _restore_addresses(idx: int, hres: int, fetchbugstate: int) -> tuple[int, ...]:
    toleft = idx - 1
    leftup = idx - hres - 1
    if fetchbugstate != 1:
        leftdown = idx + hres - 1
        maxpix = idx + hres + 1
    else:
        leftdown = toleft
        maxpix = toleft + 2
    return tuple(
        address & _U32
        for address in (
            leftup, leftup + 1, leftup + 2, leftdown,
            leftdown + 1, maxpix, toleft, toleft + 2,
        )
    )


def _restore(
    r: int, g: int, b: int, neighbours: Iterable[tuple[int, int, int]]
) -> tuple[int, int, int]:
    out_r, out_g, out_b = r, g, b
    for nr, ng, nb in neighbours:
        out_r += _restore_step(r, nr)
        out_g += _restore_step(g, ng)
        out_b += _restore_step(b, nb)
    return out_r, out_g, out_b


def restore_filter16(
    memory: _FrameMemory, r: int, g: int, b: int,
    fboffset: int, num: int, hres: int, fetchbugstate: int,
) -> tuple[int, int, int]:
    """Undo dithering of a 16-bit pixel by nudging it towards its eight neighbours."""
    idx = ((fboffset >> 1) + num) & _U32
    pixels = (memory.read16(a) for a in _restore_addresses(idx, hres, fetchbugstate))
    return _restore(
        r, g, b,
        (((pix >> 11) & 0x1F, (pix >> 6) & 0x1F, (pix >> 1) & 0x1F) for pix in pixels),
    )


def restore_filter32(
    memory: _FrameMemory, r: int, g: int, b: int,
    fboffset: int, num: int, hres: int, fetchbugstate: int,
) -> tuple[int, int, int]:
    """Undo dithering of a 32-bit pixel by nudging it towards its eight neighbours."""
    idx = ((fboffset >> 2) + num) & _U32
    pixels = (memory.read32(a) for a in _restore_addresses(idx, hres, fetchbugstate))
    return _restore(
        r, g, b,
        (((pix >> 27) & 0x1F, (pix >> 19) & 0x1F, (pix >> 11) & 0x1F) for pix in pixels),
    )


def video_max_optimized(pixels: Sequence[int]) -> tuple[int, int]:
    """Return the (penultimate minimum, penultimate maximum) of a list of values."""
    if not pixels:
        raise ValueError("at least one value is required")

    posmax = posmin = 0
    penmax = penmin = pixels[0]
    for i, value in enumerate(pixels[1:], 1):
        if value > pixels[posmax]:
            penmax = pixels[posmax]
            posmax = i
        elif value < pixels[posmin]:
            penmin = pixels[posmin]
            posmin = i

    if penmax != pixels[posmax]:
        penmax = max([penmax, *pixels[posmax + 1:]])
    if penmin != pixels[posmin]:
        penmin = min([penmin, *pixels[posmin + 1:]])
    return penmin, penmax


def _video_addresses(idx: int, hres: int, fetchbugstate: int) -> tuple[int, ...]:
    toleft = idx - 2
    toright = idx + 2
    leftup = idx - hres - 1
    rightup = idx - hres + 1
    if fetchbugstate != 1:
        leftdown = idx + hres - 1
        rightdown = idx + hres + 1
    else:
        leftdown = toleft
        rightdown = toright
    return tuple(
        address & _U32
        for address in (leftup, rightup, toleft, toright, leftdown, rightdown)
    )


def _video_blend(
    r: int, g: int, b: int, full: list[tuple[int, int, int]], centercvg: int
) -> tuple[int, int, int]:
    coeff = (7 - centercvg) & _U32
    samples = [(r, g, b), *full]
    result = []
    for centre, values in zip((r, g, b), zip(*samples)):
        penmin, penmax = video_max_optimized(values)
        col = penmin + penmax - (centre << 1)
        result.append(((((col * coeff) + 4) >> 3) + centre) & 0xFF)
    return result[0], result[1], result[2]


def video_filter16(
    memory: _FrameMemory, r: int, g: int, b: int,
    fboffset: int, num: int, hres: int, centercvg: int, fetchbugstate: int,
) -> tuple[int, int, int]:
    """Anti-alias a partly covered 16-bit pixel using its fully covered neighbours."""
    idx = ((fboffset >> 1) + num) & _U32
    full = []
    for address in _video_addresses(idx, hres, fetchbugstate):
        pix, hidden = memory.read_pair16(address)
        if hidden == 3 and pix & 1:
            full.append(_rgba16(pix))
    return _video_blend(r, g, b, full, centercvg)


def video_filter32(
    memory: _FrameMemory, r: int, g: int, b: int,
    fboffset: int, num: int, hres: int, centercvg: int, fetchbugstate: int,
) -> tuple[int, int, int]:
    """Anti-alias a partly covered 32-bit pixel using its fully covered neighbours."""
    idx = ((fboffset >> 2) + num) & _U32
    full = [
        _rgba32(pix)
        for pix in map(memory.read32, _video_addresses(idx, hres, fetchbugstate))
        if (pix >> 5) & 7 == 7
    ]
    return _video_blend(r, g, b, full, centercvg)


def fetch_filter16(
    memory: _FrameMemory, fboffset: int, cur_x: int, aa_mode: int,
    dither_filter_enable: bool, hres: int, fetchstate: int,
) -> Rgba:
    """Fetch one 16-bit pixel and apply the restore or anti-alias filter; ``a`` is coverage."""
    idx = ((fboffset >> 1) + cur_x) & _U32
    if aa_mode <= _AA_RESAMP_EXTRA:
        pix, hidden = memory.read_pair16(idx)
        cvg = ((pix & 1) << 2) | hidden
    else:
        pix = memory.read16(idx)
        cvg = 7

    r, g, b = _rgba16(pix)
    if cvg == 7:
        if dither_filter_enable:
            r, g, b = restore_filter16(memory, r, g, b, fboffset, cur_x, hres, fetchstate)
    else:
        r, g, b = video_filter16(memory, r, g, b, fboffset, cur_x, hres, cvg, fetchstate)
    return Rgba(r & 0xFF, g & 0xFF, b & 0xFF, cvg)


def fetch_filter32(
    memory: _FrameMemory, fboffset: int, cur_x: int, aa_mode: int,
    dither_filter_enable: bool, hres: int, fetchstate: int,
) -> Rgba:
    """Fetch one 32-bit pixel and apply the restore or anti-alias filter; ``a`` is coverage."""
    idx = ((fboffset >> 2) + cur_x) & _U32
    pix = memory.read32(idx)
    cvg = (pix >> 5) & 7 if aa_mode <= _AA_RESAMP_EXTRA else 7

    r, g, b = _rgba32(pix)
    if cvg == 7:
        if dither_filter_enable:
            r, g, b = restore_filter32(memory, r, g, b, fboffset, cur_x, hres, fetchstate)
    else:
        r, g, b = video_filter32(memory, r, g, b, fboffset, cur_x, hres, cvg, fetchstate)
    return Rgba(r & 0xFF, g & 0xFF, b & 0xFF, cvg)