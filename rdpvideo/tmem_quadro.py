"""Bilinear texel fetches: the four texels of a 2x2 footprint in one call."""

from __future__ import annotations

from collections.abc import Callable

from rdpvideo.tmem import (
    BYTE_ADDR_XOR,
    BYTE_XOR_DWORD_SWAP,
    WORD_ADDR_XOR,
    WORD_XOR_DWORD_SWAP,
    Texel,
    TexelFormat,
    Tile,
    Tmem,
    _FETCHERS,
    _fetch_16bit_pair,
)

_U32 = 0xFFFFFFFF

Quad = tuple[Texel, Texel, Texel, Texel]


def _byte_xor(t: int) -> int:
    return BYTE_XOR_DWORD_SWAP if t & 1 else BYTE_ADDR_XOR


def _word_xor(t: int) -> int:
    return WORD_XOR_DWORD_SWAP if t & 1 else WORD_ADDR_XOR


def _byte_addr(tbase: int, s: int, t: int) -> int:
    return (((tbase << 3) + s) & _U32) ^ _byte_xor(t)


def _nibble_addr(tbase: int, s: int, t: int) -> int:
    return ((((tbase << 4) + s) & _U32) >> 1) ^ _byte_xor(t)


class _Footprint:
    """Row bases and coordinates of the four texels of a 2x2 footprint."""

    __slots__ = ("tbase0", "tbase2", "s0", "s1", "sdiff", "t0", "t1")

    def __init__(
        self, tbase0: int, tbase2: int, s0: int, s1: int, sdiff: int, t0: int, t1: int
    ) -> None:
        self.tbase0 = tbase0
        self.tbase2 = tbase2
        self.s0 = s0
        self.s1 = s1
        self.sdiff = sdiff
        self.t0 = t0
        self.t1 = t1

    def corners(self, column_offset: int = 0) -> tuple[tuple[int, int, int, int], ...]:
        """(tbase, s, t, column) for texels 0..3; column 1 is shifted by ``column_offset``."""
        s1 = self.s1 + column_offset
        return (
            (self.tbase0, self.s0, self.t0, 0),
            (self.tbase0, s1, self.t0, 1),
            (self.tbase2, self.s0, self.t1, 0),
            (self.tbase2, s1, self.t1, 1),
        )


def _quadro_ci4(tmem: Tmem, tile: Tile, fp: _Footprint, unequal_uppers: bool) -> Quad:
    def fetch(tbase: int, s: int, t: int) -> Texel:
        byte = tmem[_nibble_addr(tbase, s, t) & 0xFFF]
        value = (tile.palette << 4) | (byte & 0xF if s & 1 else byte >> 4)
        return Texel(value, value, value, value)

    a, b, c, d = (fetch(tbase, s, t) for tbase, s, t, _ in fp.corners())
    return a, b, c, d


def _quadro_yuv_packed(
    tmem: Tmem, fp: _Footprint, unequal_uppers: bool, nibble: bool
) -> Quad:
    saves = []
    for tbase, s, t, _ in fp.corners(fp.sdiff):
        save = tmem[_byte_addr(tbase, s, t) & 0x7FF]
        if nibble:
            save &= 0xF0
            save |= save >> 4
        saves.append(save)
    lumas = saves[::-1] if unequal_uppers else saves
    a, b, c, d = (Texel(save - 0x80, save - 0x80, y, y) for save, y in zip(saves, lumas))
    return a, b, c, d


def _quadro_yuv4(tmem: Tmem, tile: Tile, fp: _Footprint, unequal_uppers: bool) -> Quad:
    return _quadro_yuv_packed(tmem, fp, unequal_uppers, nibble=True)


def _quadro_yuv8(tmem: Tmem, tile: Tile, fp: _Footprint, unequal_uppers: bool) -> Quad:
    return _quadro_yuv_packed(tmem, fp, unequal_uppers, nibble=False)


def _chroma_addr(taddr: int, column: int, sdiff: int, t: int) -> int:
    extra = sdiff if column else 0
    return ((((taddr + extra) & _U32) >> 1) ^ _word_xor(t)) & 0x3FF


def _quadro_yuv16(tmem: Tmem, tile: Tile, fp: _Footprint, unequal_uppers: bool) -> Quad:
    texels = []
    for tbase, s, t, column in fp.corners():
        taddr = ((tbase << 3) + s) & _U32
        c = tmem.read16(_chroma_addr(taddr, column, fp.sdiff, t))
        y = tmem[((taddr ^ _byte_xor(t)) & 0x7FF) | 0x800]
        texels.append(Texel((c >> 8) - 0x80, (c & 0xFF) - 0x80, y, y))
    a, b, c, d = texels
    return a, b, c, d


def _quadro_yuv32(tmem: Tmem, tile: Tile, fp: _Footprint, unequal_uppers: bool) -> Quad:
    texels = []
    for tbase, s, t, column in fp.corners():
        taddr = ((tbase << 3) + s) & _U32
        low = _chroma_addr(taddr, column, fp.sdiff, t)
        c = tmem.read16(low)
        u = (c >> 8) - 0x80
        v = (c & 0xFF) - 0x80
        if s & 1:
            y = tmem[((taddr ^ _byte_xor(t)) & 0x7FF) | 0x800]
            texels.append(Texel(u, v, y, y))
            continue
        if column:
            low = ((taddr ^ _byte_xor(t)) >> 1) & 0x3FF
        y = tmem.read16(low | 0x400)
        texels.append(Texel(u, v, y >> 8, ((y >> 8) & 0xF) | (y & 0xF0)))
    a, b, c, d = texels
    return a, b, c, d


_QuadFetcher = Callable[[Tmem, Tile, _Footprint, bool], Quad]

_QUAD_FETCHERS: dict[int, _QuadFetcher] = {
    TexelFormat.YUV4: _quadro_yuv4,
    TexelFormat.YUV8: _quadro_yuv8,
    TexelFormat.YUV16: _quadro_yuv16,
    TexelFormat.YUV32: _quadro_yuv32,
    TexelFormat.CI4: _quadro_ci4,
}


def fetch_texel_quadro(
    tmem: Tmem,
    tile: Tile,
    s0: int,
    sdiff: int,
    t0: int,
    tdiff: int,
    texel_format: int,
    unequal_uppers: bool,
) -> Quad:
    """Fetch the texels at (s0, t0), (s0+sdiff, t0), (s0, t1) and (s0+sdiff, t1).

    ``t1`` is ``(t0 & 0xff) + tdiff``. For packed YUV formats ``unequal_uppers``
    reverses which texel's luma goes with which chroma. Format codes beyond
    the defined ones (up to 0x1f) decode like 16-bit intensity.
    """
    if not 0 <= texel_format <= 0x1F:
        raise ValueError(f"texel format code out of range: {texel_format}")

    row0 = t0 & 0xFF
    t1 = row0 + tdiff
    footprint = _Footprint(
        tbase0=(tile.line * row0 + tile.tmem) & _U32,
        tbase2=(tile.line * t1 + tile.tmem) & _U32,
        s0=s0,
        s1=s0 + sdiff,
        sdiff=sdiff,
        t0=t0,
        t1=t1,
    )

    special = _QUAD_FETCHERS.get(texel_format)
    if special is not None:
        return special(tmem, tile, footprint, bool(unequal_uppers))

    fetch = _FETCHERS.get(texel_format, _fetch_16bit_pair)
    a, b, c, d = (fetch(tmem, tile, tbase, s, t) for tbase, s, t, _ in footprint.corners())
    return a, b, c, d