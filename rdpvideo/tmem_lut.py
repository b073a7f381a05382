"""Palette (TLUT) texel fetches and the bank-sorted reads used by copy mode."""

from __future__ import annotations

from collections.abc import Sequence

from rdpvideo.tmem import (
    FORMAT_YUV,
    PIXEL_SIZE_4BIT,
    PIXEL_SIZE_8BIT,
    PIXEL_SIZE_16BIT,
    WORD_ADDR_XOR,
    Texel,
    Tile,
    Tmem,
    _REPLICATED_RGBA,
    _byte_addr,
    _nibble_addr,
    _word_addr,
)

_U32 = 0xFFFFFFFF
_TLUT_BASE = 0x400
_WORD_INDEX_SWITCHES = frozenset((8, 9, 10, 12, 13, 14))
_DOUBLE_STEP_SWITCHES = frozenset((3, 7, 11, 15))

Quad = tuple[Texel, Texel, Texel, Texel]


def _check_switch(tlut_switch: int) -> None:
    if not 0 <= tlut_switch <= 0xF:
        raise ValueError(f"tlut switch out of range: {tlut_switch}")


def _lut_base(tmem: Tmem, tile: Tile, tlut_switch: int, tbase: int, s: int, t: int) -> int:
    """Palette entry address (before the per-texel bank offset) of one texel."""
    if tlut_switch <= 2:
        byte = tmem[_nibble_addr(tbase, s, t) & 0x7FF]
        c = byte & 0xF if s & 1 else byte >> 4
        return ((tile.palette << 4) | c) << 2
    if tlut_switch == 3:
        c = tmem[_byte_addr(tbase, s, t) & 0x7FF] >> 4
        return ((tile.palette << 4) | c) << 2
    if tlut_switch in _WORD_INDEX_SWITCHES:
        c = tmem.read16(_word_addr(tbase, s, t) & 0x3FF)
        return (c >> 6) & ~3
    return tmem[_byte_addr(tbase, s, t) & 0x7FF] << 2


def _read_tlut(tmem: Tmem, index: int, xor: int) -> int:
    return tmem.read16(_TLUT_BASE + ((index ^ xor) & 0x3FF))


def _decode(entries: Sequence[int], tlut_type: int, swap: bool) -> Quad:
    others = entries[::-1] if swap else entries
    if not tlut_type:
        texels = [
            Texel(
                _REPLICATED_RGBA[c >> 11],
                _REPLICATED_RGBA[(c >> 6) & 0x1F],
                _REPLICATED_RGBA[(o >> 1) & 0x1F],
                0xFF if o & 1 else 0,
            )
            for c, o in zip(entries, others)
        ]
    else:
        texels = [Texel(c >> 8, c >> 8, o >> 8, o & 0xFF) for c, o in zip(entries, others)]
    a, b, c, d = texels
    return a, b, c, d


def _upper_xor(isupperrg: int) -> int:
    return (WORD_ADDR_XOR ^ 3) if isupperrg else WORD_ADDR_XOR


def fetch_texel_entlut_quadro(
    tmem: Tmem,
    tile: Tile,
    s0: int,
    sdiff: int,
    t0: int,
    tdiff: int,
    tlut_switch: int,
    tlut_type: int,
    isupper: int,
    isupperrg: int,
) -> Quad:
    """Fetch a 2x2 footprint of palette texels and look them up in the TLUT.

    ``tlut_type`` false decodes entries as RGBA5551, true as IA88. When
    ``isupper`` differs from ``isupperrg`` blue and alpha come from the
    diagonally opposite texel.
    """
    _check_switch(tlut_switch)
    row0 = t0 & 0xFF
    t1 = row0 + tdiff
    tbase0 = (tile.line * row0 + tile.tmem) & _U32
    tbase2 = (tile.line * t1 + tile.tmem) & _U32
    step = sdiff << 1 if tlut_switch in _DOUBLE_STEP_SWITCHES else sdiff
    s1 = s0 + step

    corners = ((tbase0, s0, t0), (tbase0, s1, t0), (tbase2, s0, t1), (tbase2, s1, t1))
    xor = _upper_xor(isupperrg)
    entries = [
        _read_tlut(tmem, _lut_base(tmem, tile, tlut_switch, tbase, s, t) + k, xor)
        for k, (tbase, s, t) in enumerate(corners)
    ]
    return _decode(entries, tlut_type, isupper != isupperrg)


def fetch_texel_entlut_quadro_nearest(
    tmem: Tmem,
    tile: Tile,
    s0: int,
    t0: int,
    tlut_switch: int,
    tlut_type: int,
    isupper: int,
    isupperrg: int,
) -> Quad:
    """Fetch one palette texel and return its four TLUT bank entries decoded."""
    _check_switch(tlut_switch)
    tbase0 = (tile.line * t0 + tile.tmem) & _U32
    base = _lut_base(tmem, tile, tlut_switch, tbase0, s0, t0)
    xor = _upper_xor(isupperrg)
    entries = [_read_tlut(tmem, base + k, xor) for k in range(4)]
    return _decode(entries, tlut_type, isupper != isupperrg)


def sort_tmem_idx(indices: Sequence[int], bankno: int) -> int:
    """Return the first of four indices that falls in bank ``bankno``, masked to 10 bits."""
    if len(indices) != 4:
        raise ValueError(f"exactly four indices are required, got {len(indices)}")
    if not 0 <= bankno <= 3:
        raise ValueError(f"bank number out of range: {bankno}")
    for index in indices:
        if (index & 3) == bankno:
            return index & 0x3FF
    return 0


def compute_color_index(tile: Tile, readshort: int, nybbleoffset: int) -> int:
    """Extract the 8-bit colour index for a texel from a fetched halfword."""
    if tile.size == PIXEL_SIZE_4BIT:
        shift = (nybbleoffset ^ 3) << 2
        hinib = tile.palette
    else:
        shift = ((nybbleoffset & 2) ^ 2) << 2
        hinib = (readshort >> 12) & 0xF if shift else (readshort >> 4) & 0xF
    lownib = (readshort >> shift) & 0xF
    return ((hinib << 4) | lownib) & _U32


def _shift_for(tile: Tile, narrow: int, wide: int, small: int) -> int:
    if tile.size == PIXEL_SIZE_8BIT or tile.format == FORMAT_YUV:
        return narrow
    if tile.size >= PIXEL_SIZE_16BIT:
        return wide
    return small


def get_tmem_idx(tile: Tile, s: int, t: int) -> tuple[int, int, int, int, int, int]:
    """Return the halfword index for each of the four banks, then bit3flipped and hibit."""
    tbase = ((tile.line * t) & 0x1FF) + tile.tmem
    if tile.size == PIXEL_SIZE_8BIT or tile.format == FORMAT_YUV:
        sshorts = s >> 1
    elif tile.size >= PIXEL_SIZE_16BIT:
        sshorts = s
    else:
        sshorts = s >> 2
    sshorts &= 0x7FF

    bit3flipped = int(bool(sshorts & 2)) ^ (t & 1)

    tidx_a = ((tbase << 2) + sshorts) & 0x7FD
    tidx = [tidx_a] + [(tidx_a + k) & 0x7FF for k in (1, 2, 3)]
    hibit = int(bool(tidx_a & 0x400))
    if t & 1:
        tidx = [index ^ 2 for index in tidx]

    idx0, idx1, idx2, idx3 = (sort_tmem_idx(tidx, bank) for bank in range(4))
    return idx0, idx1, idx2, idx3, bit3flipped, hibit


def read_tmem_copy(
    tmem: Tmem,
    tile: Tile,
    s: int,
    s1: int,
    s2: int,
    s3: int,
    t: int,
    en_tlut: bool,
) -> tuple[tuple[int, ...], tuple[int, ...], tuple[int, ...]]:
    """Read the halfwords of four copy-mode texels from both halves of texture memory.

    Returns ``(sortshort, hibits, lowbits)``: eight halfwords (four from the
    low half, four from the high half or the TLUT), and six high-bit flags
    and six low nibbles of the byte addresses used.
    """
    shift = 1 if (tile.size == PIXEL_SIZE_8BIT or tile.format == FORMAT_YUV) else (
        2 if tile.size >= PIXEL_SIZE_16BIT else 0
    )
    sh0, sh1, sh2, sh3 = ((x << shift) & 0x1FFF for x in (s, s1, s2, s3))

    tbase = (((tile.line * t) & 0x1FF) + tile.tmem) << 4
    tidx_a = (tbase + sh0) & 0x1FFF
    tidx_bhi = (tbase + sh1) & 0x1FFF
    tidx_c = (tbase + sh2) & 0x1FFF
    tidx_dhi = (tbase + sh3) & 0x1FFF

    if tile.format == FORMAT_YUV:
        delta = sh1 - sh0
        tidx_blow = (tidx_a + (delta << 1)) & 0x1FFF
        tidx_dlow = (tidx_blow + sh3 - sh0) & 0x1FFF
    else:
        tidx_blow = tidx_bhi
        tidx_dlow = tidx_dhi

    addresses = [tidx_a, tidx_blow, tidx_bhi, tidx_c, tidx_dlow, tidx_dhi]
    if t & 1:
        addresses = [address ^ 8 for address in addresses]

    hibits = tuple(int(bool(address & 0x1000)) for address in addresses)
    lowbits = tuple(address & 0xF for address in addresses)

    w_a, w_blow, w_bhi, w_c, w_dlow, w_dhi = (address >> 2 for address in addresses)

    lower_set = (w_a, w_blow, w_c, w_dlow)
    lower_shorts = [
        tmem.read16(sort_tmem_idx(lower_set, bank) ^ WORD_ADDR_XOR) for bank in range(4)
    ]
    lower_sorted = [lower_shorts[lowbits[j] >> 2] for j in (0, 1, 3, 4)]

    if en_tlut:
        upper_idx = [
            (compute_color_index(tile, short, lowbits[j] & 3) << 2) | bank
            for bank, (short, j) in enumerate(zip(lower_sorted, (0, 1, 3, 4)))
        ]
    else:
        upper_set = (w_a, w_bhi, w_c, w_dhi)
        upper_idx = [sort_tmem_idx(upper_set, bank) for bank in range(4)]

    upper_shorts = [tmem.read16((index | 0x400) ^ WORD_ADDR_XOR) for index in upper_idx]
    if en_tlut:
        upper_sorted = upper_shorts
    else:
        upper_sorted = [upper_shorts[lowbits[j] >> 2] for j in (0, 2, 3, 5)]

    return tuple(lower_sorted + upper_sorted), hibits, lowbits