"""Texture memory and single-texel fetches for every texel format."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

TMEM_SIZE = 0x1000
TMEM_WORDS = TMEM_SIZE // 2

# Address swizzles of the little-endian storage: bytes and halfwords are
# swapped within each 32-bit word, and odd rows are also dword-swapped.
BYTE_ADDR_XOR = 3
WORD_ADDR_XOR = 1
BYTE_XOR_DWORD_SWAP = 7
WORD_XOR_DWORD_SWAP = 3

PIXEL_SIZE_4BIT = 0
PIXEL_SIZE_8BIT = 1
PIXEL_SIZE_16BIT = 2
PIXEL_SIZE_32BIT = 3

FORMAT_RGBA = 0
FORMAT_YUV = 1
FORMAT_CI = 2
FORMAT_IA = 3
FORMAT_I = 4

_U32 = 0xFFFFFFFF


class TexelFormat(enum.IntEnum):
    """Texel format and size combined as ``(format << 2) | size``."""

    RGBA4 = 0
    RGBA8 = 1
    RGBA16 = 2
    RGBA32 = 3
    YUV4 = 4
    YUV8 = 5
    YUV16 = 6
    YUV32 = 7
    CI4 = 8
    CI8 = 9
    CI16 = 10
    CI32 = 11
    IA4 = 12
    IA8 = 13
    IA16 = 14
    IA32 = 15
    I4 = 16
    I8 = 17
    I16 = 18
    I32 = 19


@dataclass
class Tile:
    """A tile descriptor: where its texels live in texture memory and how."""

    format: int = FORMAT_RGBA
    size: int = PIXEL_SIZE_4BIT
    line: int = 0
    tmem: int = 0
    palette: int = 0


@dataclass(frozen=True)
class Texel:
    """A fetched texel; YUV formats may hold negative chroma values."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0


class Tmem:
    """4 KiB of texture memory stored as little-endian 32-bit words.

    Byte ``i`` of the store is reached by ``tmem[i]`` and halfword ``i``
    (bytes ``2i`` and ``2i + 1``, little-endian) by ``read16(i)``.
    """

    def __init__(self, data: bytes | bytearray | None = None) -> None:
        if data is None:
            data = bytes(TMEM_SIZE)
        if len(data) != TMEM_SIZE:
            raise ValueError(
                f"texture memory must be {TMEM_SIZE} bytes, got {len(data)}"
            )
        self._data = bytes(data)

    def __len__(self) -> int:
        return TMEM_SIZE

    def __bytes__(self) -> bytes:
        return self._data

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < TMEM_SIZE:
            raise IndexError(f"texture memory byte index out of range: {index}")
        return self._data[index]

    def read16(self, index: int) -> int:
        """Return the 16-bit halfword at halfword ``index``."""
        if not 0 <= index < TMEM_WORDS:
            raise IndexError(f"texture memory halfword index out of range: {index}")
        return int.from_bytes(self._data[2 * index:2 * index + 2], "little")


_REPLICATED_RGBA = tuple((i << 3) | ((i >> 2) & 7) for i in range(32))


def replicate_rgba16(value: int) -> int:
    """Expand a 5-bit colour component to 8 bits by bit replication."""
    if not 0 <= value < 32:
        raise ValueError(f"5-bit component out of range: {value}")
    return _REPLICATED_RGBA[value]


def _byte_xor(t: int) -> int:
    return BYTE_XOR_DWORD_SWAP if t & 1 else BYTE_ADDR_XOR


def _word_xor(t: int) -> int:
    return WORD_XOR_DWORD_SWAP if t & 1 else WORD_ADDR_XOR


def _nibble_addr(tbase: int, s: int, t: int) -> int:
    return ((((tbase << 4) + s) & _U32) >> 1) ^ _byte_xor(t)


def _byte_addr(tbase: int, s: int, t: int) -> int:
    return (((tbase << 3) + s) & _U32) ^ _byte_xor(t)


def _word_addr(tbase: int, s: int, t: int) -> int:
    return (((tbase << 2) + s) & _U32) ^ _word_xor(t)


def _nibble(tmem: Tmem, tbase: int, s: int, t: int) -> int:
    byte = tmem[_nibble_addr(tbase, s, t) & 0xFFF]
    return byte & 0xF if s & 1 else byte >> 4


def _grey(value: int) -> Texel:
    return Texel(value, value, value, value)


def _fetch_4bit_grey(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    c = _nibble(tmem, tbase, s, t)
    return _grey((c | (c << 4)) & 0xFF)


def _fetch_8bit_grey(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    return _grey(tmem[_byte_addr(tbase, s, t) & 0xFFF])


def _fetch_rgba16(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    c = tmem.read16(_word_addr(tbase, s, t) & 0x7FF)
    return Texel(
        _REPLICATED_RGBA[c >> 11],
        _REPLICATED_RGBA[(c >> 6) & 0x1F],
        _REPLICATED_RGBA[(c >> 1) & 0x1F],
        0xFF if c & 1 else 0,
    )


def _fetch_rgba32(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    addr = _word_addr(tbase, s, t) & 0x3FF
    low = tmem.read16(addr)
    high = tmem.read16(addr | 0x400)
    return Texel(low >> 8, low & 0xFF, high >> 8, high & 0xFF)


def _fetch_yuv4(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    save = tmem[_byte_addr(tbase, s, t) & 0x7FF] & 0xF0
    save |= save >> 4
    u = save - 0x80
    return Texel(u, u, save, save)


def _fetch_yuv8(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    save = tmem[_byte_addr(tbase, s, t) & 0x7FF]
    u = save - 0x80
    return Texel(u, u, save, save)


def _chroma(tmem: Tmem, taddr: int, t: int) -> tuple[int, int, int]:
    low = ((taddr >> 1) ^ _word_xor(t)) & 0x3FF
    c = tmem.read16(low)
    return low, (c >> 8) - 0x80, (c & 0xFF) - 0x80


def _fetch_yuv16(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    taddr = ((tbase << 3) + s) & _U32
    _, u, v = _chroma(tmem, taddr, t)
    y = tmem[((taddr ^ _byte_xor(t)) & 0x7FF) | 0x800]
    return Texel(u, v, y, y)


def _fetch_yuv32(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    taddr = ((tbase << 3) + s) & _U32
    low, u, v = _chroma(tmem, taddr, t)
    if s & 1:
        y = tmem[((taddr ^ _byte_xor(t)) & 0x7FF) | 0x800]
        return Texel(u, v, y, y)
    y = tmem.read16(low | 0x400)
    return Texel(u, v, y >> 8, ((y >> 8) & 0xF) | (y & 0xF0))


def _fetch_ci4(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    return _grey(((tile.palette << 4) | _nibble(tmem, tbase, s, t)) & 0xFF)


def _fetch_16bit_pair(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    c = tmem.read16(_word_addr(tbase, s, t) & 0x7FF)
    return Texel(c >> 8, c & 0xFF, c >> 8, c & 0xFF)


def _fetch_ia4(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    p = _nibble(tmem, tbase, s, t)
    i = p & 0xE
    i = ((i << 4) | (i << 1) | (i >> 2)) & 0xFF
    return Texel(i, i, i, 0xFF if p & 1 else 0)


def _fetch_ia8(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    p = tmem[_byte_addr(tbase, s, t) & 0xFFF]
    i = p & 0xF0
    i |= i >> 4
    return Texel(i, i, i, ((p & 0xF) << 4) | (p & 0xF))


def _fetch_ia16(tmem: Tmem, tile: Tile, tbase: int, s: int, t: int) -> Texel:
    c = tmem.read16(_word_addr(tbase, s, t) & 0x7FF)
    return Texel(c >> 8, c >> 8, c >> 8, c & 0xFF)


_Fetcher = Callable[[Tmem, Tile, int, int, int], Texel]

_FETCHERS: dict[int, _Fetcher] = {
    TexelFormat.RGBA4: _fetch_4bit_grey,
    TexelFormat.RGBA8: _fetch_8bit_grey,
    TexelFormat.RGBA16: _fetch_rgba16,
    TexelFormat.RGBA32: _fetch_rgba32,
    TexelFormat.YUV4: _fetch_yuv4,
    TexelFormat.YUV8: _fetch_yuv8,
    TexelFormat.YUV16: _fetch_yuv16,
    TexelFormat.YUV32: _fetch_yuv32,
    TexelFormat.CI4: _fetch_ci4,
    TexelFormat.CI8: _fetch_8bit_grey,
    TexelFormat.CI16: _fetch_16bit_pair,
    TexelFormat.CI32: _fetch_16bit_pair,
    TexelFormat.IA4: _fetch_ia4,
    TexelFormat.IA8: _fetch_ia8,
    TexelFormat.IA16: _fetch_ia16,
    TexelFormat.IA32: _fetch_16bit_pair,
    TexelFormat.I4: _fetch_4bit_grey,
    TexelFormat.I8: _fetch_8bit_grey,
    TexelFormat.I16: _fetch_16bit_pair,
    TexelFormat.I32: _fetch_16bit_pair,
}


def fetch_texel(tmem: Tmem, tile: Tile, s: int, t: int, texel_format: int) -> Texel:
    """Fetch the texel at ``(s, t)`` of ``tile``, decoded per ``texel_format``.

    Format codes beyond the defined ones (up to 0x1f) decode like 16-bit intensity.
    """
    if not 0 <= texel_format <= 0x1F:
        raise ValueError(f"texel format code out of range: {texel_format}")
    tbase = (tile.line * (t & 0xFF) + tile.tmem) & _U32
    fetcher = _FETCHERS.get(texel_format, _fetch_16bit_pair)
    return fetcher(tmem, tile, tbase, s, t)