import random

import pytest

from rdpvideo.tmem import TexelFormat, Texel, Tile, Tmem, fetch_texel
from rdpvideo.tmem_quadro import fetch_texel_quadro

YUV_FORMATS = (TexelFormat.YUV4, TexelFormat.YUV8, TexelFormat.YUV16, TexelFormat.YUV32)
SIMPLE_FORMATS = [fmt for fmt in TexelFormat if fmt not in YUV_FORMATS]

FOOTPRINTS = [(0, 1, 0, 1), (5, 1, 3, 1), (17, 0, 8, 0), (30, 1, 254, 1), (2, 1, 7, 0)]


@pytest.fixture
def tmem():
    rng = random.Random(1234)
    return Tmem(bytes(rng.randrange(256) for _ in range(0x1000)))


@pytest.fixture
def tile():
    return Tile(line=3, tmem=0x21, palette=5)


def _single(tmem, tile, fmt, s0, sdiff, t0, tdiff):
    return tuple(
        fetch_texel(tmem, tile, s, t, fmt)
        for t in (t0, t0 + tdiff)
        for s in (s0, s0 + sdiff)
    )


@pytest.mark.parametrize("fmt", SIMPLE_FORMATS)
@pytest.mark.parametrize("s0,sdiff,t0,tdiff", FOOTPRINTS)
def test_simple_formats_match_single_fetches(tmem, tile, fmt, s0, sdiff, t0, tdiff):
    quad = fetch_texel_quadro(tmem, tile, s0, sdiff, t0, tdiff, fmt, False)
    assert quad == _single(tmem, tile, fmt, s0, sdiff, t0, tdiff)


@pytest.mark.parametrize("fmt", YUV_FORMATS)
@pytest.mark.parametrize("s0,t0,tdiff", [(0, 0, 1), (3, 5, 1), (12, 100, 0)])
def test_yuv_without_column_step_matches_single_fetches(tmem, tile, fmt, s0, t0, tdiff):
    quad = fetch_texel_quadro(tmem, tile, s0, 0, t0, tdiff, fmt, False)
    assert quad == _single(tmem, tile, fmt, s0, 0, t0, tdiff)


@pytest.mark.parametrize("fmt", [TexelFormat.YUV4, TexelFormat.YUV8])
@pytest.mark.parametrize("s0,sdiff,t0,tdiff", FOOTPRINTS)
def test_packed_yuv_second_column_steps_twice(tmem, tile, fmt, s0, sdiff, t0, tdiff):
    quad = fetch_texel_quadro(tmem, tile, s0, sdiff, t0, tdiff, fmt, False)
    s_far = s0 + 2 * sdiff
    assert quad[0] == fetch_texel(tmem, tile, s0, t0, fmt)
    assert quad[1] == fetch_texel(tmem, tile, s_far, t0, fmt)
    assert quad[2] == fetch_texel(tmem, tile, s0, t0 + tdiff, fmt)
    assert quad[3] == fetch_texel(tmem, tile, s_far, t0 + tdiff, fmt)


@pytest.mark.parametrize("fmt", [TexelFormat.YUV4, TexelFormat.YUV8])
def test_unequal_uppers_reverses_luma(tmem, tile, fmt):
    plain = fetch_texel_quadro(tmem, tile, 4, 1, 9, 1, fmt, False)
    swapped = fetch_texel_quadro(tmem, tile, 4, 1, 9, 1, fmt, True)
    for i in range(4):
        assert (swapped[i].r, swapped[i].g) == (plain[i].r, plain[i].g)
        assert (swapped[i].b, swapped[i].a) == (plain[3 - i].b, plain[3 - i].a)


@pytest.mark.parametrize("s0,sdiff,t0,tdiff", FOOTPRINTS)
def test_yuv16_left_column_and_luma_match_single_fetch(tmem, tile, s0, sdiff, t0, tdiff):
    quad = fetch_texel_quadro(tmem, tile, s0, sdiff, t0, tdiff, TexelFormat.YUV16, False)
    single = _single(tmem, tile, TexelFormat.YUV16, s0, sdiff, t0, tdiff)
    assert quad[0] == single[0]
    assert quad[2] == single[2]
    assert quad[1].b == single[1].b
    assert quad[3].a == single[3].a


@pytest.mark.parametrize("s0,sdiff,t0,tdiff", FOOTPRINTS)
def test_yuv32_left_column_matches_single_fetch(tmem, tile, s0, sdiff, t0, tdiff):
    quad = fetch_texel_quadro(tmem, tile, s0, sdiff, t0, tdiff, TexelFormat.YUV32, False)
    single = _single(tmem, tile, TexelFormat.YUV32, s0, sdiff, t0, tdiff)
    assert quad[0] == single[0]
    assert quad[2] == single[2]


def test_unequal_uppers_ignored_for_simple_formats(tmem, tile):
    for fmt in SIMPLE_FORMATS:
        assert fetch_texel_quadro(tmem, tile, 6, 1, 2, 1, fmt, True) == (
            fetch_texel_quadro(tmem, tile, 6, 1, 2, 1, fmt, False)
        )


def test_undefined_format_decodes_like_i16(tmem, tile):
    assert fetch_texel_quadro(tmem, tile, 3, 1, 4, 1, 0x1F, False) == (
        fetch_texel_quadro(tmem, tile, 3, 1, 4, 1, TexelFormat.I16, False)
    )


def test_rgba16_all_ones_is_opaque_white():
    memory = Tmem(b"\xff" * 0x1000)
    quad = fetch_texel_quadro(memory, Tile(line=2), 1, 1, 1, 1, TexelFormat.RGBA16, False)
    assert quad == (Texel(255, 255, 255, 255),) * 4


def test_yuv8_zero_memory_has_centred_chroma():
    quad = fetch_texel_quadro(Tmem(), Tile(), 0, 1, 0, 1, TexelFormat.YUV8, False)
    assert quad == (Texel(-128, -128, 0, 0),) * 4


def test_ci4_uses_palette_as_high_nibble():
    quad = fetch_texel_quadro(Tmem(), Tile(palette=5), 0, 1, 0, 1, TexelFormat.CI4, False)
    assert all(texel.r == texel.a == 5 << 4 for texel in quad)


@pytest.mark.parametrize("fmt", [-1, 0x20, 0x100])
def test_format_out_of_range_raises(tmem, tile, fmt):
    with pytest.raises(ValueError):
        fetch_texel_quadro(tmem, tile, 0, 1, 0, 1, fmt, False)