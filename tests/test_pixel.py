import pytest

from rdpvideo.pixel import (
    FrameBuffer,
    Rgba,
    divot_filter,
    gamma_filter,
    integer_sqrt,
    vl_lerp,
)


def test_rgba_defaults_are_zero():
    assert Rgba() == Rgba(0, 0, 0, 0)


def test_frame_buffer_defaults():
    fb = FrameBuffer()
    assert (fb.pixels, fb.width, fb.height, fb.height_out, fb.pitch, fb.offset) == (
        [], 0, 0, 0, 0, 0
    )


def test_divot_fully_covered_keeps_center():
    center = Rgba(10, 200, 50, 7)
    left = Rgba(20, 100, 60, 7)
    right = Rgba(30, 150, 40, 7)
    assert divot_filter(center, left, right) == center


@pytest.mark.parametrize(
    "center,left,right",
    [
        (Rgba(10, 200, 50, 3), Rgba(20, 100, 60, 7), Rgba(30, 150, 40, 7)),
        (Rgba(255, 0, 128, 0), Rgba(0, 255, 128, 0), Rgba(128, 128, 0, 0)),
        (Rgba(5, 5, 5, 6), Rgba(5, 9, 1, 7), Rgba(1, 5, 9, 7)),
    ],
)
def test_divot_takes_median(center, left, right):
    result = divot_filter(center, left, right)
    for channel in "rgb":
        values = sorted(getattr(p, channel) for p in (center, left, right))
        assert getattr(result, channel) == values[1]
    assert result.a == center.a


def test_lerp_zero_fraction_is_identity():
    up = Rgba(1, 2, 3, 4)
    assert vl_lerp(up, Rgba(200, 200, 200, 0), 0) is up


@pytest.mark.parametrize("frac", range(32))
def test_lerp_stays_between_endpoints(frac):
    up = Rgba(10, 200, 100, 5)
    down = Rgba(250, 0, 100, 1)
    result = vl_lerp(up, down, frac)
    assert min(up.r, down.r) <= result.r <= max(up.r, down.r)
    assert min(up.g, down.g) <= result.g <= max(up.g, down.g)
    assert result.b == 100
    assert result.a == up.a


def test_lerp_monotonic_in_fraction():
    up = Rgba(0, 0, 0, 0)
    down = Rgba(255, 255, 255, 0)
    reds = [vl_lerp(up, down, frac).r for frac in range(32)]
    assert reds == sorted(reds)


@pytest.mark.parametrize("a", [0, 1, 2, 3, 4, 15, 16, 17, 1 << 20, 0xFFFFFFFF])
def test_integer_sqrt_is_floor_sqrt(a):
    root = integer_sqrt(a)
    assert root * root <= a < (root + 1) * (root + 1)


@pytest.mark.parametrize("a", [-1, 1 << 32])
def test_integer_sqrt_range(a):
    with pytest.raises(ValueError):
        integer_sqrt(a)


def test_gamma_disabled_is_identity():
    pixel = Rgba(12, 34, 56, 7)
    assert gamma_filter(pixel, False, False, 0x7FFF) == pixel


def test_gamma_table_endpoints():
    assert gamma_filter(Rgba(0, 0, 0, 0), True, False, 0) == Rgba(0, 0, 0, 0)
    assert gamma_filter(Rgba(255, 255, 255, 3), True, False, 0) == Rgba(254, 254, 254, 3)


def test_gamma_is_monotonic():
    values = [gamma_filter(Rgba(v, v, v, 0), True, False, 0).r for v in range(256)]
    assert values == sorted(values)


@pytest.mark.parametrize("seed", [0, 1, 2, 4, 7, 0x1234])
def test_dither_adds_at_most_one(seed):
    pixel = Rgba(10, 100, 254, 2)
    result = gamma_filter(pixel, False, True, seed)
    for channel in "rgb":
        assert getattr(result, channel) - getattr(pixel, channel) in (0, 1)
    assert result.a == pixel.a


def test_dither_never_exceeds_255():
    pixel = Rgba(255, 255, 255, 0)
    assert gamma_filter(pixel, False, True, 7) == pixel


@pytest.mark.parametrize("seed", [0, 0x3F, 0xFFFF, 0x5A5A])
def test_gamma_dither_stays_in_range(seed):
    for value in (0, 64, 128, 255):
        result = gamma_filter(Rgba(value, value, value, 1), True, True, seed)
        for channel in "rgb":
            out = getattr(result, channel)
            assert 0 <= out <= 254 and out % 2 == 0