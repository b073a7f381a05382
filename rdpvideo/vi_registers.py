"""Video interface register layout, configuration and decoded control bits."""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields

# anamorphic NTSC and PAL resolutions
H_RES_NTSC = 640
V_RES_NTSC = 480
H_RES_PAL = 768
V_RES_PAL = 576

# typical VI_V_SYNC values for NTSC and PAL
V_SYNC_NTSC = 525
V_SYNC_PAL = 625

# maximum possible size of the prescale area
PRESCALE_WIDTH = H_RES_NTSC
PRESCALE_HEIGHT = V_SYNC_PAL


class ViMode(enum.IntEnum):
    """What the video output shows."""

    NORMAL = 0
    COLOR = 1
    DEPTH = 2
    COVERAGE = 3


class ViType(enum.IntEnum):
    """Frame buffer pixel format selected in the control register."""

    BLANK = 0
    RESERVED = 1
    RGBA5551 = 2
    RGBA8888 = 3


class ViAaMode(enum.IntEnum):
    """Anti-aliasing and resampling mode."""

    RESAMP_EXTRA_ALWAYS = 0
    RESAMP_EXTRA = 1
    RESAMP_ONLY = 2
    REPLICATE = 3


@dataclass
class ViConfig:
    """User options for video output."""

    mode: ViMode = ViMode.NORMAL
    widescreen: bool = False
    hide_overscan: bool = False
    parallel: bool = False

    def __post_init__(self) -> None:
        try:
            self.mode = ViMode(self.mode)
        except ValueError:
            raise ValueError(f"Invalid VI mode: {self.mode}") from None


@dataclass
class ViRegisters:
    """Raw 32-bit values of the video interface registers."""

    status: int = 0
    origin: int = 0
    width: int = 0
    v_current_line: int = 0
    v_sync: int = 0
    h_start: int = 0
    v_start: int = 0
    x_scale: int = 0
    y_scale: int = 0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not 0 <= value <= 0xFFFFFFFF:
                raise ValueError(f"register {item.name} out of 32-bit range: {value}")


@dataclass(frozen=True)
class ViControl:
    """The bit fields of the VI control register."""

    type: ViType = ViType.BLANK
    gamma_dither_enable: bool = False
    gamma_enable: bool = False
    divot_enable: bool = False
    vbus_clock_enable: bool = False
    serrate: bool = False
    test_mode: bool = False
    aa_mode: ViAaMode = ViAaMode.RESAMP_EXTRA_ALWAYS
    reserved: bool = False
    kill_we: bool = False
    pixel_advance: int = 0
    dither_filter_enable: bool = False

    @classmethod
    def from_register(cls, value: int) -> ViControl:
        """Split a raw control register value into its fields."""
        return cls(
            type=ViType(value & 3),
            gamma_dither_enable=bool((value >> 2) & 1),
            gamma_enable=bool((value >> 3) & 1),
            divot_enable=bool((value >> 4) & 1),
            vbus_clock_enable=bool((value >> 5) & 1),
            serrate=bool((value >> 6) & 1),
            test_mode=bool((value >> 7) & 1),
            aa_mode=ViAaMode((value >> 8) & 3),
            reserved=bool((value >> 9) & 1),
            kill_we=bool((value >> 10) & 1),
            pixel_advance=(value >> 12) & 0xF,
            dither_filter_enable=bool((value >> 16) & 1),
        )