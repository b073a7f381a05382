# rdpvideo

Pure-Python building blocks of a console display pipeline. It covers the
per-pixel stages of the video interface (VI), which read a framebuffer and
filter it for display. It also covers the texel fetches from texture memory
(TMEM) and the depth-buffer encoding and compare of the display processor.

The package has no dependencies outside the standard library.

## Modules

- `rdpvideo.pixel` provides the `Rgba` and `FrameBuffer` types and the
  per-pixel VI stages:
  - `divot_filter(center, left, right)`: a per-channel median of three.
  - `vl_lerp(up, down, frac)`: blends towards `down` by `frac`/32.
  - `integer_sqrt(a)`.
  - `gamma_filter(pixel, gamma_enable, gamma_dither_enable, noise_seed)`.
- `rdpvideo.vifilter` fetches framebuffer pixels and applies the
  anti-alias and dither restore filters. It provides `fetch_filter16`,
  `fetch_filter32`, `video_filter16`, `video_filter32`, `restore_filter16`,
  `restore_filter32` and `video_max_optimized`. The `memory` argument is any
  object that has these methods:
  - `read16(index)`
  - `read_pair16(index)`, which returns `(value, hidden_bits)`
  - `read32(index)`
- `rdpvideo.zbuffer` handles depth values. It provides `z_compress` and
  `z_decompress`, `dz_compress` and `dz_decompress`, `deltaz_compare`,
  `z_store` and `z_compare`, together with `ZMode`, `DepthState` and
  `ZCompareResult`. Its `memory` argument needs these methods:
  - `read_pair16(index)`
  - `write_pair16(index, value, hidden)`
- `rdpvideo.vi_registers` holds the layout of the VI registers. It provides
  the following:
  - `ViRegisters`, the raw register values.
  - `ViConfig`, the user options.
  - `ViControl.from_register`, which decodes the control register.
  - The enums `ViMode`, `ViType` and `ViAaMode`.
  - Constants for the NTSC and PAL resolutions and for the prescale area.
- `rdpvideo.tmem` provides the `Tmem` texture memory (4 KiB), the `Tile`
  descriptor, `Texel`, `TexelFormat`, `replicate_rgba16` and
  `fetch_texel(tmem, tile, s, t, texel_format)`.
- `rdpvideo.tmem_quadro` provides `fetch_texel_quadro`, which fetches the
  four texels of a 2x2 bilinear footprint.
- `rdpvideo.tmem_lut` covers palette (TLUT) lookups and copy-mode reads:
  - `fetch_texel_entlut_quadro`
  - `fetch_texel_entlut_quadro_nearest`
  - `sort_tmem_idx`
  - `compute_color_index`
  - `get_tmem_idx`
  - `read_tmem_copy`

## Examples

```python
from rdpvideo.pixel import Rgba, vl_lerp

print(vl_lerp(Rgba(0, 0, 0, 7), Rgba(255, 255, 255, 7), 16))
# Rgba(r=128, g=128, b=128, a=7)
```

```python
from rdpvideo.zbuffer import deltaz_compare, dz_compress, z_compress, z_decompress

print(z_decompress(z_compress(0)))  # 0
print(dz_compress(0x100))           # 8
print(deltaz_compare(0x1234))       # 4096
```

```python
from rdpvideo.vi_registers import ViControl, ViType

ctrl = ViControl.from_register(0x42)
print(ctrl.type is ViType.RGBA5551, ctrl.serrate)  # True True
```

```python
from rdpvideo.tmem import Tile, Tmem, TexelFormat, fetch_texel

print(fetch_texel(Tmem(), Tile(), 0, 0, TexelFormat.I8))
# Texel(r=0, g=0, b=0, a=0)
```

## What it does not do

The package has the individual stages only. It does not do the following:

- Assemble a whole output frame from the VI registers.
- Run the stages across worker threads.
- Emulate RDRAM. Callers supply their own memory object.
- Open a window or draw anything to a screen.

## Running the tests

```
pip install -e .[test]
pytest
```