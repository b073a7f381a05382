"""Video interface filters, texture memory fetches and depth-buffer logic of a console display processor."""

__version__ = "0.1.0"
__all__ = [
    "pixel",
    "vifilter",
    "zbuffer",
    "vi_registers",
    "tmem",
    "tmem_quadro",
    "tmem_lut",
]