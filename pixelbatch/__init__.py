"""2D sprite batching, texture atlas packing, sprite fonts, Aseprite reading and shape drawing."""

__version__ = "0.1.0"