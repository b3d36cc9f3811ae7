"""Immediate-mode user interface toolkit with glyph atlases, layout and a quad renderer."""

__version__ = "0.1.0"
__all__ = ["atlas", "font", "renderer", "widget", "layout", "context", "widgets", "app"]