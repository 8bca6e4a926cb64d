"""Configuration, themes, option parsing, colouring and grid/tree layout for a colourful ls."""

__version__ = "0.1.0"

__all__ = ["app", "color", "config_file", "display", "flags", "theme"]