"""Cost functions, gap-affine cost tables, template switch parsing and plain-text alignment rendering."""

__version__ = "0.1.0"