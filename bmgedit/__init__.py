"""Terminal editor for BMG message files, with a reader/writer for the format."""

__version__ = "1.0.0"
__all__ = ["__version__"]