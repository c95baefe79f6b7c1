from .cursor import CursorLocation, locate_cursor
from .indentation import locate_from_indentation

__all__ = ["CursorLocation", "locate_cursor", "locate_from_indentation"]
