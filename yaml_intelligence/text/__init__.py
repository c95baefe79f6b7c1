"""Strings that remember where their characters came from."""

from .mapped_text import MappedText, Range, RangedSubstring, as_mapped_text, mapped_text

__all__ = ["MappedText", "Range", "RangedSubstring", "as_mapped_text", "mapped_text"]
