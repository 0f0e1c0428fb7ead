"""Extern parser definition."""

from extern.parser import DEFAULT_XREF_FORMAT, PARAMS, PARSER_NAME, ExternParser

__all__ = ["DEFAULT_XREF_FORMAT", "PARAMS", "PARSER_NAME", "ExternParser"]
