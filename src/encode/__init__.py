"""Byte-level encoders for tag names and search patterns."""

from encode.names import encode_name, percent_encode
from encode.patterns import build_search_pattern

__all__ = ["build_search_pattern", "encode_name", "percent_encode"]
