"""Protocol decoding and line scheduling for external parser output."""

from parse.decoder import ProtocolError, decode_response, sort_records
from parse.scheduler import TagScheduler

__all__ = ["ProtocolError", "TagScheduler", "decode_response", "sort_records"]
