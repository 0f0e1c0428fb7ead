"""Process bridge to the external parser."""

from bridge.process import BridgeError, BridgeState, ParserProcess
from bridge.stream import IncompleteValueError, JsonValueReader

__all__ = [
    "BridgeError",
    "BridgeState",
    "IncompleteValueError",
    "JsonValueReader",
    "ParserProcess",
]
