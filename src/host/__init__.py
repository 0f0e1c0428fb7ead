"""Host-side collaborators: input reader and tag sink."""

from host.reader import InputFile
from host.sink import CorkQueue

__all__ = ["CorkQueue", "InputFile"]
