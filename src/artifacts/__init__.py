"""Tag output entry points."""

from artifacts.write import format_xref, tag_to_dict, write_tags_jsonl

__all__ = ["format_xref", "tag_to_dict", "write_tags_jsonl"]
