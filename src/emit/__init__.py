"""Tag emission: entries, parser fields and template rendering."""

from emit.emitter import TagEmitter
from emit.fields import FieldDefinition, FieldRegistry, make_extern_fields
from emit.fmt import TemplateError, TemplateRenderer

__all__ = [
    "FieldDefinition",
    "FieldRegistry",
    "TagEmitter",
    "TemplateError",
    "TemplateRenderer",
    "make_extern_fields",
]
