"""Mapping between stored order documents and dataclass models."""

from dataclasses import fields
from typing import Any, Dict, TypeVar, Type

T = TypeVar('T', bound='DocumentModel')


class DocumentModel:
    """Mixin for dataclasses read from camelCase document mappings.

    Subclasses declare ``field_mappings`` from attribute name to document key.
    Values are copied as-is; numeric leniency is applied by the calculators.
    Keys without a mapping are kept in ``extra`` so that writing a model back
    does not drop data owned by other parts of the application.
    """

    field_mappings: Dict[str, str] = {}

    @classmethod
    def from_document(cls: Type[T], document: Dict[str, Any]) -> T:
        """Build the model from a document mapping."""
        document = dict(document or {})
        values = {}
        for attr, key in cls.field_mappings.items():
            if key in document:
                values[attr] = document.pop(key)
        names = {f.name for f in fields(cls)}
        if 'extra' in names:
            values['extra'] = document
        return cls(**values)

    def to_document(self) -> Dict[str, Any]:
        """Serialize the model back to a document mapping."""
        document = dict(getattr(self, 'extra', {}) or {})
        for attr, key in self.field_mappings.items():
            value = getattr(self, attr)
            if value is not None:
                document[key] = value
        return document
