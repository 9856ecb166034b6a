"""Invoice status reference data."""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from ..exceptions import StatusNotFoundError
from .base import DocumentModel


class EndStateType(enum.Enum):
    """Kind of terminal state a status represents."""
    DONE = 'done'
    CANCELLED = 'cancelled'
    PENDING = 'pending'


@dataclass(frozen=True)
class InvoiceStatusDefinition(DocumentModel):
    """A configurable invoice status."""

    value: str
    label: str = ''
    color: str = '#757575'
    is_end_state: bool = False
    end_state_type: Optional[EndStateType] = None
    sort_order: int = 0
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    field_mappings = {
        'value': 'value',
        'label': 'label',
        'color': 'color',
        'is_end_state': 'isEndState',
        'end_state_type': 'endStateType',
        'sort_order': 'sortOrder',
    }

    def __post_init__(self):
        end_state_type = self.end_state_type
        if isinstance(end_state_type, str):
            try:
                end_state_type = EndStateType(end_state_type.strip().lower())
            except ValueError:
                end_state_type = None
        elif not isinstance(end_state_type, EndStateType):
            end_state_type = None
        if not self.is_end_state:
            end_state_type = None
        object.__setattr__(self, 'end_state_type', end_state_type)
        object.__setattr__(self, 'is_end_state', bool(self.is_end_state))

    @property
    def is_terminal(self) -> bool:
        """True for end states with a recognised end state type."""
        return self.is_end_state and self.end_state_type is not None

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        document['endStateType'] = self.end_state_type.value if self.end_state_type else None
        return document


def resolve_status(code: str, definitions: Iterable[InvoiceStatusDefinition]) -> InvoiceStatusDefinition:
    """Find the definition for a status code.

    Raises:
        StatusNotFoundError: If no definition has the given code
    """
    for definition in definitions:
        if definition.value == code:
            return definition
    raise StatusNotFoundError(code)


def default_done_status(definitions: Iterable[InvoiceStatusDefinition]) -> Optional[InvoiceStatusDefinition]:
    """Return the first 'done' end state by sort order, if any."""
    done = [d for d in definitions if d.end_state_type is EndStateType.DONE]
    if not done:
        return None
    return sorted(done, key=lambda d: d.sort_order)[0]
