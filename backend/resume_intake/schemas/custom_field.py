# resume_intake/schemas/custom_field.py
"""Tenant custom field definitions and the per-request schema derived from them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

CLOSED_VOCABULARY_TYPES = frozenset({"select", "radio"})


class CustomFieldDefinition(BaseModel):
    """A tenant-configured attribute as served by the field-schema service."""
    model_config = ConfigDict(extra="ignore")

    field_name: str
    field_label: Optional[str] = None
    field_type: Optional[str] = "text"
    is_hidden: Optional[bool] = False
    # list | JSON string | newline-delimited string | mapping | None
    options: Any = None

    @property
    def label(self) -> str:
        return (self.field_label or "").strip() or self.field_name


@dataclass(frozen=True)
class FieldClassification:
    """A closed-vocabulary field: select/radio with at least one option."""
    name: str
    label: str
    type: str
    options: Tuple[str, ...]


@dataclass(frozen=True)
class FieldSchema:
    """Visible custom fields for one parse request. Never cached across requests."""
    fields: Tuple[CustomFieldDefinition, ...] = ()
    closed: Dict[str, FieldClassification] = field(default_factory=dict)  # keyed by field_name

    @property
    def is_empty(self) -> bool:
        return not self.fields

    @property
    def field_names(self) -> List[str]:
        return [f.field_name for f in self.fields]

    def lookup(self) -> Dict[str, CustomFieldDefinition]:
        """Accepted custom_fields keys: each field's name, then its label if not already taken."""
        keys: Dict[str, CustomFieldDefinition] = {f.field_name: f for f in self.fields}
        for f in self.fields:
            keys.setdefault(f.label, f)
        return keys

    def classification_for(self, field_name: str) -> Optional[FieldClassification]:
        return self.closed.get(field_name)
