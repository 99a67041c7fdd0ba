"""
Shared pydantic bases for LearnHub schemas.
"""

from typing import Any, ClassVar, Dict, FrozenSet
from pydantic import BaseModel, ConfigDict, model_validator


class ReadModel(BaseModel):
    """Record returned by the storage layer and serialized by the API."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class FieldMask(BaseModel):
    """
    Partial update: every field is optional and only the fields that were
    explicitly provided are applied to the stored record.

    Unknown fields are rejected, which keeps identifiers out of the mask.
    Fields not listed in ``nullable_fields`` may be omitted but not nulled.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required(self) -> "FieldMask":
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} may not be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields present in the mask, ready to merge into a record."""
        return self.model_dump(exclude_unset=True)

    def is_empty(self) -> bool:
        return not self.model_fields_set
