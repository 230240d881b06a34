"""Shared pydantic configuration for document models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base for everything that ends up in an exported floor plan document.

    Attributes are snake_case in Python and camelCase in JSON
    (``wall_type`` <-> ``wallType``). Both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """JSON-compatible dict using the exported (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
