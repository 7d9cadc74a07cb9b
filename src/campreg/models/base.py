"""Shared model configuration and field types."""

from datetime import datetime
import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

AMKA_PATTERN = r"^[0-9]{11}$"
_AMKA_RE = re.compile(AMKA_PATTERN)

Amka = Annotated[str, StringConstraints(pattern=AMKA_PATTERN)]


def is_valid_amka(value: object) -> bool:
    """Return whether ``value`` is exactly 11 ASCII digits."""
    return isinstance(value, str) and _AMKA_RE.fullmatch(value) is not None


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )


class Document(CamelModel):
    """Fields every stored document carries."""

    id: str = Field(..., description="Document identifier")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")
