from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform reply wrapper returned by every API endpoint.

    ``status`` and ``statusCode`` are owned by the server; instances are
    frozen so the client cannot rewrite them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    data: Optional[T] = None
    message: Optional[str] = None
    status: Optional[str] = None
    status_code: Optional[int] = Field(default=None, alias="statusCode")

    @classmethod
    def empty(cls) -> "Envelope[Any]":
        """Envelope with no fields present, used for bodies that carry nothing."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set

    def to_wire(self) -> dict[str, Any]:
        """Dump the fields that were present, using the wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


__all__ = ["Envelope"]
