from __future__ import annotations

from typing import Any, Optional

import httpx

from jsend_client.schemas.envelope import Envelope


class EnvelopeError(RuntimeError):
    """Raised when the API answers with a failure envelope or cannot be reached."""

    def __init__(self, envelope: Envelope[Any], *, response: Optional[httpx.Response] = None):
        super().__init__(f"{envelope.status_code} {envelope.status}: {envelope.message}")
        self.envelope = envelope
        self.response = response

    @property
    def status(self) -> Optional[str]:
        return self.envelope.status

    @property
    def status_code(self) -> Optional[int]:
        return self.envelope.status_code

    @property
    def message(self) -> Optional[str]:
        return self.envelope.message


__all__ = ["EnvelopeError"]
