from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Request id used for log correlation and the X-Request-ID header
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


@contextmanager
def bind_request_id(request_id: str | None = None) -> Iterator[str]:
    """Bind a request id (generated when omitted) for the duration of the block."""
    req_id = request_id or uuid.uuid4().hex
    token = request_id_var.set(req_id)
    try:
        yield req_id
    finally:
        request_id_var.reset(token)
