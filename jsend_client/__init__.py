"""Base class and envelope model for JSend-style REST API clients."""

from jsend_client.client import BaseService, EnvelopeError, ParamKind, flatten_params
from jsend_client.schemas import Envelope

__version__ = "0.1.0"

__all__ = [
    "BaseService",
    "Envelope",
    "EnvelopeError",
    "ParamKind",
    "flatten_params",
]
