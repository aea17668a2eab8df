"""Base service for typed API clients."""

from .base import BaseService
from .errors import EnvelopeError
from .params import ParamKind, flatten_params

__all__ = [
    "BaseService",
    "EnvelopeError",
    "ParamKind",
    "flatten_params",
]
