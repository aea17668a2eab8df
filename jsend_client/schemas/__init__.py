"""Pydantic schemas for API replies."""

from .envelope import Envelope  # noqa: F401

__all__ = ["Envelope"]
