"""Core module for the pitchpro application."""

from .references import Resolved, Unresolved, reference_id, resolve_reference

__all__ = [
    "Resolved",
    "Unresolved",
    "reference_id",
    "resolve_reference",
]
