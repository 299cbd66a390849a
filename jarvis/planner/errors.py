"""Planner error kinds.

Adapters (HTTP, CLI) translate these into status codes or messages; the
scheduler itself never raises on valid input.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for all planner errors."""


class ValidationError(PlannerError, ValueError):
    """Input rejected before any state was touched."""


class FormatError(ValidationError):
    """Malformed "HH:MM" time string."""


class NotFoundError(PlannerError, LookupError):
    """Unknown goal id or fixed-block index."""


class StoreError(PlannerError):
    """A JSON snapshot could not be read or written."""
