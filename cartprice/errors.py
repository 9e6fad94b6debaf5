"""Exceptions raised by the pricing engine.

Absence of a match (an empty cart, a rule whose products are not in the
cart) is never an error. Only configuration inconsistencies raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .check import Diagnostic


class PricingError(Exception):
    """Base class for every error raised by cartprice."""


class CatalogError(PricingError):
    """The discount catalog is ill-formed for the configured strategies."""

    def __init__(self, message: str, diagnostics: tuple[Diagnostic, ...] = ()) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics


class UnknownStrategyError(CatalogError):
    """A rule names a discount function that is not registered."""

    def __init__(self, name: str, rule_id: str | None = None) -> None:
        where = f" (rule '{rule_id}')" if rule_id is not None else ""
        super().__init__(f"Unknown discount function '{name}'{where}")
        self.name = name
        self.rule_id = rule_id


class CatalogFormatError(PricingError):
    """A serialized catalog could not be decoded."""


class ResolutionError(PricingError):
    """Conflict resolution could not be carried out."""
