"""Discount resolution engine.

Pricing a cart's discounts happens in two steps:

1. Quantification: every catalog rule with at least one target product in
   the cart becomes a CandidateDiscount, priced by its strategy.
2. Resolution: conflicting candidates are removed so that the most
   valuable ones survive.

The engine holds no per-checkout state. One engine can price any number
of carts, concurrently if need be, since the catalog and registry it holds
are immutable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .cart import Cart, named
from .check import check_catalog
from .errors import CatalogError, ResolutionError, UnknownStrategyError
from .rules import CandidateDiscount, DiscountCatalog, conflicts, total_of
from .strategies import StrategyRegistry, default_registry

logger = logging.getLogger(__name__)

MAX_EXHAUSTIVE_CANDIDATES = 20


class ResolutionPolicy(Enum):
    GREEDY = "greedy"           # best-first, keep whatever does not conflict
    EXHAUSTIVE = "exhaustive"   # best non-conflicting subset by total value


# ---------------------------------------------------------------------------
# Quantification
# ---------------------------------------------------------------------------


def quantify(
    cart: Cart, catalog: DiscountCatalog, strategies: StrategyRegistry
) -> tuple[CandidateDiscount, ...]:
    """Price every rule that has a target product in ``cart``.

    Output is in catalog order. Rules with no product in the cart are
    left out silently.
    """
    candidates: list[CandidateDiscount] = []
    for rule in catalog:
        if cart.first(named(*rule.product_names)) is None:
            continue
        amount = strategies.compute(rule, cart)
        logger.debug("Rule %r is a candidate worth %s", rule.id, amount)
        candidates.append(CandidateDiscount(amount=amount, discount=rule))
    return tuple(candidates)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def rank(candidates: Sequence[CandidateDiscount]) -> tuple[CandidateDiscount, ...]:
    """Most valuable first. Equal amounts keep their incoming order."""
    return tuple(sorted(candidates, key=lambda c: c.amount))


def resolve_greedy(
    candidates: Sequence[CandidateDiscount],
) -> tuple[CandidateDiscount, ...]:
    retained: tuple[CandidateDiscount, ...] = ()
    for candidate in rank(candidates):
        rival = next(
            (kept for kept in retained if conflicts(kept.discount, candidate.discount)),
            None,
        )
        if rival is None:
            retained = (*retained, candidate)
        else:
            logger.debug(
                "Dropping rule %r (%s): conflicts with rule %r (%s)",
                candidate.discount.id,
                candidate.amount,
                rival.discount.id,
                rival.amount,
            )
    return retained


def resolve_exhaustive(
    candidates: Sequence[CandidateDiscount],
) -> tuple[CandidateDiscount, ...]:
    """The non-conflicting subset with the largest total discount.

    Among equally valuable subsets, the one preferring higher-ranked
    candidates wins, so a conflict-free input comes back unchanged.
    """
    ranked = rank(candidates)
    if len(ranked) > MAX_EXHAUSTIVE_CANDIDATES:
        raise ResolutionError(
            f"Exhaustive resolution supports at most {MAX_EXHAUSTIVE_CANDIDATES} "
            f"candidates, got {len(ranked)}"
        )

    # remaining[i]: the most that candidates i.. could still add
    remaining = [0.0] * (len(ranked) + 1)
    for i in range(len(ranked) - 1, -1, -1):
        remaining[i] = remaining[i + 1] + max(ranked[i].magnitude, 0)

    best: tuple[CandidateDiscount, ...] = ()
    best_value: float | None = None

    def search(i: int, chosen: tuple[CandidateDiscount, ...], value: float) -> None:
        nonlocal best, best_value
        if best_value is not None and value + remaining[i] <= best_value:
            return
        if i == len(ranked):
            best, best_value = chosen, value
            return
        candidate = ranked[i]
        if not any(conflicts(c.discount, candidate.discount) for c in chosen):
            search(i + 1, (*chosen, candidate), value + candidate.magnitude)
        search(i + 1, chosen, value)

    search(0, (), 0.0)
    return best


def resolve(
    candidates: Sequence[CandidateDiscount],
    policy: ResolutionPolicy = ResolutionPolicy.GREEDY,
) -> tuple[CandidateDiscount, ...]:
    """Remove conflicting candidates, returning survivors best-first."""
    match policy:
        case ResolutionPolicy.GREEDY:
            return resolve_greedy(candidates)
        case ResolutionPolicy.EXHAUSTIVE:
            return resolve_exhaustive(candidates)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resolution:
    """Every candidate for a cart and the subset that was applied."""

    candidates: tuple[CandidateDiscount, ...]
    applied: tuple[CandidateDiscount, ...]

    @property
    def dropped(self) -> tuple[CandidateDiscount, ...]:
        return tuple(c for c in self.candidates if c not in self.applied)

    @property
    def total(self) -> float:
        return total_of(self.applied)


class DiscountEngine:
    """Prices the discounts of a cart against a fixed catalog.

    The catalog is checked once, here. An unregistered discount function
    raises UnknownStrategyError and any other error diagnostic raises
    CatalogError. Warnings are logged and otherwise ignored.
    """

    def __init__(
        self,
        catalog: DiscountCatalog,
        strategies: StrategyRegistry | None = None,
        policy: ResolutionPolicy = ResolutionPolicy.GREEDY,
    ) -> None:
        self.catalog = catalog
        self.strategies = strategies if strategies is not None else default_registry()
        self.policy = policy

        for rule in catalog:
            if rule.terms.discount_func not in self.strategies:
                raise UnknownStrategyError(rule.terms.discount_func, rule.id)

        result = check_catalog(catalog, self.strategies)
        for diag in result.warnings:
            logger.warning("Rule %r: %s", diag.rule, diag.message)
        if not result.is_well_formed:
            details = "; ".join(
                f"[{d.check}] rule '{d.rule}': {d.message}" for d in result.errors
            )
            raise CatalogError(
                f"Discount catalog has {len(result.errors)} error(s): {details}",
                result.diagnostics,
            )

    def quantify(self, cart: Cart) -> tuple[CandidateDiscount, ...]:
        return quantify(cart, self.catalog, self.strategies)

    def resolve(
        self, candidates: Sequence[CandidateDiscount]
    ) -> tuple[CandidateDiscount, ...]:
        return resolve(candidates, self.policy)

    def resolution(self, cart: Cart) -> Resolution:
        candidates = self.quantify(cart)
        applied = self.resolve(candidates)
        res = Resolution(candidates=candidates, applied=applied)
        logger.info(
            "Resolved %d candidate(s) to %d applied, discount %s",
            len(candidates),
            len(applied),
            res.total,
        )
        return res

    def compute_discount(self, cart: Cart) -> float:
        """Signed adjustment (<= 0) to add to the cart's subtotal."""
        return total_of(self.resolve(self.quantify(cart)))


def compute_discount(
    cart: Cart,
    catalog: DiscountCatalog,
    strategies: StrategyRegistry | None = None,
    policy: ResolutionPolicy = ResolutionPolicy.GREEDY,
) -> float:
    return DiscountEngine(catalog, strategies, policy).compute_discount(cart)
