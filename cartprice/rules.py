"""Discount rules and the exclusion policies between them.

A discount rule targets one or more products, names the calculation
strategy that prices it, and says which other rules it cannot be combined
with. Exclusion comes in two variants:

- ExcludesIds: conflicts with the listed rule ids
- ExcludesAny: conflicts with every other rule

Exclusion is mutual. If rule A excludes rule B then the pair conflicts,
whatever B declares.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from .products import Product

# ---------------------------------------------------------------------------
# Exclusion policies
# ---------------------------------------------------------------------------


class ExclusionKind(Enum):
    IDS = "ids"
    ANY = "any"


@dataclass(frozen=True)
class ExcludesIds:
    """Cannot be combined with the rules whose ids are listed.

    An empty set means the rule combines with anything.
    """

    ids: frozenset[str] = frozenset()

    @property
    def kind(self) -> ExclusionKind:
        return ExclusionKind.IDS

    def excludes(self, rule_id: str) -> bool:
        return rule_id in self.ids

    def __bool__(self) -> bool:
        return bool(self.ids)


@dataclass(frozen=True)
class ExcludesAny:
    """Cannot be combined with any other rule."""

    @property
    def kind(self) -> ExclusionKind:
        return ExclusionKind.ANY

    def excludes(self, rule_id: str) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


type ExclusionPolicy = ExcludesIds | ExcludesAny

NO_EXCLUSIONS = ExcludesIds()


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleTerms:
    """How a rule is priced and what it may not be combined with."""

    discount_func: str
    parameters: tuple[float, ...] = ()
    exclusions: ExclusionPolicy = NO_EXCLUSIONS


@dataclass(frozen=True)
class DiscountRule:
    """A catalog entry.

    The rule is applicable to a cart when at least one of its target
    products is in the cart.
    """

    id: str
    products: tuple[Product, ...]
    terms: RuleTerms

    @property
    def product_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.products)

    def excludes(self, other: DiscountRule) -> bool:
        """Whether this rule's own policy forbids combining with ``other``."""
        if other.id == self.id:
            return False
        return self.terms.exclusions.excludes(other.id)


def conflicts(a: DiscountRule, b: DiscountRule) -> bool:
    """Whether ``a`` and ``b`` may not both be applied (symmetric)."""
    return a.excludes(b) or b.excludes(a)


@dataclass(frozen=True)
class DiscountCatalog:
    """The ordered set of discount rules offered by the store.

    Catalog order is the order candidates are quantified in and the
    tie-breaker when two discounts are worth the same.
    """

    rules: tuple[DiscountRule, ...] = ()

    @classmethod
    def of(cls, rules: Iterable[DiscountRule]) -> DiscountCatalog:
        return cls(rules=tuple(rules))

    def get(self, rule_id: str) -> DiscountRule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self.rules)

    def __iter__(self) -> Iterator[DiscountRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class CandidateDiscount:
    """A discount quantified against a cart, not yet conflict-resolved.

    ``amount`` is a signed adjustment to the total, normally <= 0.
    """

    amount: float
    discount: DiscountRule

    @property
    def magnitude(self) -> float:
        return -self.amount


def total_of(candidates: Sequence[CandidateDiscount]) -> float:
    return sum(c.amount for c in candidates)
