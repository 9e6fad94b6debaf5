"""Discount calculation strategies and the registry that names them.

A strategy turns one rule and one cart into a signed amount (<= 0 for a
discount). Strategies are looked up by the rule's ``discount_func`` name in
an immutable ``StrategyRegistry`` handed to the engine at construction;
there is no module-level mutable table. Adding a new kind of promotion
means registering a new name:

    registry = default_registry().with_strategy(
        Strategy("BulkPrice", compute=bulk_price, check=check_bulk_price)
    )

Each strategy may also contribute parameter checks, which the catalog
checker runs before any cart is priced.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .cart import Cart, named
from .errors import UnknownStrategyError
from .rules import DiscountRule

StrategyFn = Callable[[DiscountRule, Cart], float]
ParameterCheck = Callable[[DiscountRule], list[str]]


def _no_checks(rule: DiscountRule) -> list[str]:
    return []


def _non_numeric(params: tuple[float, ...]) -> list[object]:
    return [p for p in params if isinstance(p, bool) or not isinstance(p, (int, float))]


@dataclass(frozen=True)
class Strategy:
    """A named discount calculation."""

    name: str
    compute: StrategyFn
    check: ParameterCheck = _no_checks

    def __call__(self, rule: DiscountRule, cart: Cart) -> float:
        return self.compute(rule, cart)


# ---------------------------------------------------------------------------
# XforY: buy x, pay for y
# ---------------------------------------------------------------------------


def x_for_y(rule: DiscountRule, cart: Cart) -> float:
    """For every complete group of x matching items, charge for only y.

    Partial groups get nothing, so fewer than x matching items is worth 0.
    """
    x, y = rule.terms.parameters[0], rule.terms.parameters[1]
    target = rule.products[0]
    groups = cart.count(named(target.name)) // x
    if groups == 0:
        return 0
    return -(x - y) * target.price * groups


def check_x_for_y(rule: DiscountRule) -> list[str]:
    problems: list[str] = []
    if len(rule.products) != 1:
        problems.append(
            f"XforY prices exactly one product, rule targets {len(rule.products)}"
        )
    params = rule.terms.parameters
    if len(params) != 2:
        problems.append(f"XforY expects parameters [x, y], got {list(params)}")
        return problems
    if bad := _non_numeric(params):
        problems.append(f"XforY parameters must be numbers, got {bad}")
        return problems
    x, y = params
    if x <= 0 or x != int(x):
        problems.append(f"XforY group size x must be a positive integer, got {x}")
    elif not 0 <= y <= x:
        problems.append(f"XforY requires 0 <= y <= x, got x={x}, y={y}")
    return problems


# ---------------------------------------------------------------------------
# PercentOff: a percentage off every targeted item
# ---------------------------------------------------------------------------


def percent_off(rule: DiscountRule, cart: Cart) -> float:
    pct = rule.terms.parameters[0]
    matching = cart.all(named(*rule.product_names))
    if not matching:
        return 0
    return -(pct / 100) * sum(p.price for p in matching)


def check_percent_off(rule: DiscountRule) -> list[str]:
    params = rule.terms.parameters
    if len(params) != 1:
        return [f"PercentOff expects parameters [percent], got {list(params)}"]
    if bad := _non_numeric(params):
        return [f"PercentOff parameters must be numbers, got {bad}"]
    if not 0 < params[0] <= 100:
        return [f"PercentOff percent must be in (0, 100], got {params[0]}"]
    return []


XFORY = Strategy("XforY", compute=x_for_y, check=check_x_for_y)
PERCENT_OFF = Strategy("PercentOff", compute=percent_off, check=check_percent_off)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StrategyRegistry:
    """An immutable name → Strategy mapping."""

    strategies: Mapping[str, Strategy]

    @classmethod
    def of(cls, strategies: Iterable[Strategy]) -> StrategyRegistry:
        return cls(strategies=MappingProxyType({s.name: s for s in strategies}))

    def with_strategy(self, strategy: Strategy) -> StrategyRegistry:
        """Return a new registry with ``strategy`` added (or replaced)."""
        return StrategyRegistry.of([*self.strategies.values(), strategy])

    def get(self, name: str) -> Strategy:
        """Look up a strategy, failing loudly if it is not registered."""
        strategy = self.strategies.get(name)
        if strategy is None:
            raise UnknownStrategyError(name)
        return strategy

    def compute(self, rule: DiscountRule, cart: Cart) -> float:
        try:
            strategy = self.get(rule.terms.discount_func)
        except UnknownStrategyError:
            raise UnknownStrategyError(rule.terms.discount_func, rule.id) from None
        return strategy(rule, cart)

    def __contains__(self, name: object) -> bool:
        return name in self.strategies

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.strategies.keys())


def default_registry() -> StrategyRegistry:
    return StrategyRegistry.of([XFORY, PERCENT_OFF])
