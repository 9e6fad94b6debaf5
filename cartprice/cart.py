"""The cart: an ordered, read-only collection of scanned products.

Order is irrelevant to pricing but preserved so that predicate scans are
deterministic. Searches keep no cursor state; calling ``first`` or ``all``
repeatedly always gives the same answer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from .products import Product

ProductPredicate = Callable[[Product], bool]


def named(*names: str) -> ProductPredicate:
    """Predicate matching products whose name is one of ``names``."""
    wanted = frozenset(names)
    return lambda product: product.name in wanted


@dataclass(frozen=True)
class Cart:
    """The products scanned for a single checkout."""

    items: tuple[Product, ...] = ()

    @classmethod
    def of(cls, products: Iterable[Product]) -> Cart:
        return cls(items=tuple(products))

    def first(self, predicate: ProductPredicate) -> Product | None:
        """Return the first product satisfying ``predicate``, or None."""
        for product in self.items:
            if predicate(product):
                return product
        return None

    def all(self, predicate: ProductPredicate) -> tuple[Product, ...]:
        """Return every product satisfying ``predicate``, in cart order."""
        return tuple(p for p in self.items if predicate(p))

    def count(self, predicate: ProductPredicate) -> int:
        return sum(1 for p in self.items if predicate(p))

    @property
    def subtotal(self) -> float:
        return sum(p.price for p in self.items)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def __iter__(self) -> Iterator[Product]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
