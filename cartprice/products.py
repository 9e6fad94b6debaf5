"""Products and the product catalog used for item lookup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Product:
    """A purchasable item, identified by its name.

    Examples: Product("A", 20), Product("B", 50)
    """

    name: str
    price: float

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Price cannot be negative: {self.price}")


@dataclass(frozen=True)
class ProductCatalog:
    """Products keyed by name.

    Invariant: every key equals the name of the product it maps to.
    """

    products: Mapping[str, Product]

    @classmethod
    def of(cls, products: Iterable[Product]) -> ProductCatalog:
        by_name: dict[str, Product] = {}
        for p in products:
            if p.name in by_name:
                raise ValueError(f"Duplicate product name: {p.name!r}")
            by_name[p.name] = p
        return cls(products=MappingProxyType(by_name))

    def get(self, name: str) -> Product | None:
        return self.products.get(name)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.products.keys())

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products.values())

    def __len__(self) -> int:
        return len(self.products)

    def __contains__(self, name: object) -> bool:
        return name in self.products
