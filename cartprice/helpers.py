"""Builder helpers for writing catalogs in Python.

These are the shortest way to author products and rules by hand, in tests
and in the demo catalog, without spelling out every dataclass.
"""

from collections.abc import Iterable, Sequence

from cartprice.cart import Cart
from cartprice.products import Product, ProductCatalog
from cartprice.rules import (
    DiscountRule,
    ExcludesAny,
    ExcludesIds,
    ExclusionPolicy,
    RuleTerms,
)


def product(name: str, price: float) -> Product:
    return Product(name=name, price=price)


def products(**prices: float) -> ProductCatalog:
    """products(A=20, B=50) → a ProductCatalog."""
    return ProductCatalog.of(Product(name=n, price=p) for n, p in prices.items())


def excludes(*ids: str) -> ExclusionPolicy:
    """excludes("0", "2") or excludes("ANY")."""
    if "ANY" in ids:
        return ExcludesAny()
    return ExcludesIds(ids=frozenset(ids))


def rule(
    rule_id: str,
    targets: Sequence[Product] | Product,
    func: str,
    params: Iterable[float] = (),
    cant_be_used_with: Iterable[str] = (),
) -> DiscountRule:
    if isinstance(targets, Product):
        targets = (targets,)
    return DiscountRule(
        id=rule_id,
        products=tuple(targets),
        terms=RuleTerms(
            discount_func=func,
            parameters=tuple(params),
            exclusions=excludes(*cant_be_used_with),
        ),
    )


def x_for_y(
    rule_id: str, target: Product, x: int, y: int, cant_be_used_with: Iterable[str] = ()
) -> DiscountRule:
    """Buy ``x`` of ``target``, pay for ``y``."""
    return rule(rule_id, target, "XforY", (x, y), cant_be_used_with)


def cart_of(catalog: ProductCatalog, codes: str) -> Cart:
    """cart_of(catalog, "ABBA"), every code must be known."""
    return Cart.of(catalog.products[c] for c in codes if not c.isspace())
