"""Checkout: turn scanned item codes into a priced receipt.

Lookup and subtotal arithmetic live here. Every discount decision is
delegated to the DiscountEngine.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .cart import Cart
from .engine import DiscountEngine
from .products import Product, ProductCatalog
from .rules import CandidateDiscount

logger = logging.getLogger(__name__)


def parse_item_codes(codes: str | Sequence[str]) -> tuple[str, ...]:
    """Split a run of single-letter codes, ignoring whitespace.

    A sequence of codes is taken as already split.
    """
    if isinstance(codes, str):
        return tuple(c for c in codes if not c.isspace())
    return tuple(codes)


@dataclass(frozen=True)
class ScanResult:
    cart: Cart
    unrecognized: tuple[str, ...]


@dataclass(frozen=True)
class Receipt:
    cart: Cart
    subtotal: float
    applied: tuple[CandidateDiscount, ...]
    dropped: tuple[CandidateDiscount, ...]
    discount: float
    unrecognized: tuple[str, ...] = ()

    @property
    def total(self) -> float:
        return self.subtotal + self.discount


class Checkout:
    """Prices item codes against a product catalog and a discount engine."""

    def __init__(self, products: ProductCatalog, engine: DiscountEngine) -> None:
        self.products = products
        self.engine = engine

    def scan(self, codes: str | Sequence[str]) -> ScanResult:
        """Look up every code. Unknown codes are skipped, not fatal."""
        scanned: list[Product] = []
        unrecognized: list[str] = []
        running = 0.0
        for code in parse_item_codes(codes):
            product = self.products.get(code)
            if product is None:
                logger.warning("Unrecognized item %r", code)
                unrecognized.append(code)
                continue
            scanned.append(product)
            running += product.price
            logger.debug("Scanned %s, running subtotal %s", product.name, running)
        return ScanResult(cart=Cart.of(scanned), unrecognized=tuple(unrecognized))

    def checkout(self, codes: str | Sequence[str]) -> Receipt:
        scan = self.scan(codes)
        resolution = self.engine.resolution(scan.cart)
        return Receipt(
            cart=scan.cart,
            subtotal=scan.cart.subtotal,
            applied=resolution.applied,
            dropped=resolution.dropped,
            discount=resolution.total,
            unrecognized=scan.unrecognized,
        )

    def total(self, codes: str | Sequence[str]) -> float:
        return self.checkout(codes).total
