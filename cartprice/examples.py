"""The demo store: three products and two competing multi-buy offers.

Rule "0" is buy 5 B, pay for 3. Rule "1" is buy 3 A, pay for 1, and cannot
be combined with rule "0". Run this file to print the catalog as JSON.
"""

from cartprice.helpers import products, x_for_y
from cartprice.rules import DiscountCatalog
from cartprice.serialization import StoreCatalog, dumps

# (item codes, expected subtotal, expected total)
DEMO_SCENARIOS: tuple[tuple[str, float, float], ...] = (
    ("ABBACBBAB", 340, 240),
    ("BBBAABBBAABBBAACCCB", 710, 510),
    ("BBBBBAAAAAAAAA", 430, 310),
)


def demo_catalog() -> StoreCatalog:
    stock = products(A=20, B=50, C=30)
    a, b = stock.products["A"], stock.products["B"]
    discounts = DiscountCatalog.of(
        [
            x_for_y("0", b, 5, 3),
            x_for_y("1", a, 3, 1, cant_be_used_with=["0"]),
        ]
    )
    return StoreCatalog(products=stock, discounts=discounts)


if __name__ == "__main__":
    print(dumps(demo_catalog()))
