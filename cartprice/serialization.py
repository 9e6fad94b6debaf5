"""JSON serialization for product and discount catalogs.

The wire format mirrors how catalogs are authored by hand:

    {
      "products": [{"name": "A", "price": 20}, ...],
      "discounts": [
        {
          "id": "1",
          "products": ["A"],
          "rules": {
            "discountFunc": "XforY",
            "parameters": [3, 1],
            "cantBeUsedWith": ["0"]
          }
        }
      ]
    }

Discount rules refer to products by name. ``"cantBeUsedWith": ["ANY"]`` is
the ExcludesAny policy; any other list is ExcludesIds.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import CatalogFormatError
from .products import Product, ProductCatalog
from .result import Err, Ok, Result
from .rules import (
    DiscountCatalog,
    DiscountRule,
    ExcludesAny,
    ExcludesIds,
    ExclusionPolicy,
    RuleTerms,
)

ANY = "ANY"


@dataclass(frozen=True)
class StoreCatalog:
    """Everything a checkout needs: products to look up and rules to apply."""

    products: ProductCatalog
    discounts: DiscountCatalog


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def product_to_json(p: Product) -> dict[str, Any]:
    return {"name": p.name, "price": p.price}


def product_from_json(d: dict[str, Any]) -> Product:
    return Product(name=str(d["name"]), price=d["price"])


# ---------------------------------------------------------------------------
# Exclusions
# ---------------------------------------------------------------------------


def exclusions_to_json(policy: ExclusionPolicy) -> list[str]:
    match policy:
        case ExcludesAny():
            return [ANY]
        case ExcludesIds(ids=ids):
            return sorted(ids)
    raise TypeError(f"Unknown exclusion policy: {type(policy)}")


def exclusions_from_json(ids: list[Any]) -> ExclusionPolicy:
    if ANY in ids:
        return ExcludesAny()
    return ExcludesIds(ids=frozenset(str(i) for i in ids))


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def parameters_from_json(values: list[Any], rule_id: str) -> tuple[float, ...]:
    for v in values:
        # bool is an int subclass but never a valid parameter
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise CatalogFormatError(
                f"Discount '{rule_id}' has non-numeric parameter {v!r}"
            )
    return tuple(values)


def rule_to_json(r: DiscountRule) -> dict[str, Any]:
    return {
        "id": r.id,
        "products": [p.name for p in r.products],
        "rules": {
            "discountFunc": r.terms.discount_func,
            "parameters": list(r.terms.parameters),
            "cantBeUsedWith": exclusions_to_json(r.terms.exclusions),
        },
    }


def rule_from_json(d: dict[str, Any], products: ProductCatalog) -> DiscountRule:
    targets = []
    for name in d["products"]:
        product = products.get(name)
        if product is None:
            raise CatalogFormatError(
                f"Discount '{d['id']}' targets unknown product '{name}'"
            )
        targets.append(product)
    terms = d["rules"]
    return DiscountRule(
        id=str(d["id"]),
        products=tuple(targets),
        terms=RuleTerms(
            discount_func=terms["discountFunc"],
            parameters=parameters_from_json(terms.get("parameters", []), str(d["id"])),
            exclusions=exclusions_from_json(terms.get("cantBeUsedWith", [])),
        ),
    )


# ---------------------------------------------------------------------------
# Whole catalogs
# ---------------------------------------------------------------------------


def catalog_to_json(store: StoreCatalog) -> dict[str, Any]:
    return {
        "products": [product_to_json(p) for p in store.products],
        "discounts": [rule_to_json(r) for r in store.discounts],
    }


def catalog_from_json(d: dict[str, Any]) -> StoreCatalog:
    try:
        products = ProductCatalog.of(product_from_json(p) for p in d["products"])
        discounts = DiscountCatalog.of(
            rule_from_json(r, products) for r in d.get("discounts", [])
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogFormatError(f"Malformed catalog: {e!r}") from e
    return StoreCatalog(products=products, discounts=discounts)


def dumps(store: StoreCatalog) -> str:
    return json.dumps(catalog_to_json(store), indent=2)


def loads(s: str) -> StoreCatalog:
    try:
        data = json.loads(s)
    except json.JSONDecodeError as e:
        raise CatalogFormatError(f"Invalid JSON: {e}") from e
    return catalog_from_json(data)


def load_catalog_file(path: str | Path) -> Result[StoreCatalog, CatalogFormatError]:
    """Read a catalog file, returning Err instead of raising on bad input."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        return Err(CatalogFormatError(f"Could not read catalog file: {e}"))
    try:
        return Ok(loads(text))
    except CatalogFormatError as e:
        return Err(e)
