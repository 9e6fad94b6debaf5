"""cartprice: shopping cart pricing with conflict-aware discount rules."""

from .products import Product, ProductCatalog
from .cart import Cart, named
from .rules import (
    CandidateDiscount,
    DiscountCatalog,
    DiscountRule,
    ExcludesAny,
    ExcludesIds,
    ExclusionPolicy,
    RuleTerms,
    conflicts,
)
from .strategies import Strategy, StrategyRegistry, default_registry
from .engine import (
    DiscountEngine,
    Resolution,
    ResolutionPolicy,
    compute_discount,
    quantify,
    resolve,
)
from .check import CheckResult, Diagnostic, Severity, check_catalog
from .checkout import Checkout, Receipt, ScanResult, parse_item_codes
from .serialization import StoreCatalog, dumps, loads, load_catalog_file
from .errors import (
    CatalogError,
    CatalogFormatError,
    PricingError,
    ResolutionError,
    UnknownStrategyError,
)
from .result import Ok, Err, Result

__all__ = [
    # Products and carts
    "Product", "ProductCatalog", "Cart", "named",
    # Rules
    "CandidateDiscount", "DiscountCatalog", "DiscountRule", "ExcludesAny",
    "ExcludesIds", "ExclusionPolicy", "RuleTerms", "conflicts",
    # Strategies
    "Strategy", "StrategyRegistry", "default_registry",
    # Engine
    "DiscountEngine", "Resolution", "ResolutionPolicy", "compute_discount",
    "quantify", "resolve",
    # Checking
    "CheckResult", "Diagnostic", "Severity", "check_catalog",
    # Checkout
    "Checkout", "Receipt", "ScanResult", "parse_item_codes",
    # Serialization
    "StoreCatalog", "dumps", "loads", "load_catalog_file",
    # Errors
    "CatalogError", "CatalogFormatError", "PricingError", "ResolutionError",
    "UnknownStrategyError",
    # Result
    "Ok", "Err", "Result",
]
