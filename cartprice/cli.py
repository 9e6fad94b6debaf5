import argparse
import json
import logging
import sys
from pathlib import Path

from cartprice.check import check_catalog
from cartprice.checkout import Checkout
from cartprice.config import Settings
from cartprice.engine import DiscountEngine, ResolutionPolicy
from cartprice.errors import CatalogError, PricingError
from cartprice.examples import DEMO_SCENARIOS, demo_catalog
from cartprice.report import format_check, format_receipt, receipt_json
from cartprice.result import Err, Ok
from cartprice.serialization import StoreCatalog, load_catalog_file
from cartprice.strategies import default_registry


def load_store(path: Path | None) -> StoreCatalog | str:
    """The catalog at ``path``, the demo catalog when None, or an error string."""
    if path is None:
        return demo_catalog()
    match load_catalog_file(path):
        case Ok(store):
            return store
        case Err(e):
            return str(e)


def build_checkout(store: StoreCatalog, policy: ResolutionPolicy) -> Checkout | str:
    try:
        engine = DiscountEngine(store.discounts, default_registry(), policy)
    except CatalogError as e:
        return str(e)
    return Checkout(store.products, engine)


def handle_checkout(
    items: str, catalog: Path | None, policy: ResolutionPolicy, as_json: bool
) -> int:
    match load_store(catalog):
        case str(err):
            print(f"Error loading catalog: {err}", file=sys.stderr)
            return 1
        case store:
            pass

    match build_checkout(store, policy):
        case str(err):
            print(f"Error: {err}", file=sys.stderr)
            return 1
        case checkout:
            pass

    try:
        receipt = checkout.checkout(items)
    except PricingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if as_json:
        print(json.dumps(receipt_json(receipt), indent=2))
    else:
        print(format_receipt(receipt), end="")
    return 0


def handle_check(catalog: Path | None) -> int:
    """Check a catalog file and print its diagnostics."""
    match load_store(catalog):
        case str(err):
            print(f"Error loading catalog: {err}", file=sys.stderr)
            return 1
        case store:
            pass

    result = check_catalog(store.discounts, default_registry())
    print(format_check(result, str(catalog) if catalog else "<demo>"))
    return 0 if result.is_well_formed else 1


def handle_demo(policy: ResolutionPolicy) -> int:
    store = demo_catalog()
    checkout = build_checkout(store, policy)
    assert isinstance(checkout, Checkout)

    print(f"  {'Items':<22} {'Subtotal':>9} {'Discount':>9} {'Total':>8}")
    print(f"  {'─'*22} {'─'*9} {'─'*9} {'─'*8}")
    for items, _, _ in DEMO_SCENARIOS:
        r = checkout.checkout(items)
        print(f"  {items:<22} {r.subtotal:>9.2f} {r.discount:>9.2f} {r.total:>8.2f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartprice",
        description="Price shopping carts against a catalog of discount rules",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    policies = [p.value for p in ResolutionPolicy]

    # Command: checkout
    checkout_parser = subparsers.add_parser(
        "checkout", help="Price a run of item codes and print the receipt."
    )
    checkout_parser.add_argument("items", help="Item codes, e.g. ABBACBBAB.")
    checkout_parser.add_argument(
        "--catalog",
        type=Path,
        metavar="FILE",
        help="Catalog JSON file (default: $CARTPRICE_CATALOG, else the demo store).",
    )
    checkout_parser.add_argument(
        "--policy",
        choices=policies,
        help="Conflict resolution policy (default: $CARTPRICE_POLICY, else greedy).",
    )
    checkout_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the receipt as JSON.",
    )

    # Command: check
    check_parser = subparsers.add_parser(
        "check", help="Check a catalog for errors and print diagnostics."
    )
    check_parser.add_argument("file", nargs="?", type=Path, metavar="FILE")

    # Command: demo
    demo_parser = subparsers.add_parser(
        "demo", help="Price the reference carts against the demo store."
    )
    demo_parser.add_argument("--policy", choices=policies)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 2

    logging.basicConfig(
        level=settings.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
    )

    policy = settings.policy
    if getattr(args, "policy", None):
        policy = ResolutionPolicy(args.policy)

    match args.command:
        case "checkout":
            return handle_checkout(
                args.items,
                catalog=args.catalog or settings.catalog_path,
                policy=policy,
                as_json=args.json,
            )
        case "check":
            return handle_check(args.file or settings.catalog_path)
        case "demo":
            return handle_demo(policy)
        case None:
            parser.print_help()
            return 1
        case _:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())
