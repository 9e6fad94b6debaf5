import logging

import pytest

from cartprice import Checkout, DiscountEngine, ResolutionPolicy, parse_item_codes
from cartprice.examples import DEMO_SCENARIOS, demo_catalog


def demo_checkout(policy: ResolutionPolicy = ResolutionPolicy.GREEDY) -> Checkout:
    store = demo_catalog()
    return Checkout(store.products, DiscountEngine(store.discounts, policy=policy))


def test_parse_item_codes() -> None:
    assert parse_item_codes("AB BA") == ("A", "B", "B", "A")
    assert parse_item_codes(" A\tB\n") == ("A", "B")
    assert parse_item_codes(["A", "B"]) == ("A", "B")
    assert parse_item_codes("") == ()


@pytest.mark.parametrize("policy", list(ResolutionPolicy))
@pytest.mark.parametrize("codes, subtotal, total", DEMO_SCENARIOS)
def test_demo_scenarios(policy, codes: str, subtotal: float, total: float) -> None:
    receipt = demo_checkout(policy).checkout(codes)
    assert receipt.subtotal == subtotal
    assert receipt.total == total


def test_larger_discount_excludes_smaller() -> None:
    # 9 A's (buy 3 pay 1: -120) beat 5 B's (buy 5 pay 3: -100).
    receipt = demo_checkout().checkout("BBBBBAAAAAAAAA")
    assert [c.discount.id for c in receipt.applied] == ["1"]
    assert [c.discount.id for c in receipt.dropped] == ["0"]
    assert receipt.discount == -120


def test_unrecognized_items_are_skipped(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="cartprice.checkout"):
        receipt = demo_checkout().checkout("ABXBZ")
    assert receipt.unrecognized == ("X", "Z")
    assert [p.name for p in receipt.cart] == ["A", "B", "B"]
    assert receipt.subtotal == 120
    assert sum("Unrecognized item" in r.getMessage() for r in caplog.records) == 2


def test_empty_checkout() -> None:
    receipt = demo_checkout().checkout("")
    assert receipt.subtotal == 0
    assert receipt.discount == 0
    assert receipt.total == 0
    assert receipt.applied == ()


def test_total_shortcut() -> None:
    assert demo_checkout().total("ABBACBBAB") == 240


def test_scan_logs_running_subtotal(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="cartprice.checkout"):
        demo_checkout().scan("AB")
    messages = [r.getMessage() for r in caplog.records]
    assert any("running subtotal 70" in m for m in messages)
