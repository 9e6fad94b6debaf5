import logging

import pytest

from cartprice import (
    CandidateDiscount,
    Cart,
    CatalogError,
    DiscountCatalog,
    DiscountEngine,
    ResolutionError,
    ResolutionPolicy,
    UnknownStrategyError,
    compute_discount,
    quantify,
    resolve,
)
from cartprice.engine import MAX_EXHAUSTIVE_CANDIDATES, rank
from cartprice.examples import demo_catalog
from cartprice.helpers import cart_of, product, rule, x_for_y
from cartprice.strategies import default_registry

GREEDY = ResolutionPolicy.GREEDY
EXHAUSTIVE = ResolutionPolicy.EXHAUSTIVE


def cand(rule_id: str, amount: float, *excluded: str) -> CandidateDiscount:
    """A candidate whose rule prices nothing; only id and exclusions matter."""
    return CandidateDiscount(
        amount=amount,
        discount=rule(rule_id, product("P", 1), "XforY", (1, 1), excluded),
    )


def ids(candidates) -> list[str]:
    return [c.discount.id for c in candidates]


def demo_engine(policy: ResolutionPolicy = GREEDY) -> DiscountEngine:
    return DiscountEngine(demo_catalog().discounts, default_registry(), policy)


def demo_cart(codes: str) -> Cart:
    return cart_of(demo_catalog().products, codes)


# ---------------------------------------------------------------------------
# Quantification
# ---------------------------------------------------------------------------


class TestQuantify:
    def test_candidates_in_catalog_order(self) -> None:
        candidates = demo_engine().quantify(demo_cart("ABBACBBAB"))
        assert ids(candidates) == ["0", "1"]
        assert [c.amount for c in candidates] == [-100, -40]

    def test_rule_without_products_in_cart_is_excluded(self) -> None:
        candidates = demo_engine().quantify(demo_cart("BBBBBC"))
        assert ids(candidates) == ["0"]

    def test_matching_rule_worth_nothing_is_still_a_candidate(self) -> None:
        candidates = demo_engine().quantify(demo_cart("A"))
        assert ids(candidates) == ["1"]
        assert candidates[0].amount == 0

    def test_any_target_in_cart_is_enough(self) -> None:
        a, b = product("A", 20), product("B", 50)
        catalog = DiscountCatalog.of([rule("p", (a, b), "PercentOff", (10,))])
        candidates = quantify(Cart.of([b]), catalog, default_registry())
        assert ids(candidates) == ["p"]

    def test_unregistered_strategy_fails_at_dispatch(self) -> None:
        a = product("A", 20)
        catalog = DiscountCatalog.of([rule("x", a, "Mystery")])
        with pytest.raises(UnknownStrategyError):
            quantify(Cart.of([a]), catalog, default_registry())

    def test_unregistered_strategy_ignored_when_not_a_candidate(self) -> None:
        a, b = product("A", 20), product("B", 50)
        catalog = DiscountCatalog.of([rule("x", a, "Mystery")])
        assert quantify(Cart.of([b]), catalog, default_registry()) == ()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("policy", [GREEDY, EXHAUSTIVE])
class TestResolve:
    def test_empty(self, policy) -> None:
        assert resolve((), policy) == ()

    def test_non_conflicting_all_kept_best_first(self, policy) -> None:
        out = resolve([cand("a", -10), cand("b", -30), cand("c", -20)], policy)
        assert ids(out) == ["b", "c", "a"]

    def test_larger_discount_wins_whoever_declares(self, policy) -> None:
        # Declared on the smaller one.
        out = resolve([cand("big", -100), cand("small", -40, "big")], policy)
        assert ids(out) == ["big"]
        # Declared on the larger one.
        out = resolve([cand("big", -120, "small"), cand("small", -100)], policy)
        assert ids(out) == ["big"]

    def test_any_wins_alone_when_largest(self, policy) -> None:
        out = resolve([cand("x", -10), cand("any", -100, "ANY"), cand("y", -5)], policy)
        assert ids(out) == ["any"]

    def test_any_never_survives_with_others(self, policy) -> None:
        out = resolve([cand("x", -60), cand("any", -50, "ANY"), cand("y", -5)], policy)
        assert "any" not in ids(out)
        assert set(ids(out)) == {"x", "y"}

    def test_any_as_sole_candidate_survives(self, policy) -> None:
        assert ids(resolve([cand("any", -50, "ANY")], policy)) == ["any"]

    def test_idempotent(self, policy) -> None:
        candidates = [
            cand("a", -50, "b", "c"),
            cand("b", -40),
            cand("c", -30, "d"),
            cand("d", -20),
            cand("e", -10, "ANY"),
        ]
        once = resolve(candidates, policy)
        assert resolve(once, policy) == once

    def test_unknown_exclusion_id_has_no_effect(self, policy) -> None:
        out = resolve([cand("a", -10, "nope"), cand("b", -20)], policy)
        assert ids(out) == ["b", "a"]

    def test_ties_keep_incoming_order(self, policy) -> None:
        out = resolve([cand("first", -40, "second"), cand("second", -40)], policy)
        assert ids(out) == ["first"]


def test_rank_is_stable() -> None:
    ranked = rank([cand("a", -1), cand("b", -5), cand("c", -1)])
    assert ids(ranked) == ["b", "a", "c"]


def test_greedy_chain() -> None:
    # a beats b, so c (which only conflicts with b) is kept.
    out = resolve([cand("a", -50, "b"), cand("b", -40, "c"), cand("c", -30)], GREEDY)
    assert ids(out) == ["a", "c"]


def test_exhaustive_finds_better_combination() -> None:
    candidates = [cand("a", -50, "b", "c"), cand("b", -40), cand("c", -40)]
    assert ids(resolve(candidates, GREEDY)) == ["a"]
    assert ids(resolve(candidates, EXHAUSTIVE)) == ["b", "c"]


def test_exhaustive_refuses_too_many_candidates() -> None:
    candidates = [cand(str(i), -i) for i in range(MAX_EXHAUSTIVE_CANDIDATES + 1)]
    with pytest.raises(ResolutionError):
        resolve(candidates, EXHAUSTIVE)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "codes, discount",
    [
        ("ABBACBBAB", -100),
        ("BBBAABBBAABBBAACCCB", -200),
        ("BBBBBAAAAAAAAA", -120),
        ("C", 0),
        ("", 0),
    ],
)
def test_demo_discounts(codes: str, discount: float) -> None:
    assert demo_engine().compute_discount(demo_cart(codes)) == discount


def test_empty_cart_is_zero_for_any_catalog() -> None:
    a = product("A", 20)
    catalog = DiscountCatalog.of(
        [x_for_y("0", a, 2, 1), rule("1", a, "PercentOff", (50,), ["ANY"])]
    )
    assert compute_discount(Cart(), catalog) == 0
    assert compute_discount(Cart(), DiscountCatalog()) == 0


def test_empty_catalog_is_zero() -> None:
    assert compute_discount(demo_cart("AAABBBBB"), DiscountCatalog()) == 0


def test_resolution_reports_dropped() -> None:
    res = demo_engine().resolution(demo_cart("ABBACBBAB"))
    assert ids(res.applied) == ["0"]
    assert ids(res.dropped) == ["1"]
    assert res.total == -100


def test_engine_rejects_unknown_strategy() -> None:
    catalog = DiscountCatalog.of([rule("9", product("A", 1), "Mystery")])
    with pytest.raises(UnknownStrategyError) as info:
        DiscountEngine(catalog)
    assert info.value.rule_id == "9"


def test_engine_rejects_ill_formed_catalog() -> None:
    a = product("A", 20)
    catalog = DiscountCatalog.of([x_for_y("0", a, 3, 1), x_for_y("0", a, 2, 1)])
    with pytest.raises(CatalogError) as info:
        DiscountEngine(catalog)
    assert any(d.check == "unique_ids" for d in info.value.diagnostics)


def test_engine_logs_catalog_warnings(caplog) -> None:
    a = product("A", 20)
    catalog = DiscountCatalog.of([x_for_y("0", a, 3, 1, ["ghost"])])
    with caplog.at_level(logging.WARNING, logger="cartprice.engine"):
        DiscountEngine(catalog)
    assert any("ghost" in r.getMessage() for r in caplog.records)


def test_engine_logs_dropped_conflicts(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="cartprice.engine"):
        demo_engine().compute_discount(demo_cart("ABBACBBAB"))
    assert any("Dropping rule '1'" in r.getMessage() for r in caplog.records)
