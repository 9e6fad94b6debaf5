from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from .rules import DiscountCatalog, DiscountRule, ExcludesIds
from .strategies import StrategyRegistry


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    rule: str | None
    message: str


@dataclass(frozen=True)
class CheckResult:
    rule_count: int
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def is_well_formed(self) -> bool:
        return len(self.errors) == 0


@dataclass
class CheckContext:
    strategies: StrategyRegistry
    known_ids: frozenset[str]
    rule_id: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def error(self, check: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.ERROR, self.rule_id, message))

    def warning(self, check: str, message: str) -> None:
        self.diagnostics.append(
            Diagnostic(check, Severity.WARNING, self.rule_id, message)
        )

    def begin_rule(self, rule_id: str) -> None:
        self.rule_id = rule_id


def check_rule(rule: DiscountRule, ctx: CheckContext) -> None:
    ctx.begin_rule(rule.id)

    if not rule.products:
        ctx.error("has_targets", "Rule targets no products")

    func = rule.terms.discount_func
    if func not in ctx.strategies:
        ctx.error("strategy_registered", f"Discount function '{func}' is not registered")
    else:
        for problem in ctx.strategies.get(func).check(rule):
            ctx.error("strategy_parameters", problem)

    match rule.terms.exclusions:
        case ExcludesIds(ids=ids):
            for other in sorted(ids):
                if other == rule.id:
                    ctx.warning("self_exclusion", "Rule lists itself in cantBeUsedWith")
                elif other not in ctx.known_ids:
                    # Never matches a candidate, so the clause has no effect.
                    ctx.warning(
                        "exclusion_resolved",
                        f"cantBeUsedWith cites unknown rule '{other}'",
                    )
        case _:
            pass


def check_catalog(catalog: DiscountCatalog, strategies: StrategyRegistry) -> CheckResult:
    """Run every well-formedness check over ``catalog``.

    Errors make the catalog unusable by the engine. Warnings describe
    clauses that are legal but have no effect.
    """
    ctx = CheckContext(strategies=strategies, known_ids=frozenset(catalog.ids))

    duplicates = [i for i, n in Counter(catalog.ids).items() if n > 1]
    for dup in duplicates:
        ctx.begin_rule(dup)
        ctx.error("unique_ids", f"Rule id '{dup}' is used more than once")

    for rule in catalog:
        check_rule(rule, ctx)

    return CheckResult(rule_count=len(catalog), diagnostics=tuple(ctx.diagnostics))
