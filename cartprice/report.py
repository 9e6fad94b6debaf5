from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from .check import CheckResult, Severity
from .checkout import Receipt

_RECEIPTS = jinja2.Environment(
    loader=jinja2.FileSystemLoader(Path(__file__).parent / "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
_RECEIPTS.filters["money"] = lambda value: f"{value:.2f}"


@dataclass(frozen=True)
class ReceiptLine:
    name: str
    quantity: int
    unit_price: float

    @property
    def amount(self) -> float:
        return self.unit_price * self.quantity


def receipt_lines(receipt: Receipt) -> list[ReceiptLine]:
    """One line per distinct product, in order of first appearance."""
    counts = Counter(p.name for p in receipt.cart)
    seen: dict[str, ReceiptLine] = {}
    for p in receipt.cart:
        if p.name not in seen:
            seen[p.name] = ReceiptLine(p.name, counts[p.name], p.price)
    return list(seen.values())


def format_receipt(receipt: Receipt) -> str:
    """Human-readable receipt for terminal output."""
    return _RECEIPTS.get_template("receipt.txt.j2").render(
        lines=receipt_lines(receipt),
        subtotal=receipt.subtotal,
        applied=receipt.applied,
        dropped=receipt.dropped,
        total=receipt.total,
        unrecognized=receipt.unrecognized,
    )


def receipt_json(receipt: Receipt) -> dict[str, Any]:
    """Machine-readable receipt."""
    return {
        "items": [p.name for p in receipt.cart],
        "subtotal": receipt.subtotal,
        "applied": [
            {"id": c.discount.id, "amount": c.amount} for c in receipt.applied
        ],
        "dropped": [
            {"id": c.discount.id, "amount": c.amount} for c in receipt.dropped
        ],
        "discount": receipt.discount,
        "total": receipt.total,
        "unrecognized": list(receipt.unrecognized),
    }


def format_check(result: CheckResult, source: str) -> str:
    lines = []
    if result.is_well_formed:
        lines.append(f"{source}: ✓ {result.rule_count} rules, 0 errors")
    else:
        lines.append(f"{source}: × {len(result.errors)} errors in {result.rule_count} rules")

    for diag in result.diagnostics:
        rule_str = f" rule '{diag.rule}':" if diag.rule else ""
        tag = "ERROR" if diag.severity == Severity.ERROR else "WARNING"
        lines.append(f"    - [{diag.check}]{rule_str} {diag.message} ({tag})")

    return "\n".join(lines)
