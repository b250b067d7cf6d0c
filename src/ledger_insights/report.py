from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from .analytics.aggregate import Statistic, Value
from .analytics.issues import Issue

CENT = Decimal("0.01")


def to_float(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def value_to_dict(v: Value) -> dict[str, Any]:
    return {
        "name": v.name,
        "value": to_float(v.value),
        "valueDifference": to_float(v.value_difference),
    }


def statistic_to_dict(stat: Statistic) -> dict[str, Any]:
    return {
        "date": stat.date.isoformat(),
        "values": [value_to_dict(v) for v in stat.values],
    }


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    out: dict[str, Any] = {"type": issue.type.value}
    if issue.date is not None:
        out["date"] = issue.date.isoformat()
    if issue.account_id is not None:
        out["accountId"] = issue.account_id
    if issue.from_account_id is not None:
        out["fromAccountId"] = issue.from_account_id
    return out


# --- plain text ---


def section(title: str, lines: Iterable[str]) -> str:
    body = "\n".join(line for line in lines if line)
    return f"{title}\n{body}".strip()


def divider() -> str:
    return "──────────────────"


def bullets(items: Iterable[str], *, prefix: str = "• ") -> str:
    xs = [x for x in items if x]
    return "\n".join(prefix + x for x in xs)


def _signed(value: Decimal) -> str:
    return f"{to_float(value):+.2f}"


def render_statistics(title: str, stats: list[Statistic]) -> str:
    if not stats:
        return section(title, ["No data."])
    blocks = [f"{title}"]
    for stat in stats:
        lines = [
            f"{v.name}: {to_float(v.value):.2f} ({_signed(v.value_difference)})" for v in stat.values
        ]
        blocks.append(section(stat.date.isoformat(), [bullets(lines)]))
    return f"\n{divider()}\n".join(blocks)


def render_issues(issues: list[Issue], account_names: dict[str, str] | None = None) -> str:
    names = account_names or {}
    if not issues:
        return section("Issues", ["No issues found."])

    def _label(account_id: str | None) -> str:
        if account_id is None:
            return ""
        return names.get(account_id, account_id)

    lines = []
    for issue in issues:
        parts = [issue.type.value]
        if issue.date is not None:
            parts.append(issue.date.isoformat())
        if issue.account_id is not None:
            parts.append(_label(issue.account_id))
        if issue.from_account_id is not None:
            parts.append(f"from {_label(issue.from_account_id)}")
        lines.append(" ".join(parts))
    return section(f"Issues ({len(issues)})", [bullets(lines)])
