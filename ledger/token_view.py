"""
TokenCraft holder snapshot

Renders the current state of a TokenLedger as markdown:
- metadata and total supply
- balances by holder
- role holders and pause flag
"""

from __future__ import annotations
import datetime as _dt
from pathlib import Path
from typing import List

from ledger.roles import Role
from ledger.token import TokenLedger


def summarize_balances_md(token: TokenLedger) -> List[str]:
    lines: List[str] = []
    holders = token.balances.holders()
    if not holders:
        lines.append("No balances recorded yet.")
        return lines

    symbol = token.get_symbol()
    for ident in holders:
        lines.append(f"- **{ident}**: {token.get_balance(ident):,} {symbol}")
    return lines


def render_snapshot(token: TokenLedger) -> str:
    ts = _dt.datetime.now(_dt.timezone.utc).isoformat()
    lines = [
        f"# {token.get_name()} ({token.get_symbol()}) Snapshot",
        "",
        f"- Generated at: `{ts}`",
        f"- Owner: `{token.owner}`",
        f"- Decimals: {token.get_decimals()}",
        f"- Total supply: {token.get_total_supply():,}",
        f"- Paused: {token.is_paused()}",
        "",
        "## Balances",
        "",
    ]
    lines.extend(summarize_balances_md(token))
    lines.append("")
    lines.append("## Roles")
    lines.append("")
    for role in Role:
        holders = token.roles.holders(role)
        lines.append(f"- {role.value}: {', '.join(f'`{h}`' for h in holders) or '_none_'}")
    return "\n".join(lines) + "\n"


def write_snapshot(token: TokenLedger, out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_snapshot(token), encoding="utf-8")
    return out
