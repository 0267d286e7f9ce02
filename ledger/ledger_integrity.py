"""
TokenCraft Ledger Integrity Guardian

- Checks a ledger state for:
    * negative balances
    * total supply != sum of balances
    * drift between live balances and balances rebuilt from the event log
- Emits a human-readable markdown report

This is read-only: it never modifies the ledger, only reports.
"""

from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ledger.balances import BalanceSnapshot
from ledger.events import LedgerEvent
from ledger.token import TokenLedger


def balances_from_events(events: Iterable[LedgerEvent]) -> BalanceSnapshot:
    """
    Rebuild balances + supply purely from committed mint/burn/transfer events.
    """
    snap = BalanceSnapshot()
    bal = snap.balances
    for ev in events:
        p = ev.payload
        if ev.kind == "mint":
            bal[p["recipient"]] = bal.get(p["recipient"], 0) + p["amount"]
            snap.total_supply += p["amount"]
        elif ev.kind == "burn":
            bal[ev.caller] = bal.get(ev.caller, 0) - p["amount"]
            snap.total_supply -= p["amount"]
        elif ev.kind == "transfer":
            bal[p["sender"]] = bal.get(p["sender"], 0) - p["amount"]
            bal[p["recipient"]] = bal.get(p["recipient"], 0) + p["amount"]
    return snap


def _nonzero(balances: Dict[str, int]) -> Dict[str, int]:
    return {k: v for k, v in balances.items() if v != 0}


def analyze_ledger(token: TokenLedger) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    snap = token.snapshot()
    errors: List[str] = []

    negatives = {ident: amt for ident, amt in snap.balances.items() if amt < 0}
    for ident, amt in sorted(negatives.items()):
        errors.append(f"- negative balance for `{ident}`: {amt}")

    total = snap.sum_balances()
    if total != snap.total_supply:
        errors.append(f"- total supply {snap.total_supply} != sum of balances {total}")

    rebuilt = balances_from_events(token.events.all_events())
    drift = 0
    live = _nonzero(snap.balances)
    replayed = _nonzero(rebuilt.balances)
    for ident in sorted(set(live) | set(replayed)):
        if live.get(ident, 0) != replayed.get(ident, 0):
            drift += 1
            errors.append(
                f"- `{ident}` holds {live.get(ident, 0)} but events imply {replayed.get(ident, 0)}"
            )
    if rebuilt.total_supply != snap.total_supply:
        errors.append(
            f"- total supply {snap.total_supply} but events imply {rebuilt.total_supply}"
        )

    summary = {
        "holders": len(live),
        "total_supply": snap.total_supply,
        "sum_balances": total,
        "negative_balances": len(negatives),
        "event_drift": drift,
        "events_scanned": len(token.events),
        "paused": token.is_paused(),
    }
    return {
        "ok": not errors,
        "summary": summary,
        "errors": errors,
        "generated_at": now.isoformat(),
    }


def write_report(result: Dict[str, Any], out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    s = result["summary"]
    lines: List[str] = []

    lines.append("# TokenCraft Ledger Integrity Report")
    lines.append("")
    lines.append(f"- Generated at: `{result['generated_at']}`")
    lines.append("")
    lines.append("## Summary")
    lines.append(f"- Holders: **{s['holders']}**")
    lines.append(f"- Total supply: **{s['total_supply']}**")
    lines.append(f"- Sum of balances: **{s['sum_balances']}**")
    lines.append(f"- Negative balances: **{s['negative_balances']}**")
    lines.append(f"- Event drift: **{s['event_drift']}**")
    lines.append(f"- Events scanned: **{s['events_scanned']}**")
    lines.append(f"- Paused: **{s['paused']}**")
    lines.append("")

    lines.append("## Detected Issues")
    if result["errors"]:
        lines.extend(result["errors"])
    else:
        lines.append("- No integrity issues detected")
    lines.append("")

    out.write_text("\n".join(lines), encoding="utf-8")
    return out
