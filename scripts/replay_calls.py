#!/usr/bin/env python3
"""
TokenCraft: replay a file of ledger calls against a fresh ledger.

Each call is applied in order, exactly as the hosting environment would
sequence it. Prints one receipt per call, the final balances and an integrity
summary. Optionally writes a markdown snapshot and integrity report.

Exit code is non-zero when a call is malformed or the integrity check fails.
Ledger errors (err(1001) etc.) are normal receipts, not failures.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from core.config import ConfigError, load_config
from ledger.call_loader import CallFormatError, apply_call, load_calls
from ledger.ledger_integrity import analyze_ledger, write_report
from ledger.token import TokenLedger
from ledger.token_view import summarize_balances_md, write_snapshot


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Replay TokenCraft ledger calls.")
    ap.add_argument("--calls", required=True, help="JSON / JSON-lines file of calls")
    ap.add_argument("--config", default=None, help="YAML config (defaults to TCRAFT_CONFIG)")
    ap.add_argument("--snapshot", default=None, help="Write a markdown holder snapshot here")
    ap.add_argument("--report", default=None, help="Write a markdown integrity report here")
    args = ap.parse_args(argv)

    try:
        cfg = load_config(args.config)
        calls = load_calls(Path(args.calls))
    except (ConfigError, CallFormatError, OSError) as e:
        print(f"[replay] {e}", file=sys.stderr)
        return 2

    token = TokenLedger(owner=cfg.owner, metadata=cfg.metadata())

    print(f"=== {cfg.name} ({cfg.symbol}) replay: {len(calls)} calls ===")
    for call in calls:
        try:
            result = apply_call(token, call)
        except CallFormatError as e:
            print(f"[replay] {e}", file=sys.stderr)
            return 2
        print(f"#{call.line:>3} {call.describe()} -> {result.receipt()}")

    print("")
    print(f"Total supply: {token.get_total_supply():,}")
    for line in summarize_balances_md(token):
        print(line)

    if args.snapshot:
        path = write_snapshot(token, Path(args.snapshot))
        print(f"[replay] Wrote snapshot to: {path}")

    result = analyze_ledger(token)
    if args.report:
        path = write_report(result, Path(args.report))
        print(f"[replay] Wrote integrity report to: {path}")

    print(json.dumps({"ok": result["ok"], "summary": result["summary"]}, indent=2))
    return 0 if result["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
