"""
TokenCraft call loader

Responsibilities:
- Load operation calls from a file that may be:
  * a single JSON object
  * a JSON array of objects
  * an object with a "calls" list
  * JSON-lines (.jsonl), one call per line
- Normalize them into LedgerCall records
- Apply a call to a TokenLedger and return its TxResult

Call shape:
    {"op": "mint", "caller": "deployer", "amount": 200, "recipient": "wallet_1"}
    {"op": "set-role", "caller": "deployer", "role": "minter",
     "identity": "wallet_1", "granted": true}
    {"op": "transfer-fixed", "caller": "wallet_1", "amount": 50,
     "sender": "wallet_1", "recipient": "wallet_2", "memo": "test memo"}

`memo` is UTF-8 text; `memo_hex` carries raw bytes instead.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ledger.errors import TxResult
from ledger.roles import Role
from ledger.token import TokenLedger

OPERATIONS = (
    "set-role",
    "set-pause-status",
    "mint",
    "burn",
    "transfer",
    "transfer-fixed",
)


class CallFormatError(ValueError):
    pass


@dataclass
class LedgerCall:
    op: str
    caller: str
    args: Dict[str, Any] = field(default_factory=dict)
    line: int = 0

    def describe(self) -> str:
        parts = ", ".join(f"{k}={v!r}" for k, v in self.args.items())
        return f"{self.caller}: {self.op}({parts})"


def _load_json_any(path: Path) -> Any:
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    items: List[Any] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            items.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise CallFormatError(f"{path}:{lineno}: invalid JSON: {e}") from e
    return items


def _normalize_raw_calls(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        if "calls" in data and isinstance(data["calls"], list):
            data = data["calls"]
        else:
            return [data]
    if isinstance(data, list):
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise CallFormatError(f"call #{idx + 1} must be an object, got {type(item).__name__}")
        return data
    raise CallFormatError(f"unsupported call document: {type(data).__name__}")


def normalize_call(raw: Dict[str, Any], line: int = 0) -> LedgerCall:
    op = str(raw.get("op") or "").strip()
    if op not in OPERATIONS:
        raise CallFormatError(f"call #{line}: unknown op {op!r}")
    caller = raw.get("caller")
    if not isinstance(caller, str) or not caller:
        raise CallFormatError(f"call #{line}: missing caller")
    args = {k: v for k, v in raw.items() if k not in ("op", "caller")}
    return LedgerCall(op=op, caller=caller, args=args, line=line)


def load_calls(path: Path) -> List[LedgerCall]:
    raw_calls = _normalize_raw_calls(_load_json_any(path))
    return [normalize_call(raw, line=i) for i, raw in enumerate(raw_calls, start=1)]


def _arg(call: LedgerCall, name: str) -> Any:
    if name not in call.args:
        raise CallFormatError(f"call #{call.line} ({call.op}): missing {name!r}")
    return call.args[name]


def _flag(call: LedgerCall, name: str) -> bool:
    value = _arg(call, name)
    if not isinstance(value, bool):
        raise CallFormatError(f"call #{call.line} ({call.op}): {name!r} must be true/false, got {value!r}")
    return value


def _identity(call: LedgerCall, name: str) -> str:
    value = _arg(call, name)
    if not isinstance(value, str) or not value:
        raise CallFormatError(f"call #{call.line} ({call.op}): {name!r} must be a non-empty string, got {value!r}")
    return value


def _memo(call: LedgerCall) -> Optional[bytes]:
    if call.args.get("memo_hex") is not None:
        try:
            return bytes.fromhex(call.args["memo_hex"])
        except ValueError as e:
            raise CallFormatError(f"call #{call.line}: bad memo_hex: {e}") from e
    if call.args.get("memo") is not None:
        return str(call.args["memo"]).encode("utf-8")
    return None


def apply_call(token: TokenLedger, call: LedgerCall) -> TxResult:
    if call.op == "set-role":
        try:
            role = Role.parse(_arg(call, "role"))
        except ValueError as e:
            raise CallFormatError(f"call #{call.line}: {e}") from e
        return token.set_role(call.caller, role, _identity(call, "identity"), _flag(call, "granted"))
    if call.op == "set-pause-status":
        return token.set_pause_status(call.caller, _flag(call, "paused"))
    if call.op == "mint":
        return token.mint(call.caller, _arg(call, "amount"), _identity(call, "recipient"))
    if call.op == "burn":
        return token.burn(call.caller, _arg(call, "amount"))
    if call.op == "transfer":
        return token.transfer(call.caller, _arg(call, "amount"), _identity(call, "recipient"))
    if call.op == "transfer-fixed":
        return token.transfer_fixed(
            call.caller,
            _arg(call, "amount"),
            _identity(call, "sender"),
            _identity(call, "recipient"),
            _memo(call),
        )
    raise CallFormatError(f"call #{call.line}: unknown op {call.op!r}")
