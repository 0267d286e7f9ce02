# api/routes/routes_token.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import BaseModel, Field, StrictBool, StrictInt

from ledger.errors import ErrorCode, TxResult
from ledger.roles import Role
from ledger.token import TokenLedger

router = APIRouter(prefix="/v1/token", tags=["token"])

HTTP_STATUS = {
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.INSUFFICIENT_BALANCE: 409,
    ErrorCode.INVALID_AMOUNT: 400,
    ErrorCode.CONTRACT_PAUSED: 423,
}


# ---------------------------
# Models
# ---------------------------
class SetRoleBody(BaseModel):
    role: Role
    identity: str = Field(min_length=1)
    granted: StrictBool


class SetPauseBody(BaseModel):
    paused: StrictBool


class MintBody(BaseModel):
    amount: StrictInt
    recipient: str = Field(min_length=1)


class BurnBody(BaseModel):
    amount: StrictInt


class TransferBody(BaseModel):
    amount: StrictInt
    recipient: str = Field(min_length=1)


class TransferFixedBody(BaseModel):
    amount: StrictInt
    sender: str = Field(min_length=1)
    recipient: str = Field(min_length=1)
    memo: Optional[str] = None  # hex-encoded bytes


# ---------------------------
# Dependencies
# ---------------------------
def get_caller(x_caller: Optional[str] = Header(None)) -> str:
    """
    The hosting gateway authenticates the caller and forwards it as X-Caller.
    """
    if not x_caller or not x_caller.strip():
        raise HTTPException(status_code=401, detail="Missing X-Caller header.")
    return x_caller.strip()


def get_token(request: Request) -> TokenLedger:
    return request.app.state.token


def _run(request: Request, op: str, caller: str, call, **args: Any) -> Dict[str, Any]:
    """
    Apply one ledger call under the app lock, audit it, and map ledger errors
    onto HTTP errors.
    """
    with request.app.state.lock:
        result: TxResult = call()
    request.app.state.audit.push(op, {"caller": caller, "args": args, "result": result.to_dict()})
    if not result.ok:
        code = result.error
        raise HTTPException(
            status_code=HTTP_STATUS[code],
            detail={"code": int(code), "error": code.label},
        )
    return {"ok": True, "result": result.value}


def _decode_memo(request: Request, memo: Optional[str]) -> Optional[bytes]:
    if memo is None:
        return None
    try:
        raw = bytes.fromhex(memo)
    except ValueError:
        raise HTTPException(status_code=422, detail="memo must be hex-encoded bytes.")
    limit = request.app.state.config.max_memo_bytes
    if len(raw) > limit:
        raise HTTPException(status_code=422, detail=f"memo exceeds {limit} bytes.")
    return raw


# ---------------------------
# State-changing operations
# ---------------------------
@router.post("/set-role")
def set_role(body: SetRoleBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    return _run(
        request, "set-role", caller,
        lambda: token.set_role(caller, body.role, body.identity, body.granted),
        role=body.role.value, identity=body.identity, granted=body.granted,
    )


@router.post("/set-pause-status")
def set_pause_status(body: SetPauseBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    return _run(
        request, "set-pause-status", caller,
        lambda: token.set_pause_status(caller, body.paused),
        paused=body.paused,
    )


@router.post("/mint")
def mint(body: MintBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    return _run(
        request, "mint", caller,
        lambda: token.mint(caller, body.amount, body.recipient),
        amount=body.amount, recipient=body.recipient,
    )


@router.post("/burn")
def burn(body: BurnBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    return _run(
        request, "burn", caller,
        lambda: token.burn(caller, body.amount),
        amount=body.amount,
    )


@router.post("/transfer")
def transfer(body: TransferBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    return _run(
        request, "transfer", caller,
        lambda: token.transfer(caller, body.amount, body.recipient),
        amount=body.amount, recipient=body.recipient,
    )


@router.post("/transfer-fixed")
def transfer_fixed(body: TransferFixedBody, request: Request, caller: str = Depends(get_caller)):
    token = get_token(request)
    memo = _decode_memo(request, body.memo)
    return _run(
        request, "transfer-fixed", caller,
        lambda: token.transfer_fixed(caller, body.amount, body.sender, body.recipient, memo),
        amount=body.amount, sender=body.sender, recipient=body.recipient, memo=body.memo,
    )


# ---------------------------
# Read-only
# ---------------------------
@router.get("/balance/{identity}")
def get_balance(identity: str, request: Request):
    return {"identity": identity, "balance": get_token(request).get_balance(identity)}


@router.get("/total-supply")
def get_total_supply(request: Request):
    return {"total_supply": get_token(request).get_total_supply()}


@router.get("/name")
def get_name(request: Request):
    return {"name": get_token(request).get_name()}


@router.get("/symbol")
def get_symbol(request: Request):
    return {"symbol": get_token(request).get_symbol()}


@router.get("/decimals")
def get_decimals(request: Request):
    return {"decimals": get_token(request).get_decimals()}


@router.get("/paused")
def get_paused(request: Request):
    return {"paused": get_token(request).is_paused()}


@router.get("/roles/{role}/{identity}")
def get_role(role: Role, identity: str, request: Request):
    return {"role": role.value, "identity": identity, "granted": get_token(request).has_role(role, identity)}


@router.get("/events")
def get_events(request: Request, limit: int = 20):
    limit = max(1, min(limit, 500))
    return {"ok": True, "items": [ev.to_dict() for ev in get_token(request).events.tail(limit)]}
