import logging
import threading
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes.routes_token import router as token_router
from api.store import AuditStore
from core.config import TokenConfig, load_config
from ledger.ledger_integrity import analyze_ledger
from ledger.token import TokenLedger

log = logging.getLogger(__name__)


# ---------------------------
# App
# ---------------------------
def create_app(config: Optional[TokenConfig] = None) -> FastAPI:
    """
    Build one API instance around one fresh ledger. The ledger lives on
    app.state; calls into it are serialized by app.state.lock.
    """
    cfg = config or load_config()

    app = FastAPI(
        title="TokenCraft-API",
        version="1.0.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cfg.allow_origins.split(",")] if cfg.allow_origins else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = cfg
    app.state.token = TokenLedger(owner=cfg.owner, metadata=cfg.metadata())
    app.state.lock = threading.Lock()
    app.state.audit = AuditStore(cfg.redis_url)
    app.state.token.events.subscribe(app.state.audit.mirror_event)
    app.include_router(token_router)
    log.info(
        "[TokenAPI] %s (%s) ready; owner=%s audit=%s",
        cfg.name, cfg.symbol, cfg.owner, app.state.audit.backend,
    )

    # -------- Root + internal health/status --------
    @app.get("/")
    def root():
        return {
            "ok": True,
            "service": "TokenCraft-API",
            "env": cfg.env_name,
            "token": {"name": cfg.name, "symbol": cfg.symbol, "decimals": cfg.decimals},
            "health_url": "/v1/ops/health",
            "external_health_url": "/healthz",
        }

    @app.get("/v1/ops/health")
    def health():
        token: TokenLedger = app.state.token
        with app.state.lock:
            integrity = analyze_ledger(token)
        return {
            "ok": integrity["ok"],
            "env": cfg.env_name,
            "storage": app.state.audit.backend,
            "redis_url_set": bool(cfg.redis_url),
            "paused": token.is_paused(),
            "total_supply": token.get_total_supply(),
            "integrity_errors": integrity["errors"],
        }

    @app.get("/v1/ops/audit")
    def audit_tail(limit: int = 20):
        return {"ok": True, "items": app.state.audit.recent(limit)}

    # External health for monitors (/healthz)
    @app.get("/healthz")
    def external_health():
        h = health()
        return {
            "ok": h["ok"],
            "env": h["env"],
            "storage": h["storage"],
            "paused": h["paused"],
        }

    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
