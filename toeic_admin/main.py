from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toeic_admin.api.admin.router import router as admin_router
from toeic_admin.core.config import get_settings
from toeic_admin.core.logging import configure_logging
from toeic_admin.infra.db.session import init_db

settings = get_settings()
configure_logging(settings.log_level)
init_db()

app = FastAPI(title=settings.app_name, version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    return {"ok": "true"}
