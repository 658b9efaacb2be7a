# app/main.py
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Your configuration and DB
from app.config import settings
from app.core.db import init_db, close_db
from app.core.exceptions import register_exception_handlers

from app.api.v1.deps import resolve_principal
from app.api.v1.routers import auth, users, hoaxes

from app.services.file_service import ensure_folders, profile_folder
from app.services.token_cleanup import TokenCleanupJob
from app.services.token_service import token_service

logger = logging.getLogger("uvicorn.error")

ONE_YEAR_IN_SECONDS = 365 * 24 * 60 * 60

# Resolving the Authorization header on every request keeps presented tokens fresh
app = FastAPI(title=settings.APP_NAME, dependencies=[Depends(resolve_principal)])

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

cleanup_job = TokenCleanupJob(token_service, interval_minutes=settings.token_cleanup_interval_minutes)

@app.on_event("startup")
async def on_startup():
    ensure_folders()
    await init_db(generate_schemas=settings.generate_schemas)
    logger.info("[startup] database ready, profile images in %s", profile_folder())
    # Backstop for tokens that expire without ever being presented again
    cleanup_job.start()

@app.on_event("shutdown")
async def on_shutdown():
    cleanup_job.stop()
    await close_db()

# REST
app.include_router(users.router, prefix="/api/1.0")
app.include_router(auth.router, prefix="/api/1.0")
app.include_router(hoaxes.router, prefix="/api/1.0")


class CachedStaticFiles(StaticFiles):
    """Static files served with a one-year Cache-Control header."""

    def file_response(self, *args, **kwargs):
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = f"public, max-age={ONE_YEAR_IN_SECONDS}"
        return response


app.mount("/images", CachedStaticFiles(directory=profile_folder(), check_dir=False), name="images")

@app.get("/healthz")
def healthz():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
