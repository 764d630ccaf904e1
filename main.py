from __future__ import annotations

import logging
import os
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware

from rightshield.core.config import settings
from rightshield.utils.store_client import store_enabled

# Import Routers
from rightshield.routers import analyze, benchmarks, chat, documents, simulate, templates

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("rightshield")

app = FastAPI(title=settings.APP_TITLE)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
app.include_router(simulate.router, prefix="/api", tags=["Simulation"])
app.include_router(analyze.router, prefix="/api", tags=["Analysis"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(documents.router, prefix="/api", tags=["Documents"])
app.include_router(benchmarks.router, prefix="/api", tags=["Benchmarks"])
app.include_router(templates.router, prefix="/api", tags=["Templates"])


@app.get("/api/health")
async def health():
    return {"status": "ok", "app": settings.APP_TITLE}


# quiet browser noise
@app.get("/favicon.ico")
async def favicon():
    return HTMLResponse("", status_code=204)


# --- Startup printout ---
@app.on_event("startup")
async def _startup_banner():
    host = os.getenv("BIND_HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    logger.info("=" * 72)
    logger.info("%s starting on http://%s:%s/", settings.APP_TITLE, host, port)
    logger.info("LLM:         %s", settings.OPENAI_MODEL if settings.OPENAI_API_KEY else "disabled (set OPENAI_API_KEY)")
    logger.info("Persistence: %s", "enabled" if store_enabled(settings) else "disabled (set SUPABASE_URL)")
    logger.info("=" * 72)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.getenv("BIND_HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
