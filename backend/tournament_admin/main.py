import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tournament_admin.database import init_db
from tournament_admin.routes import events, matches, registrations

logger = logging.getLogger(__name__)

app = FastAPI(title="Tournament Administration API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(events.router, prefix="/api", tags=["events"])
app.include_router(registrations.router, prefix="/api", tags=["registrations"])
app.include_router(matches.router, prefix="/api", tags=["matches"])


@app.on_event("startup")
def on_startup():
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    init_db()

    route_count = 0
    for r in app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            logger.debug("%-20s %s", ", ".join(sorted(methods)) if methods else "N/A", path)
            route_count += 1
    logger.info("Registered %d routes", route_count)


@app.get("/api/health")
def health_check():
    return {"app_name": "Tournament Administration API", "status": "healthy"}
