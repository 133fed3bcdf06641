"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from cockpit.core.config import settings
from cockpit.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from cockpit.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Cockpit API",
    description="Business cockpit: contacts, organisations, documents and integrations",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["Content-Disposition"],
)

# ============================================================================
# Routers
# ============================================================================

from cockpit.routers import (
    auth,
    calendar,
    contacts,
    documents,
    email,
    finance,
    gmail,
    graph,
    notes,
    notion,
    organisations,
    projects,
    reference,
)

# Auth router (no session required)
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# Entities
app.include_router(contacts.router, prefix="/api/contacts", tags=["contacts"])
app.include_router(organisations.router, prefix="/api/organisations", tags=["organisations"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(reference.router, prefix="/api", tags=["reference"])
app.include_router(notes.router, prefix="/api/notes", tags=["notes"])
app.include_router(graph.router, prefix="/api/graph", tags=["graph"])
app.include_router(finance.router, prefix="/api/finance", tags=["finance"])

# Google (Gmail attachments, OAuth, Calendar)
app.include_router(email.router, prefix="/api/email", tags=["email"])
app.include_router(gmail.router, prefix="/api/gmail", tags=["gmail"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["calendar"])

# Notion
app.include_router(notion.router, prefix="/api/notion", tags=["notion"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
