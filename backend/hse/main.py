"""
HSE Record Management API
Personnel health, clinic visits, pharmacy stock, safety checklists,
incidents and fire equipment behind a role-gated dashboard.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import admin, auth, checklists, dates, fire, incidents, medicines, personnel, visits
from .core.audit_middleware import AuditMiddleware
from .core.config import settings
from .core.exceptions import setup_exception_handlers
from .models.base import Base, engine
from .seed_demo import seed_demo_data

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# The store is in memory by default, so tables are created on every start
Base.metadata.create_all(bind=engine)

if settings.SEED_DEMO_DATA:
    seed_demo_data()

app = FastAPI(
    title=settings.APP_NAME,
    description=(
        "Health, safety and environment records for an industrial complex: "
        "occupational medicine, treatment clinic and pharmacy, safety "
        "checklists and incidents, and fire-equipment inventory."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(AuditMiddleware)

setup_exception_handlers(app)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(personnel.router, prefix="/api/v1")
app.include_router(personnel.records_router, prefix="/api/v1")
app.include_router(visits.router, prefix="/api/v1")
app.include_router(medicines.router, prefix="/api/v1")
app.include_router(incidents.router, prefix="/api/v1")
app.include_router(checklists.router, prefix="/api/v1")
app.include_router(fire.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")
app.include_router(dates.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
