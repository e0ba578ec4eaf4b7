"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from caronae.config import settings
from caronae.database import Base, engine

# Import routers
from caronae.routers import rides, users, places

# Import all models so Base.metadata knows about them
from caronae.models.place import Institution, Campus, Hub  # noqa: F401
from caronae.models.user import User                      # noqa: F401
from caronae.models.ride import Ride                      # noqa: F401
from caronae.models.ride_user import RideUser             # noqa: F401
from caronae.models.notification import RideNotification  # noqa: F401

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Caronae",
    description="Carpool coordination for university communities",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(rides.router, prefix="/api/rides", tags=["Rides"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(places.router, prefix="/api/places", tags=["Places"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
