from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/")
def root():
    # Lets a client discover which locales and field types this deployment accepts.
    return {
        "name": "Form Builder API",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "locales": settings.VALID_LOCALES,
        "field_types": settings.VALID_FIELD_TYPES,
    }


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.APP_ENV, "database": db.get_bind().dialect.name}
