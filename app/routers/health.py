# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + identity provider reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from app.utils.dates import utcnow

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Identity provider reachability (GoTrue /health)
    """
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "identityProvider": "unknown",
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Ping the identity provider
    try:
        resp = requests.get(
            f"{settings.IDENTITY_PROVIDER_URL.rstrip('/')}/auth/v1/health",
            headers={"apikey": settings.IDENTITY_PROVIDER_KEY},
            timeout=3,
        )
        result["identityProvider"] = "ok" if resp.status_code == 200 else f"http_{resp.status_code}"
    except requests.exceptions.ConnectionError:
        result["identityProvider"] = "unreachable"
        result["status"] = "degraded"
    except Exception as e:
        result["identityProvider"] = f"error: {str(e)}"

    return result
