"""Internal job endpoints for cron/schedulers.

Secured with a static token (X-Internal-Token header). Meant for automated
triggers only.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from econwatch.config import get_settings
from econwatch.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Constant-time comparison. Raises 403 if the configured token is empty or
    does not match.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


@router.post("/run_cycle")
def run_cycle_endpoint(
    db: Session = Depends(get_db),
    _token: None = Depends(_require_internal_token),
):
    """Run one fetch -> reconcile -> evaluate -> dispatch cycle.

    Returns the cycle summary.
    """
    from econwatch.services.cycle import run_cycle

    try:
        return run_cycle(db)
    except Exception as exc:
        logger.exception("Internal cycle failed")
        return {"status": "failed", "error": str(exc)}
