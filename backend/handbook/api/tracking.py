from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session
from slowapi import Limiter

from ..config import settings
from ..core.errors import InvalidClickRequestError
from ..database import get_db
from ..schemas.click import PolicyClickRequest, PolicyClickCountResponse, MessageResponse
from ..services.tracking import record_click, get_click_counts
from ..utils.validators import get_client_ip, get_user_agent, get_rate_limit_key

router = APIRouter(prefix="/PolicyClickTracking")
limiter = Limiter(key_func=get_rate_limit_key)


@router.post("/RecordClick", response_model=MessageResponse)
@limiter.limit(settings.RECORD_CLICK_RATE_LIMIT)
async def record_policy_click(
    request: Request,
    payload: Optional[PolicyClickRequest] = Body(None),
    db: Session = Depends(get_db)
):
    """
    Record a click on a policy card.

    Called fire-and-forget by the policy accordion script.
    """
    if payload is None:
        raise InvalidClickRequestError("Missing request body")

    record_click(
        db,
        policy_id=payload.policy_id,
        policy_title=payload.policy_title,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request)
    )

    return {"success": True, "message": "Click recorded successfully"}


@router.get("/GetClickCounts", response_model=List[PolicyClickCountResponse])
async def get_policy_click_counts(db: Session = Depends(get_db)):
    """Click counts per policy, most popular first"""
    return get_click_counts(db)
