import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import InvalidClickRequestError, TrackingUnavailableError
from ..models import PolicyCardClick, PolicyCardClickCount
from ..models.click import TITLE_MAX_LENGTH, IP_MAX_LENGTH, USER_AGENT_MAX_LENGTH
from ..utils.validators import truncate

logger = logging.getLogger("handbook.tracking")

UNKNOWN_TITLE = "Unknown"


def utcnow() -> datetime:
    """Naive UTC timestamp, the way the click tables store it"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _increment_counter(db: Session, policy_id: int, title: Optional[str], now: datetime) -> bool:
    """Bump an existing counter in place. Returns False when there is none yet."""
    values = {
        "click_count": PolicyCardClickCount.click_count + 1,
        "last_clicked": case(
            (PolicyCardClickCount.last_clicked > now, PolicyCardClickCount.last_clicked),
            else_=now
        ),
    }
    # Keep the stored title unless a new one was supplied
    if title:
        values["policy_title"] = title

    result = db.execute(
        update(PolicyCardClickCount)
        .where(PolicyCardClickCount.policy_id == policy_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def record_click(
    db: Session,
    policy_id: Optional[int],
    policy_title: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """
    Record one click on a policy card and bump its counter.

    The event insert and the counter upsert share one transaction, so a
    failure leaves neither behind. The increment runs in SQL so overlapping
    requests for the same policy cannot overwrite each other.
    """
    if policy_id is None or policy_id <= 0:
        raise InvalidClickRequestError("Invalid policy ID")

    title = truncate(policy_title, TITLE_MAX_LENGTH) if policy_title else None
    now = utcnow()

    try:
        click = PolicyCardClick(
            policy_id=policy_id,
            policy_title=title or UNKNOWN_TITLE,
            clicked_at=now,
            ip_address=truncate(ip_address, IP_MAX_LENGTH),
            user_agent=truncate(user_agent, USER_AGENT_MAX_LENGTH)
        )
        db.add(click)

        if not _increment_counter(db, policy_id, title, now):
            # First click for this policy
            db.add(PolicyCardClickCount(
                policy_id=policy_id,
                policy_title=title or UNKNOWN_TITLE,
                click_count=1,
                first_clicked=now,
                last_clicked=now
            ))

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error recording policy click for PolicyId: %s", policy_id, exc_info=True)
        raise TrackingUnavailableError() from e

    logger.info("Recorded click for policy %s: %s", policy_id, policy_title)


def get_click_counts(db: Session) -> List[PolicyCardClickCount]:
    """All counters, most clicked first"""
    try:
        return db.query(PolicyCardClickCount).order_by(
            PolicyCardClickCount.click_count.desc(),
            PolicyCardClickCount.policy_id
        ).all()
    except SQLAlchemyError as e:
        logger.error("Error retrieving policy click counts", exc_info=True)
        raise TrackingUnavailableError() from e
