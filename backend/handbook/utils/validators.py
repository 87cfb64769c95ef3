import logging
from typing import Optional

logger = logging.getLogger("handbook.validators")


def get_client_ip(request) -> Optional[str]:
    """
    Get client IP address from request.

    Precedence: first X-Forwarded-For entry, then X-Real-IP, then the
    transport address. Any failure yields None instead of an error.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or None
    """
    try:
        # Check for X-Forwarded-For header (if behind proxy)
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded is not None:
            # Take the first IP in the chain
            return forwarded.split(",")[0].strip() or None

        real_ip = request.headers.get("X-Real-IP")
        if real_ip is not None:
            return real_ip.strip() or None

        return request.client.host if request.client else None
    except Exception:
        logger.debug("Could not determine client IP", exc_info=True)
        return None


def get_rate_limit_key(request) -> str:
    """
    Rate limit bucket for a request: the resolved client IP.

    Uses the same proxy-header precedence as click recording, so visitors
    behind a reverse proxy do not share one bucket.
    """
    return get_client_ip(request) or "unknown"


def get_user_agent(request) -> Optional[str]:
    try:
        return request.headers.get("User-Agent")
    except Exception:
        return None


def truncate(value: Optional[str], max_length: int) -> Optional[str]:
    if value is None:
        return None
    return value[:max_length]
