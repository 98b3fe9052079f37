import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Type

from core.errors import NotFoundError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(value: Any, not_found: Type[NotFoundError] = NotFoundError) -> uuid.UUID:
    """
    Coerce a path/header identifier to a UUID.

    A malformed id cannot name any row, so it is reported exactly like an
    absent one.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        logger.debug(f"Rejecting malformed id {value!r}")
        raise not_found(f"{not_found.__name__.replace('NotFoundError', '') or 'Resource'} not found") from None
