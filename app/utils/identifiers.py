from typing import Any, Optional
from uuid import UUID

from app.core.errors import InvalidIdentifier, ValidationFailed


def parse_identifier(value: Any, field: str) -> UUID:
    """Return ``value`` as a UUID or raise ``InvalidIdentifier(field)``.

    Accepts UUID instances unchanged and strings in any form ``uuid.UUID``
    understands (hyphenated, bare hex, braces, upper case).
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentifier(field)
    try:
        return UUID(value.strip())
    except (ValueError, AttributeError):
        raise InvalidIdentifier(field)


def parse_optional_identifier(value: Any, field: str) -> Optional[UUID]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_identifier(value, field)


def require_text(value: Optional[str], field: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationFailed(field)
    return value.strip()
