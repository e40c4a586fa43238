from typing import Any, Protocol, Type, TypeVar, runtime_checkable
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound


@runtime_checkable
class Ownable(Protocol):
    def owner_identity(self) -> UUID:
        ...


T = TypeVar("T")


def authorize(record: Ownable, caller_id: UUID, action: str = "modify") -> None:
    """Raise ``Forbidden`` unless ``caller_id`` owns ``record``.

    Ownership is the only authorization predicate; no roles are consulted.
    """
    if record.owner_identity() != caller_id:
        logger.warning(
            f"Caller {caller_id} denied {action} on {type(record).__name__} {getattr(record, 'id', '?')}"
        )
        raise Forbidden(f"You are not authorized to {action} this {type(record).__name__.lower()}")


async def load_owned(
    db: AsyncSession,
    model: Type[T],
    record_id: UUID,
    caller_id: UUID,
    resource: str,
    action: str = "modify",
) -> T:
    # existence first so a missing record never reports as Forbidden
    record: Any = await db.get(model, record_id)
    if record is None:
        raise NotFound(resource)
    authorize(record, caller_id, action)
    return record
