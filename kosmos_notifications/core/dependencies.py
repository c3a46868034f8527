from datetime import datetime, timezone

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosmos_notifications.core.database import get_session
from kosmos_notifications.content.repository import SqlContentRepository


async def get_content_repository(
    session: AsyncSession = Depends(get_session),
) -> SqlContentRepository:
    return SqlContentRepository(session)


def get_current_time() -> datetime:
    """Request clock; overridden in tests to pin "today" """
    return datetime.now(timezone.utc)
