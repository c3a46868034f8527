from datetime import datetime
from email.utils import format_datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, Query, Request, Response, status

from kosmos_notifications.core.config import (
    NOTIFICATIONS_LIMIT,
    SITE_TIMEZONE,
)
from kosmos_notifications.core.dependencies import (
    get_content_repository,
    get_current_time,
)
from kosmos_notifications.core.limits import limiter, notifications_rate_limit
from kosmos_notifications.content.repository import ContentRepository
from kosmos_notifications.notifications.schemas import NotificationItem
from kosmos_notifications.notifications.services import (
    compute_etag,
    compute_last_modified,
    etag_matches,
    get_active_notifications,
    serialize_items,
)

router = APIRouter(tags=["Notifications"])


@router.get(
    "/notifications",
    response_model=List[NotificationItem],
    responses={304: {"description": "Cached copy is current"}},
)
@limiter.limit(notifications_rate_limit)
async def list_active_notifications(
    request: Request,
    category: Optional[str] = Query(
        None, description="Category slug, 'news' when omitted"
    ),
    if_none_match: Optional[str] = Header(None),
    repository: ContentRepository = Depends(get_content_repository),
    now: datetime = Depends(get_current_time),
):
    """
    Active notifications of a category, newest first, at most 10.

    Answers 304 with an empty body when ``If-None-Match`` carries the
    current ETag.
    """
    today = now.astimezone(ZoneInfo(SITE_TIMEZONE)).date()
    items, records = await get_active_notifications(
        repository, category, today, NOTIFICATIONS_LIMIT
    )

    body = serialize_items(items)
    etag = compute_etag(body)

    if etag_matches(if_none_match, etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    last_modified = compute_last_modified(records, now)
    return Response(
        content=body,
        status_code=status.HTTP_200_OK,
        headers={
            "Content-Type": "application/json; charset=utf-8",
            "ETag": etag,
            "Last-Modified": format_datetime(last_modified, usegmt=True),
        },
    )
