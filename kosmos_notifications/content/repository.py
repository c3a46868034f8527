"""
Read-only repository over the content store.

``ContentRepository`` is the narrow interface the notifications service
depends on; ``SqlContentRepository`` satisfies it with SQLAlchemy.
"""

import logging
from datetime import date
from typing import List, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from kosmos_notifications.core.config import SITE_URL
from kosmos_notifications.core.database import db_operation
from kosmos_notifications.content.models import (
    Category,
    ContentRecord,
    RecordMeta,
    RecordStatus,
    RecordType,
)

logger = logging.getLogger(__name__)

# Metadata keys
NOTIFY_USERS = "notify_users"
NOTIFICATION_TEXT = "notification_text"
NOTIFICATION_LINK = "notification_link"
START_DATE = "start_date"
END_DATE = "end_date"
PRIORITY = "priority"

TRUTHY_META_VALUES = ("1", "true", "yes", "on")

# YYYY-MM-DD, optionally followed by a time part, or compact YYYYMMDD.
# Anything else counts as no date at all.
META_DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}([ T].*)?$|^[0-9]{8}$"


class ContentRepository(Protocol):
    async def get_category_by_slug(self, slug: str) -> Optional[int]: ...

    async def find_active_notifications(
        self, category_id: Optional[int], today: date, limit: int
    ) -> List[ContentRecord]: ...

    def get_meta(self, record: ContentRecord, key: str) -> str: ...

    def has_excerpt(self, record: ContentRecord) -> bool: ...

    def get_excerpt(self, record: ContentRecord) -> str: ...

    def get_body(self, record: ContentRecord) -> str: ...

    def get_permalink(self, record: ContentRecord) -> str: ...


def _meta_exists(key: str, *conditions):
    """EXISTS over the record's metadata rows with ``key``"""
    return (
        select(RecordMeta.id)
        .where(
            RecordMeta.record_id == ContentRecord.id,
            RecordMeta.meta_key == key,
            *conditions,
        )
        .exists()
    )


def _date_key(column):
    # YYYYMMDD of a value matching META_DATE_PATTERN
    return func.substr(func.replace(func.trim(column), "-", ""), 1, 8)


def eligibility_conditions(category_id: Optional[int], today: date) -> list:
    """
    WHERE clauses selecting records that are currently active notifications.

    A start/end date that is absent, empty or not shaped like
    ``META_DATE_PATTERN`` leaves that side of the window open; both bounds
    are inclusive.
    """
    today_key = today.strftime("%Y%m%d")
    is_date = (
        RecordMeta.meta_value.is_not(None),
        func.trim(RecordMeta.meta_value).regexp_match(META_DATE_PATTERN),
    )

    conditions = [
        ContentRecord.status == RecordStatus.published.value,
        ContentRecord.record_type == RecordType.article.value,
        _meta_exists(
            NOTIFY_USERS,
            func.lower(func.trim(RecordMeta.meta_value)).in_(TRUTHY_META_VALUES),
        ),
        ~_meta_exists(
            START_DATE, *is_date, _date_key(RecordMeta.meta_value) > today_key
        ),
        ~_meta_exists(
            END_DATE, *is_date, _date_key(RecordMeta.meta_value) < today_key
        ),
    ]

    if category_id:
        conditions.append(ContentRecord.categories.any(Category.id == category_id))

    return conditions


class SqlContentRepository:
    """Content store adapter backed by an ``AsyncSession``"""

    def __init__(self, session: AsyncSession, site_url: str = SITE_URL):
        self.session = session
        self.site_url = site_url.rstrip("/")

    @db_operation
    async def get_category_by_slug(self, slug: str) -> Optional[int]:
        if not slug:
            return None

        result = await self.session.execute(
            select(Category.id).where(func.lower(Category.slug) == slug.lower())
        )
        return result.scalars().first()

    @db_operation
    async def find_active_notifications(
        self, category_id: Optional[int], today: date, limit: int
    ) -> List[ContentRecord]:
        query = (
            select(ContentRecord)
            .options(selectinload(ContentRecord.meta))
            .where(*eligibility_conditions(category_id, today))
            .order_by(ContentRecord.published_at.desc(), ContentRecord.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    def get_meta(self, record: ContentRecord, key: str) -> str:
        """First stored value for ``key``, or an empty string"""
        for entry in record.meta:
            if entry.meta_key == key:
                return entry.meta_value or ""
        return ""

    def has_excerpt(self, record: ContentRecord) -> bool:
        return bool((record.excerpt or "").strip())

    def get_excerpt(self, record: ContentRecord) -> str:
        return record.excerpt or ""

    def get_body(self, record: ContentRecord) -> str:
        return record.body or ""

    def get_permalink(self, record: ContentRecord) -> str:
        if record.slug:
            return f"{self.site_url}/{record.slug}/"
        return f"{self.site_url}/?p={record.id}"
