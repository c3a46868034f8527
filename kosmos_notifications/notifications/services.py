"""
Active notifications service.

Resolves the requested category, runs the eligibility query against the
content store, projects matching records into notification items and
derives the HTTP cache validators for the result.
"""
import hashlib
import json
import logging
import re
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from kosmos_notifications.core.config import DEFAULT_CATEGORY, NOTIFICATIONS_LIMIT
from kosmos_notifications.core.text_utils import (
    decode_entities,
    sanitize_text_field,
    strip_all_tags,
    trim_words,
)
from kosmos_notifications.content.models import ContentRecord
from kosmos_notifications.content.repository import (
    ContentRepository,
    END_DATE,
    META_DATE_PATTERN,
    NOTIFICATION_LINK,
    NOTIFICATION_TEXT,
    PRIORITY,
    START_DATE,
)
from kosmos_notifications.notifications.schemas import (
    NotificationItem,
    NotificationPriority,
)

logger = logging.getLogger(__name__)

EXCERPT_WORDS = 40
EXCERPT_MORE = "..."
_META_DATE = re.compile(META_DATE_PATTERN)


def normalize_category(raw: Optional[str]) -> str:
    """Sanitized category slug; falls back to the default category"""
    slug = sanitize_text_field(raw)
    return slug or DEFAULT_CATEGORY


async def resolve_category(
    repository: ContentRepository, raw: Optional[str]
) -> Tuple[str, Optional[int]]:
    slug = normalize_category(raw)
    category_id = await repository.get_category_by_slug(slug)
    return slug, category_id


def parse_meta_date(value: str) -> Optional[date]:
    """
    Calendar date of a ``start_date``/``end_date`` value.

    Accepts the shapes the eligibility query treats as dates
    (``META_DATE_PATTERN``) and reads their first eight digits, so a value
    the query ignores projects to ``None``. A well-shaped value that is not
    a real day, such as ``2026-02-30``, also projects to ``None`` while the
    query still compares its digits.
    """
    value = (value or "").strip()
    if not value:
        return None

    if _META_DATE.match(value):
        try:
            return datetime.strptime(value.replace("-", "")[:8], "%Y%m%d").date()
        except ValueError:
            pass

    logger.debug(f"Ignoring unparseable metadata date: {value!r}")
    return None


def parse_priority(value: str) -> NotificationPriority:
    try:
        return NotificationPriority((value or "").strip().lower())
    except ValueError:
        return NotificationPriority.normal


def as_utc(moment: datetime) -> datetime:
    # Stores without timezone support hand back naive UTC values
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def notification_message(repository: ContentRepository, record: ContentRecord) -> str:
    text = repository.get_meta(record, NOTIFICATION_TEXT)
    if text:
        return text

    if repository.has_excerpt(record):
        return strip_all_tags(repository.get_excerpt(record))

    return strip_all_tags(
        trim_words(repository.get_body(record), EXCERPT_WORDS, EXCERPT_MORE)
    )


def project_item(repository: ContentRepository, record: ContentRecord) -> NotificationItem:
    """Map one eligible record to its notification item"""
    link = repository.get_meta(record, NOTIFICATION_LINK)

    return NotificationItem(
        id=f"post-{record.id}",
        record_id=int(record.id),
        title=decode_entities(record.title),
        message=notification_message(repository, record),
        link=link or repository.get_permalink(record),
        start_date=parse_meta_date(repository.get_meta(record, START_DATE)),
        end_date=parse_meta_date(repository.get_meta(record, END_DATE)),
        priority=parse_priority(repository.get_meta(record, PRIORITY)),
        published_date=as_utc(record.published_at),
    )


async def get_active_notifications(
    repository: ContentRepository,
    category: Optional[str],
    today: date,
    limit: int = NOTIFICATIONS_LIMIT,
) -> Tuple[List[NotificationItem], List[ContentRecord]]:
    """
    Active notifications for ``category`` on ``today``.

    An unknown category yields no items; the content store is not queried.
    At most ``limit`` records are returned, newest first, with no way to
    page past them.
    """
    slug, category_id = await resolve_category(repository, category)
    if category_id is None:
        logger.info(
            f"Unknown notification category: {slug}",
            extra={"category": slug},
        )
        return [], []

    records = await repository.find_active_notifications(category_id, today, limit)
    items = [project_item(repository, record) for record in records]

    logger.debug(
        f"Active notifications for '{slug}': {len(items)}",
        extra={"category": slug, "category_id": category_id, "count": len(items)},
    )
    return items, records


def serialize_items(items: Iterable[NotificationItem]) -> bytes:
    payload = [item.model_dump(mode="json", by_alias=True) for item in items]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode(
        "utf-8"
    )


def compute_etag(body: bytes) -> str:
    return f'"{hashlib.md5(body).hexdigest()}"'


def compute_last_modified(records: Sequence[ContentRecord], now: datetime) -> datetime:
    """Newest modification time among ``records``, or ``now`` when empty"""
    stamps = [as_utc(record.modified_at) for record in records if record.modified_at]
    if not stamps:
        return as_utc(now)
    return max(stamps)


def etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    """Whether an ``If-None-Match`` header value covers ``etag``"""
    if not if_none_match:
        return False

    candidates = [c.strip() for c in if_none_match.split(",") if c.strip()]
    if "*" in candidates:
        return True

    for candidate in candidates:
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False
