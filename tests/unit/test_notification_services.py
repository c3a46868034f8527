"""
Unit tests for notifications/services.py

Projection and cache validators are exercised on in-memory records; no
database is involved.
"""

import unittest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from kosmos_notifications.content.models import ContentRecord, RecordMeta
from kosmos_notifications.content.repository import SqlContentRepository
from kosmos_notifications.notifications.schemas import NotificationPriority
from kosmos_notifications.notifications.services import (
    compute_etag,
    compute_last_modified,
    etag_matches,
    get_active_notifications,
    normalize_category,
    parse_meta_date,
    parse_priority,
    project_item,
    serialize_items,
)

PUBLISHED = datetime(2026, 2, 1, 10, 30, tzinfo=timezone.utc)


def make_record(record_id=7, meta=None, **fields) -> ContentRecord:
    fields.setdefault("title", "Title")
    fields.setdefault("body", "")
    fields.setdefault("excerpt", "")
    fields.setdefault("published_at", PUBLISHED)
    fields.setdefault("modified_at", PUBLISHED)
    record = ContentRecord(id=record_id, **fields)
    record.meta = [
        RecordMeta(meta_key=key, meta_value=value)
        for key, value in (meta or {"notify_users": "1"}).items()
    ]
    return record


class TestParsing(unittest.TestCase):
    def test_normalize_category_defaults_to_news(self):
        self.assertEqual(normalize_category(None), "news")
        self.assertEqual(normalize_category(""), "news")
        self.assertEqual(normalize_category(" <i></i> "), "news")
        self.assertEqual(normalize_category(" events "), "events")

    def test_parse_meta_date(self):
        self.assertEqual(parse_meta_date("2026-03-15"), date(2026, 3, 15))
        self.assertEqual(parse_meta_date("20260315"), date(2026, 3, 15))
        self.assertIsNone(parse_meta_date(""))
        self.assertIsNone(parse_meta_date(None))
        self.assertIsNone(parse_meta_date("next week"))

    def test_parse_meta_date_with_time_part(self):
        self.assertEqual(parse_meta_date("2026-03-15 00:00:00"), date(2026, 3, 15))
        self.assertEqual(parse_meta_date("2026-03-16T08:00:00"), date(2026, 3, 16))

    def test_parse_meta_date_rejects_other_shapes(self):
        # Matches what the eligibility query ignores
        self.assertIsNone(parse_meta_date("2026-3-5"))
        self.assertIsNone(parse_meta_date("15/03/2026"))
        self.assertIsNone(parse_meta_date("2026031"))
        self.assertIsNone(parse_meta_date("2026-02-30"))

    def test_parse_priority(self):
        self.assertEqual(parse_priority("high"), NotificationPriority.high)
        self.assertEqual(parse_priority(" LOW "), NotificationPriority.low)
        self.assertEqual(parse_priority(""), NotificationPriority.normal)
        self.assertEqual(parse_priority("urgent"), NotificationPriority.normal)


class TestProjectItem(unittest.TestCase):
    def setUp(self):
        self.repository = SqlContentRepository(session=None, site_url="https://site.example/")

    def test_empty_text_and_priority_use_defaults(self):
        """Empty text and priority fall back to the excerpt and 'normal'."""
        record = make_record(
            excerpt="Hello world",
            meta={
                "notify_users": "1",
                "start_date": None,
                "end_date": "2099-01-01",
                "priority": "",
                "notification_text": "",
            },
        )

        item = project_item(self.repository, record)

        self.assertEqual(item.id, "post-7")
        self.assertEqual(item.record_id, 7)
        self.assertEqual(item.priority, NotificationPriority.normal)
        self.assertEqual(item.message, "Hello world")
        self.assertIsNone(item.start_date)
        self.assertEqual(item.end_date, date(2099, 1, 1))
        self.assertEqual(item.published_date, PUBLISHED)

    def test_excerpt_markup_is_stripped(self):
        record = make_record(excerpt="<p>Hello <strong>there</strong></p>")

        self.assertEqual(project_item(self.repository, record).message, "Hello there")

    def test_body_fallback(self):
        body = "<p>" + " ".join(["lorem"] * 45) + "</p>"

        message = project_item(self.repository, make_record(body=body)).message

        self.assertEqual(message, " ".join(["lorem"] * 40) + "...")

    def test_link_fallback_to_permalink(self):
        item = project_item(self.repository, make_record(slug="big-news"))

        self.assertEqual(item.link, "https://site.example/big-news/")

    def test_first_meta_value_wins(self):
        record = make_record(
            meta={"notify_users": "1", "notification_text": "First"},
        )
        record.meta.append(RecordMeta(meta_key="notification_text", meta_value="Second"))

        self.assertEqual(project_item(self.repository, record).message, "First")

    def test_naive_timestamps_are_utc(self):
        record = make_record(published_at=datetime(2026, 2, 1, 10, 30))

        item = project_item(self.repository, record)

        self.assertEqual(item.published_date, PUBLISHED)

    def test_serialized_field_names(self):
        item = project_item(self.repository, make_record())

        payload = item.model_dump(mode="json", by_alias=True)

        self.assertEqual(payload["recordId"], 7)
        self.assertIn("publishedDate", payload)
        self.assertIn("startDate", payload)
        self.assertIn("endDate", payload)


class TestCacheValidators(unittest.TestCase):
    def setUp(self):
        self.repository = SqlContentRepository(session=None, site_url="https://site.example")

    def test_etag_is_quoted_md5(self):
        etag = compute_etag(b"[]")

        self.assertEqual(etag, '"d751713988987e9331980363e24189ce"')

    def test_etag_changes_with_content(self):
        first = serialize_items([project_item(self.repository, make_record(title="A"))])
        second = serialize_items([project_item(self.repository, make_record(title="B"))])

        self.assertNotEqual(compute_etag(first), compute_etag(second))

    def test_serialize_is_compact_json_array(self):
        self.assertEqual(serialize_items([]), b"[]")

    def test_last_modified_is_newest(self):
        now = datetime(2026, 3, 15, 12, tzinfo=timezone.utc)
        records = [
            make_record(modified_at=datetime(2026, 3, 1, tzinfo=timezone.utc)),
            make_record(modified_at=datetime(2026, 3, 9, 17, 5)),
        ]

        self.assertEqual(
            compute_last_modified(records, now),
            datetime(2026, 3, 9, 17, 5, tzinfo=timezone.utc),
        )

    def test_last_modified_defaults_to_now(self):
        now = datetime(2026, 3, 15, 12, tzinfo=timezone.utc)

        self.assertEqual(compute_last_modified([], now), now)

    def test_etag_matches(self):
        etag = '"abc"'

        self.assertTrue(etag_matches('"abc"', etag))
        self.assertTrue(etag_matches('"x", "abc"', etag))
        self.assertTrue(etag_matches('W/"abc"', etag))
        self.assertTrue(etag_matches("*", etag))
        self.assertFalse(etag_matches('"abcd"', etag))
        self.assertFalse(etag_matches("abc", etag))
        self.assertFalse(etag_matches("", etag))
        self.assertFalse(etag_matches(None, etag))


class TestGetActiveNotifications(unittest.IsolatedAsyncioTestCase):
    def make_repository(self, category_id, records=()):
        repository = MagicMock(wraps=SqlContentRepository(session=None))
        repository.get_category_by_slug = AsyncMock(return_value=category_id)
        repository.find_active_notifications = AsyncMock(return_value=list(records))
        return repository

    async def test_unknown_category_skips_query(self):
        repository = self.make_repository(None)

        items, records = await get_active_notifications(
            repository, "missing", date(2026, 3, 15)
        )

        self.assertEqual(items, [])
        self.assertEqual(records, [])
        repository.get_category_by_slug.assert_awaited_once_with("missing")
        repository.find_active_notifications.assert_not_awaited()

    async def test_default_category_and_limit(self):
        record = make_record(title="Alert")
        repository = self.make_repository(3, [record])

        items, records = await get_active_notifications(
            repository, None, date(2026, 3, 15)
        )

        repository.get_category_by_slug.assert_awaited_once_with("news")
        repository.find_active_notifications.assert_awaited_once_with(
            3, date(2026, 3, 15), 10
        )
        self.assertEqual([item.title for item in items], ["Alert"])
        self.assertEqual(records, [record])


if __name__ == "__main__":
    unittest.main()
