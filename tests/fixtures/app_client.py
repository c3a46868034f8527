"""TestClient wired to a temporary SQLite content store."""

import os
import tempfile
import unittest
from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from kosmos_notifications.core.database import get_session
from kosmos_notifications.core.dependencies import get_current_time
from kosmos_notifications.main import app
from tests.fixtures.content_factory import create_content_store

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
NOTIFICATIONS_URL = "/wp-json/kosmos/v1/notifications"


class ContentStoreTestCase(unittest.TestCase):
    """Base case: seeds content through ``self.session`` and queries via ``self.client``."""

    create_schema = True

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self._tmpdir.name, "content.db")

        if self.create_schema:
            self.sync_engine = create_content_store(db_path)
        else:
            self.sync_engine = create_engine(f"sqlite:///{db_path}")
        self.session = Session(self.sync_engine)

        async_engine = create_async_engine(
            f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool
        )
        async_session = sessionmaker(
            async_engine, class_=AsyncSession, expire_on_commit=False
        )

        async def override_session():
            async with async_session() as session:
                yield session

        app.dependency_overrides[get_session] = override_session
        app.dependency_overrides[get_current_time] = lambda: NOW
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.session.close()
        self.sync_engine.dispose()
        self._tmpdir.cleanup()

    def commit(self):
        self.session.commit()

    def get_notifications(self, **params):
        headers = params.pop("headers", None)
        return self.client.get(NOTIFICATIONS_URL, params=params, headers=headers)
