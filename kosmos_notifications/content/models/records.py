"""Published content owned by the content store"""
from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from kosmos_notifications.core.database import Base
from kosmos_notifications.content.models.categories import record_categories


class RecordStatus(str, Enum):
    published = "published"
    draft = "draft"
    pending = "pending"
    private = "private"
    trash = "trash"


class RecordType(str, Enum):
    article = "article"
    page = "page"
    attachment = "attachment"


class ContentRecord(Base):
    __tablename__ = "content_records"

    id = Column(Integer, primary_key=True)
    record_type = Column(
        String(20), default=RecordType.article.value, nullable=False, index=True
    )
    status = Column(
        String(20), default=RecordStatus.draft.value, nullable=False, index=True
    )

    slug = Column(String(200), nullable=True)
    title = Column(Text, nullable=False, default="")
    body = Column(Text, nullable=False, default="")
    excerpt = Column(Text, nullable=False, default="")

    # UTC
    published_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    modified_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    categories = relationship(
        "Category", secondary=record_categories, back_populates="records"
    )
    meta = relationship(
        "RecordMeta",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="RecordMeta.id",
    )

    def __repr__(self):
        return f"<ContentRecord(id={self.id}, status='{self.status}', title='{self.title}')>"
