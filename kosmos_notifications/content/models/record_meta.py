"""Key-value metadata attached to content records"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from kosmos_notifications.core.database import Base


class RecordMeta(Base):
    __tablename__ = "content_record_meta"

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(
        Integer,
        ForeignKey("content_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meta_key = Column(String(255), nullable=False, index=True)
    meta_value = Column(Text, nullable=True)

    record = relationship("ContentRecord", back_populates="meta")

    def __repr__(self):
        return f"<RecordMeta(record_id={self.record_id}, key='{self.meta_key}')>"
