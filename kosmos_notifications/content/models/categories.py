from sqlalchemy import Column, Integer, String, Table, ForeignKey
from sqlalchemy.orm import relationship
from kosmos_notifications.core.database import Base


record_categories = Table(
    "content_record_categories",
    Base.metadata,
    Column(
        "record_id",
        Integer,
        ForeignKey("content_records.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("content_categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Category(Base):
    __tablename__ = "content_categories"

    id = Column(Integer, primary_key=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)

    records = relationship(
        "ContentRecord", secondary=record_categories, back_populates="categories"
    )

    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}')>"
