from kosmos_notifications.core.database import Base
from .categories import Category, record_categories
from .records import ContentRecord, RecordStatus, RecordType
from .record_meta import RecordMeta

__all__ = [
    "Base",
    "Category",
    "record_categories",
    "ContentRecord",
    "RecordStatus",
    "RecordType",
    "RecordMeta",
]
