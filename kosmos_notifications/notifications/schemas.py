from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotificationPriority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"


class NotificationItem(BaseModel):
    """Client-facing projection of an eligible content record"""

    id: str = Field(..., description="Stable item id, 'post-<recordId>'")
    record_id: int
    title: str
    message: str
    link: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    priority: NotificationPriority = NotificationPriority.normal
    published_date: datetime

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )
