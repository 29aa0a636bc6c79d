from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PostSource(str, Enum):
    """Where a social post came from."""
    LIVE = "live"
    MOCK = "mock"


class Priority(str, Enum):
    """Urgency tier of a post, most urgent first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReportType(str, Enum):
    """What a post is about."""
    NEED = "need"
    OFFER = "offer"
    ALERT = "alert"
    REQUEST = "request"
    UPDATE = "update"
    GENERAL = "general"


class Author(BaseModel):
    """Author of a social post."""
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    username: str | None = None
    name: str | None = None


class SocialPost(BaseModel):
    """A normalized and classified social media post."""
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    author: Author = Field(default_factory=Author)
    timestamp: datetime | None = None
    source: PostSource
    priority: Priority
    type: ReportType
    keywords: frozenset[str] = frozenset()
