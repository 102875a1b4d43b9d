"""
Article record and media classification kinds.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from src.file_utils import get_utc_timestamp


class MediaKind(str, Enum):
    """Embed type chosen from an uploaded file's extension."""

    NONE = "none"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Article:
    """One submitted article as recorded in the index."""

    id: int
    title: str
    attachment: Optional[str] = None
    media_kind: MediaKind = MediaKind.NONE
    created_at: str = field(default_factory=get_utc_timestamp)

    @property
    def path(self) -> str:
        """URL path of the rendered page."""
        return f"/articles/{self.id}/"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the JSON index."""
        return {
            "id": self.id,
            "title": self.title,
            "attachment": self.attachment,
            "media_kind": self.media_kind.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        """
        Build an Article from an index record.

        Older records that only carry ``id`` and ``title`` are accepted.

        Raises:
            KeyError, ValueError, TypeError: if the record is malformed.
        """
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            attachment=data.get("attachment"),
            media_kind=MediaKind(data.get("media_kind", MediaKind.NONE.value)),
            created_at=data.get("created_at") or "",
        )
