"""Row and session types."""

from dataclasses import dataclass
from datetime import datetime

from .config import DATE_FORMAT, PREVIEW_LENGTH


@dataclass(frozen=True)
class Post:
    """One row of the posts table."""

    id: str
    title: str
    content: str
    user_id: str
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: dict) -> "Post":
        """Build a Post from a backend row.

        Args:
            row: Row dictionary as returned by the backend

        Returns:
            Post instance
        """
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            content=row.get("content") or "",
            user_id=str(row.get("user_id") or ""),
            created_at=row.get("created_at") or "",
            updated_at=row.get("updated_at") or row.get("created_at") or "",
        )

    def preview(self, limit: int = PREVIEW_LENGTH) -> str:
        """Content shortened to ``limit`` characters with a trailing ellipsis."""
        if len(self.content) > limit:
            return f"{self.content[:limit]}..."
        return self.content

    def posted_on(self) -> str:
        """Creation date formatted for display."""
        try:
            created = datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))
        except ValueError:
            return self.created_at[:10]
        return created.strftime(DATE_FORMAT)


@dataclass(frozen=True)
class User:
    """The signed-in user as reported by the auth service."""

    id: str
    email: str | None = None

    @classmethod
    def from_sdk(cls, user) -> "User | None":
        """Convert an auth SDK user object (or None) into a User."""
        if user is None:
            return None
        return cls(id=str(user.id), email=getattr(user, "email", None))
