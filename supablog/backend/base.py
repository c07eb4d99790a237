"""Abstract base class for blog backends."""

from abc import ABC, abstractmethod
from typing import Callable

from supablog.models import Post, User

AuthListener = Callable[[str, "User | None"], None]


class BlogBackend(ABC):
    """Abstract base class for blog backends.

    Implementations raise ``supablog.errors.BackendError`` subclasses for every
    remote failure.
    """

    @abstractmethod
    async def list_posts(self, start: int, end: int) -> tuple[list[Post], int | None]:
        """Get one page of posts, newest first.

        Args:
            start: Zero-based offset of the first row
            end: Zero-based offset of the last row (inclusive)

        Returns:
            Tuple of (posts in the range, exact total row count)
        """
        pass

    @abstractmethod
    async def get_post(self, post_id: str) -> Post | None:
        """Get a single post by id, or None if there is no such row."""
        pass

    @abstractmethod
    async def insert_post(self, title: str, content: str) -> Post:
        """Insert a post and return the stored row."""
        pass

    @abstractmethod
    async def update_post(self, post_id: str, title: str, content: str) -> Post:
        """Update a post's title and content and return the stored row."""
        pass

    @abstractmethod
    async def delete_post(self, post_id: str) -> int:
        """Delete a post by id.

        Returns:
            Number of rows the backend confirmed as deleted
        """
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> User | None:
        """Register a new account.

        Returns:
            The created user, or None when the service withholds it
        """
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> User:
        """Sign in with email and password."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session."""
        pass

    @abstractmethod
    async def get_session_user(self) -> User | None:
        """Get the user of the current session, if any."""
        pass

    @abstractmethod
    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener for session changes.

        Args:
            listener: Called with (event name, user or None) on every change

        Returns:
            Callable that unregisters the listener
        """
        pass
