"""Supabase backend."""

import logging
import os
from datetime import datetime, timezone
from typing import Callable

import httpx
from supabase import AsyncClient, AuthError, PostgrestAPIError, acreate_client

from supablog.config import POSTS_TABLE, SUPABASE_KEY_ENV, SUPABASE_URL_ENV
from supablog.errors import AuthServiceError, DatabaseError, NetworkError
from supablog.models import Post, User

from .base import AuthListener, BlogBackend

logger = logging.getLogger(__name__)


class SupabaseBackend(BlogBackend):
    """Supabase PostgreSQL + auth backend."""

    def __init__(self, client: AsyncClient, table: str = POSTS_TABLE):
        """Initialize Supabase backend.

        Args:
            client: Connected async Supabase client
            table: Table name to use
        """
        self.client = client
        self.table = table

    @classmethod
    async def create(
        cls,
        url: str | None = None,
        key: str | None = None,
        table: str = POSTS_TABLE,
    ) -> "SupabaseBackend":
        """Connect to Supabase.

        Args:
            url: Supabase project URL (or SUPABASE_URL env var)
            key: Supabase anon key (or SUPABASE_KEY env var)
            table: Table name to use
        """
        url = url or os.environ.get(SUPABASE_URL_ENV)
        key = key or os.environ.get(SUPABASE_KEY_ENV)

        if not url or not key:
            raise ValueError(
                "Supabase credentials required. Set SUPABASE_URL and SUPABASE_KEY "
                "environment variables or pass url and key parameters."
            )

        client = await acreate_client(url, key)
        return cls(client, table)

    async def _execute(self, query):
        try:
            return await query.execute()
        except PostgrestAPIError as e:
            raise DatabaseError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e

    async def list_posts(self, start: int, end: int) -> tuple[list[Post], int | None]:
        response = await self._execute(
            self.client.table(self.table)
            .select("*", count="exact")
            .order("created_at", desc=True)
            .range(start, end)
        )
        return [Post.from_row(row) for row in response.data], response.count

    async def get_post(self, post_id: str) -> Post | None:
        response = await self._execute(
            self.client.table(self.table).select("*").eq("id", post_id).limit(1)
        )
        if response.data:
            return Post.from_row(response.data[0])
        return None

    async def insert_post(self, title: str, content: str) -> Post:
        response = await self._execute(
            self.client.table(self.table).insert({"title": title, "content": content})
        )
        if not response.data:
            raise DatabaseError("Insert returned no row")
        return Post.from_row(response.data[0])

    async def update_post(self, post_id: str, title: str, content: str) -> Post:
        response = await self._execute(
            self.client.table(self.table)
            .update({
                "title": title,
                "content": content,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", post_id)
        )
        if not response.data:
            raise DatabaseError(f"No post with id {post_id}")
        return Post.from_row(response.data[0])

    async def delete_post(self, post_id: str) -> int:
        response = await self._execute(
            self.client.table(self.table).delete().eq("id", post_id)
        )
        deleted = len(response.data or [])
        logger.debug(f"Deleted {deleted} row(s) for post {post_id}")
        return deleted

    async def sign_up(self, email: str, password: str) -> User | None:
        try:
            response = await self.client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            raise AuthServiceError(e.message) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e
        return User.from_sdk(response.user)

    async def sign_in(self, email: str, password: str) -> User:
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            raise AuthServiceError(e.message) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e
        return User.from_sdk(response.user)

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except AuthError as e:
            raise AuthServiceError(e.message) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e

    async def get_session_user(self) -> User | None:
        try:
            session = await self.client.auth.get_session()
        except AuthError as e:
            raise AuthServiceError(e.message) from e
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e
        if session is None:
            return None
        return User.from_sdk(session.user)

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        def _on_change(event, session):
            user = User.from_sdk(session.user) if session else None
            listener(str(event), user)

        subscription = self.client.auth.on_auth_state_change(_on_change)
        return subscription.unsubscribe
