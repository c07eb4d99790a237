"""Page controllers: what each screen loads, validates and renders.

Each page owns a CancelToken for its in-flight load. ``close()`` cancels it,
after which late results are dropped instead of applied.
"""

import logging
from typing import Mapping

from .backend.base import BlogBackend
from .errors import BackendError, RequestRejected
from .lifecycle import CancelToken
from .models import Post
from .params import ParamsValidator
from .store import (
    MutationPolicy,
    Store,
    create_post,
    delete_post,
    fetch_posts,
    sign_in,
    sign_out,
    sign_up,
    update_post,
)
from .store.actions import SetPage

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Title and content are required"
NOT_FOUND_MESSAGE = "Post not found"


class Page:
    """Base class handling the load token."""

    def __init__(self, store: Store, backend: BlogBackend):
        self.store = store
        self.backend = backend
        self._token = CancelToken()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _begin_load(self) -> CancelToken:
        """Abandon any previous load and start a new one."""
        self._token.cancel()
        self._token = CancelToken()
        if self._closed:
            self._token.cancel()
        return self._token

    def close(self):
        """Tear the page down; pending loads will not touch it."""
        self._closed = True
        self._token.cancel()


class HomePage(Page):
    """Paged list of posts."""

    async def load(self):
        state = self.store.state.posts
        try:
            await fetch_posts(self.store, self.backend, state.current_page, state.posts_per_page)
        except RequestRejected:
            # Message already held in the container
            pass

    async def change_page(self, page: int):
        self.store.dispatch(SetPage(page))
        await self.load()

    def render(self) -> str:
        state = self.store.state.posts
        if state.loading:
            return "Loading..."
        if state.error:
            return state.error

        lines = ["Blog Posts"]
        if self.store.state.auth.user:
            lines.append("[Create Post]")
        for post in state.posts:
            lines.extend([
                "",
                f"{post.title}  (/posts/{post.id})",
                post.preview(),
                f"Posted on {post.posted_on()}",
            ])

        total_pages = state.total_pages
        if total_pages > 1:
            lines.extend(["", f"Page {state.current_page} of {total_pages}"])
        return "\n".join(lines)


class CreatePostForm(Page):
    """New post form."""

    def __init__(
        self,
        store: Store,
        backend: BlogBackend,
        policy: MutationPolicy = MutationPolicy.OPTIMISTIC_PREPEND,
    ):
        super().__init__(store, backend)
        self.policy = policy
        self.error = ""

    async def submit(self, title: str, content: str) -> Post | None:
        """Validate and create the post.

        Returns:
            The created post, or None with ``error`` set
        """
        self.error = ""
        if not title.strip() or not content.strip():
            self.error = REQUIRED_FIELDS_MESSAGE
            return None

        try:
            post = await create_post(self.store, self.backend, title, content, self.policy)
        except RequestRejected as e:
            self.error = e.message or "Failed to create post. Please try again."
            logger.error(f"Create post failed: {e}")
            return None
        return post


class PostDetailPage(Page):
    """Single post with edit/delete controls for its owner."""

    def __init__(self, store: Store, backend: BlogBackend, params: Mapping,
                 search_params: Mapping | None = None):
        super().__init__(store, backend)
        self.params = ParamsValidator(["id"])
        self.params.sync(params, search_params)
        self.post: Post | None = None
        self.loading = True
        self.error: str | None = None

    async def set_params(self, params: Mapping, search_params: Mapping | None = None):
        """Apply new route parameters and reload if the validated view changed."""
        before = (self.params.validated, self.params.error)
        self.params.sync(params, search_params)
        if (self.params.validated, self.params.error) != before:
            await self.load()

    async def load(self):
        token = self._begin_load()
        post_id = self.params.validated.get("id")

        if not post_id:
            if self.params.error:
                self.error = self.params.error
                self.loading = False
            return

        try:
            post = await self.backend.get_post(post_id)
        except BackendError as e:
            if not token.cancelled:
                self.error = str(e) or "Failed to load post"
                self.loading = False
            return

        if token.cancelled:
            logger.debug(f"Dropped result for post {post_id}: page closed")
            return

        if post:
            self.post = post
            self.error = None
        else:
            self.error = NOT_FOUND_MESSAGE
        self.loading = False

    def can_manage(self) -> bool:
        """Whether the signed-in user owns the post."""
        user = self.store.state.auth.user
        return bool(self.post and user and user.id == self.post.user_id)

    async def delete(self) -> bool:
        post_id = self.params.validated.get("id")
        if not post_id:
            return False

        try:
            await delete_post(self.store, self.backend, post_id)
        except RequestRejected as e:
            self.error = "Failed to delete post"
            logger.error(f"Delete post failed: {e}")
            return False
        return True

    def render(self) -> str:
        if self.loading:
            return "Loading..."
        if self.error:
            return self.error
        if not self.post:
            return NOT_FOUND_MESSAGE

        lines = [
            self.post.title,
            f"Posted on {self.post.posted_on()}",
            "",
            self.post.content,
        ]
        if self.can_manage():
            lines.extend(["", "[Edit Post] [Delete Post]"])
        return "\n".join(lines)


class EditPostForm(Page):
    """Edit form, available to the post's owner only."""

    def __init__(self, store: Store, backend: BlogBackend, params: Mapping):
        super().__init__(store, backend)
        self.post_id = params.get("id")
        self.post: Post | None = None
        self.title = ""
        self.content = ""
        self.error = ""
        self.loading = True
        self.updating = False

    async def load(self):
        token = self._begin_load()
        if not self.post_id:
            self.error = "Post ID is required"
            self.loading = False
            return

        user = self.store.state.auth.user
        if not user:
            self.error = "You must be signed in to edit posts"
            self.loading = False
            return

        try:
            post = await self.backend.get_post(self.post_id)
        except BackendError as e:
            if not token.cancelled:
                self.error = str(e) or "Failed to load post"
                self.loading = False
            return

        if token.cancelled:
            return
        self.loading = False

        if not post:
            self.error = NOT_FOUND_MESSAGE
            return
        if post.user_id != user.id:
            self.error = "You do not have permission to edit this post"
            return

        self.post = post
        self.title = post.title
        self.content = post.content
        self.error = ""

    async def submit(self, title: str, content: str) -> Post | None:
        """Validate and save the edited post.

        Returns:
            The updated post, or None with ``error`` set
        """
        self.error = ""
        if not title.strip() or not content.strip():
            self.error = REQUIRED_FIELDS_MESSAGE
            return None
        if not self.post:
            self.error = NOT_FOUND_MESSAGE
            return None

        self.updating = True
        try:
            return await update_post(
                self.store, self.backend, self.post.id, title.strip(), content.strip()
            )
        except RequestRejected as e:
            self.error = e.message or "Failed to update post"
            logger.error(f"Update post failed: {e}")
            return None
        finally:
            self.updating = False


class AuthForm(Page):
    """Sign in / sign up form."""

    def __init__(self, store: Store, backend: BlogBackend, mode: str = "signin"):
        if mode not in ("signin", "signup"):
            raise ValueError(f"Unknown auth form mode: {mode}")
        super().__init__(store, backend)
        self.mode = mode
        self.error = ""

    async def submit(self, email: str, password: str) -> bool:
        if not email.strip() or not password:
            self.error = "Email and password are required"
            return False

        self.error = ""
        action = sign_in if self.mode == "signin" else sign_up
        try:
            await action(self.store, self.backend, email.strip(), password)
        except RequestRejected as e:
            self.error = e.message
            return False
        return True


class Navbar(Page):
    """Account links and sign out."""

    def render(self) -> str:
        user = self.store.state.auth.user
        if user:
            return f"Supabase Blog | {user.email or user.id} | [Sign Out]"
        return "Supabase Blog | [Sign In] [Sign Up]"

    async def sign_out(self) -> bool:
        try:
            await sign_out(self.store, self.backend)
        except RequestRejected as e:
            logger.error(f"Sign out failed: {e}")
            return False
        return True
