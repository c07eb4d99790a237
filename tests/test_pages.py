"""Tests for the page controllers."""

import asyncio

import pytest

from supablog.errors import AuthServiceError, DatabaseError
from supablog.models import User
from supablog.pages import (
    AuthForm,
    CreatePostForm,
    EditPostForm,
    HomePage,
    Navbar,
    PostDetailPage,
)
from supablog.store import AppState, MutationPolicy, PostsState, Store
from supablog.store.actions import SetUser
from tests.mock_backend import MockBackend

OWNER = User(id="user-1", email="owner@example.com")
OTHER = User(id="user-2", email="other@example.com")


@pytest.fixture
def backend():
    backend = MockBackend()
    backend.session_user = OWNER
    return backend


@pytest.fixture
def store():
    store = Store()
    store.dispatch(SetUser(OWNER))
    return store


class TestHomePage:
    def test_render_lists_posts(self, store, backend):
        backend.add_post("Hello", "x" * 250)
        home = HomePage(store, backend)
        asyncio.run(home.load())

        text = home.render()
        assert "Blog Posts" in text
        assert "[Create Post]" in text
        assert "Hello" in text
        assert "x" * 200 + "..." in text
        assert "Posted on Jan 01, 2025" in text
        assert "Page 1 of" not in text

    def test_pagination(self, backend):
        for i in range(5):
            backend.add_post(f"Post {i}")
        store = Store(AppState(posts=PostsState(posts_per_page=2)))
        home = HomePage(store, backend)

        asyncio.run(home.change_page(2))

        assert backend.calls[-1] == ("list_posts", 2, 3)
        assert "Page 2 of 3" in home.render()
        assert "[Create Post]" not in home.render()

    def test_render_error(self, store, backend):
        backend.fail("list_posts", DatabaseError("relation does not exist"))
        home = HomePage(store, backend)
        asyncio.run(home.load())
        assert home.render() == "Fetch failed: relation does not exist"


class TestCreatePostForm:
    def test_requires_title_and_content(self, store, backend):
        form = CreatePostForm(store, backend)
        assert asyncio.run(form.submit("  ", "body")) is None
        assert form.error == "Title and content are required"
        assert backend.calls == []

    def test_creates_post(self, store, backend):
        form = CreatePostForm(store, backend)
        post = asyncio.run(form.submit("T", "C"))
        assert post.user_id == OWNER.id
        assert form.error == ""
        assert store.state.posts.posts[0] == post

    def test_refetch_policy(self, store, backend):
        form = CreatePostForm(store, backend, MutationPolicy.REFETCH)
        asyncio.run(form.submit("T", "C"))
        assert [c[0] for c in backend.calls] == ["insert_post", "list_posts"]

    def test_backend_error(self, store, backend):
        backend.session_user = None
        form = CreatePostForm(store, backend)
        assert asyncio.run(form.submit("T", "C")) is None
        assert form.error.startswith("Database error:")


class TestPostDetailPage:
    def test_missing_id(self, store, backend):
        page = PostDetailPage(store, backend, {})
        asyncio.run(page.load())
        assert page.loading is False
        assert page.render() == "Missing required parameters: id"
        assert backend.calls == []

    def test_loads_post(self, store, backend):
        post = backend.add_post("Hello", "World")
        page = PostDetailPage(store, backend, {"id": post.id})
        asyncio.run(page.load())
        assert page.post == post
        text = page.render()
        assert "Hello" in text
        assert "World" in text
        assert "[Edit Post] [Delete Post]" in text

    def test_not_found(self, store, backend):
        page = PostDetailPage(store, backend, {"id": "404"})
        asyncio.run(page.load())
        assert page.render() == "Post not found"

    def test_other_user_cannot_manage(self, store, backend):
        post = backend.add_post("Hello", user_id=OTHER.id)
        page = PostDetailPage(store, backend, {"id": post.id})
        asyncio.run(page.load())
        assert page.can_manage() is False
        assert "[Edit Post]" not in page.render()

    def test_closed_page_ignores_late_result(self, store, backend):
        post = backend.add_post("Hello")
        page = PostDetailPage(store, backend, {"id": post.id})

        async def scenario():
            backend.gate = asyncio.Event()
            task = asyncio.create_task(page.load())
            await asyncio.sleep(0)
            page.close()
            backend.gate.set()
            await task

        asyncio.run(scenario())
        assert page.post is None
        assert page.loading is True

    def test_new_load_drops_pending_result(self, store, backend):
        first = backend.add_post("First")
        second = backend.add_post("Second")
        page = PostDetailPage(store, backend, {"id": first.id})

        async def scenario():
            backend.gate = asyncio.Event()
            pending = asyncio.create_task(page.load())
            await asyncio.sleep(0)

            gate, backend.gate = backend.gate, None
            await page.set_params({"id": second.id})
            assert page.post == second

            gate.set()
            await pending

        asyncio.run(scenario())
        assert page.post == second
        assert page.error is None
        assert page.loading is False

    def test_set_params_reloads(self, store, backend):
        first = backend.add_post("First")
        second = backend.add_post("Second")
        page = PostDetailPage(store, backend, {"id": first.id})
        asyncio.run(page.load())

        asyncio.run(page.set_params({"id": second.id}))
        assert page.post == second

        calls = len(backend.calls)
        asyncio.run(page.set_params({"id": second.id}))
        assert len(backend.calls) == calls

    def test_delete(self, store, backend):
        post = backend.add_post("Hello")
        page = PostDetailPage(store, backend, {"id": post.id})
        asyncio.run(page.load())
        assert asyncio.run(page.delete()) is True
        assert post.id not in backend.rows

    def test_delete_failure(self, store, backend):
        post = backend.add_post("Hello")
        backend.fail("delete_post", DatabaseError("permission denied"))
        page = PostDetailPage(store, backend, {"id": post.id})
        asyncio.run(page.load())
        assert asyncio.run(page.delete()) is False
        assert page.error == "Failed to delete post"


class TestEditPostForm:
    def test_requires_sign_in(self, backend):
        post = backend.add_post("Hello")
        form = EditPostForm(Store(), backend, {"id": post.id})
        asyncio.run(form.load())
        assert form.post is None
        assert form.error == "You must be signed in to edit posts"

    def test_requires_ownership(self, store, backend):
        post = backend.add_post("Hello", user_id=OTHER.id)
        form = EditPostForm(store, backend, {"id": post.id})
        asyncio.run(form.load())
        assert form.post is None
        assert form.error == "You do not have permission to edit this post"

    def test_loads_fields(self, store, backend):
        post = backend.add_post("Hello", "World")
        form = EditPostForm(store, backend, {"id": post.id})
        asyncio.run(form.load())
        assert (form.title, form.content) == ("Hello", "World")
        assert form.loading is False

    def test_submit_trims_and_updates(self, store, backend):
        post = backend.add_post("Hello", "World")
        form = EditPostForm(store, backend, {"id": post.id})
        asyncio.run(form.load())

        updated = asyncio.run(form.submit("  New  ", " Body "))

        assert updated.title == "New"
        assert updated.content == "Body"
        assert store.state.posts.current_post == updated
        assert form.updating is False

    def test_submit_requires_fields(self, store, backend):
        post = backend.add_post("Hello", "World")
        form = EditPostForm(store, backend, {"id": post.id})
        asyncio.run(form.load())
        assert asyncio.run(form.submit("New", "")) is None
        assert form.error == "Title and content are required"

    def test_missing_id(self, store, backend):
        form = EditPostForm(store, backend, {})
        asyncio.run(form.load())
        assert form.error == "Post ID is required"


class TestAuthForm:
    def test_sign_up_then_sign_in(self, backend):
        store = Store()
        assert asyncio.run(AuthForm(store, backend, "signup").submit("n@example.com", "pw"))
        assert asyncio.run(AuthForm(store, backend, "signin").submit("n@example.com", "pw"))
        assert store.state.auth.user.email == "n@example.com"

    def test_requires_fields(self, backend):
        store = Store()
        form = AuthForm(store, backend)
        assert asyncio.run(form.submit("", "pw")) is False
        assert form.error == "Email and password are required"
        assert store.state.auth.error is None

    def test_rejected_credentials(self, backend):
        form = AuthForm(Store(), backend)
        assert asyncio.run(form.submit("nobody@example.com", "pw")) is False
        assert form.error == "Invalid login credentials"

    def test_unknown_mode(self, backend):
        with pytest.raises(ValueError):
            AuthForm(Store(), backend, "reset")


class TestNavbar:
    def test_render(self, store, backend):
        navbar = Navbar(store, backend)
        assert "owner@example.com" in navbar.render()
        assert "[Sign In]" in Navbar(Store(), backend).render()

    def test_sign_out_failure_keeps_user(self, store, backend):
        backend.fail("sign_out", AuthServiceError("Session expired"))
        navbar = Navbar(store, backend)
        assert asyncio.run(navbar.sign_out()) is False
        assert store.state.auth.user == OWNER
