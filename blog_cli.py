"""Read and manage blog posts stored in Supabase from the command line."""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

from supablog.backend import BlogBackend, SupabaseBackend
from supablog.config import POSTS_PER_PAGE
from supablog.errors import BackendError, RequestRejected
from supablog.logger import setup_logger
from supablog.pages import (
    AuthForm,
    CreatePostForm,
    EditPostForm,
    HomePage,
    Navbar,
    PostDetailPage,
)
from supablog.store import AppState, MutationPolicy, PostsState, Store, bind_auth_session

load_dotenv()

logger = setup_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Supabase blog client")
    parser.add_argument(
        "--email",
        default=os.environ.get("BLOG_EMAIL"),
        help="Sign in with this email before running the command (or BLOG_EMAIL env var)",
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("BLOG_PASSWORD"),
        help="Password for --email (or BLOG_PASSWORD env var)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List posts, newest first")
    list_cmd.add_argument("-p", "--page", type=int, default=1, help="Page number (default: 1)")
    list_cmd.add_argument(
        "-n", "--per-page",
        type=int,
        default=None,
        help="Posts per page (default: 10)",
    )

    show_cmd = commands.add_parser("show", help="Show one post")
    show_cmd.add_argument("id")

    create_cmd = commands.add_parser("create", help="Create a post")
    create_cmd.add_argument("-t", "--title", required=True)
    create_cmd.add_argument("-c", "--content", required=True)
    create_cmd.add_argument(
        "--refetch",
        action="store_true",
        help="Reload the current page after creating instead of prepending locally",
    )

    edit_cmd = commands.add_parser("edit", help="Edit one of your posts")
    edit_cmd.add_argument("id")
    edit_cmd.add_argument("-t", "--title", help="New title (default: keep)")
    edit_cmd.add_argument("-c", "--content", help="New content (default: keep)")

    delete_cmd = commands.add_parser("delete", help="Delete one of your posts")
    delete_cmd.add_argument("id")

    commands.add_parser("signup", help="Create an account with --email/--password")
    commands.add_parser("signin", help="Check that --email/--password can sign in")
    commands.add_parser("signout", help="Sign in, then sign out again")
    return parser


async def run_command(args: argparse.Namespace, store: Store, backend: BlogBackend) -> int:
    """Run one subcommand against an already-connected backend.

    Returns:
        Process exit code
    """
    if args.command == "signup":
        form = AuthForm(store, backend, mode="signup")
        if not await form.submit(args.email or "", args.password or ""):
            logger.error(form.error)
            return 1
        logger.info("Account created. Check your inbox if confirmation is required.")
        return 0

    if args.email and args.password:
        form = AuthForm(store, backend, mode="signin")
        if not await form.submit(args.email, args.password):
            logger.error(form.error)
            return 1
    elif args.command in ("create", "edit", "delete", "signin", "signout"):
        logger.error(f"'{args.command}' requires --email and --password")
        return 1

    navbar = Navbar(store, backend)
    print(navbar.render())

    if args.command == "signin":
        return 0

    if args.command == "signout":
        return 0 if await navbar.sign_out() else 1

    if args.command == "list":
        home = HomePage(store, backend)
        await home.change_page(args.page)
        print(home.render())
        return 1 if store.state.posts.error else 0

    if args.command == "show":
        page = PostDetailPage(store, backend, {"id": args.id})
        await page.load()
        print(page.render())
        return 1 if page.error else 0

    if args.command == "create":
        policy = MutationPolicy.REFETCH if args.refetch else MutationPolicy.OPTIMISTIC_PREPEND
        form = CreatePostForm(store, backend, policy)
        post = await form.submit(args.title, args.content)
        if post is None:
            logger.error(form.error)
            return 1
        logger.info(f"Post created successfully: {post.id}")
        return 0

    if args.command == "edit":
        form = EditPostForm(store, backend, {"id": args.id})
        await form.load()
        if form.post is None:
            logger.error(form.error)
            return 1
        post = await form.submit(args.title or form.title, args.content or form.content)
        if post is None:
            logger.error(form.error)
            return 1
        logger.info(f"Post updated successfully: {post.id}")
        return 0

    if args.command == "delete":
        page = PostDetailPage(store, backend, {"id": args.id})
        await page.load()
        if not page.can_manage():
            logger.error(page.error or "You do not have permission to delete this post")
            return 1
        if not await page.delete():
            logger.error(page.error)
            return 1
        logger.info("Post deleted successfully")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def run(args: argparse.Namespace) -> int:
    try:
        backend = await SupabaseBackend.create()
    except ValueError as e:
        logger.error(f"Backend setup failed: {e}")
        return 1

    per_page = getattr(args, "per_page", None) or POSTS_PER_PAGE
    store = Store(AppState(posts=PostsState(posts_per_page=per_page)))
    try:
        subscription = await bind_auth_session(store, backend)
    except BackendError as e:
        logger.error(f"Failed to load session: {e}")
        return 1

    with subscription:
        try:
            return await run_command(args, store, backend)
        except RequestRejected as e:
            logger.error(f"{e.action} failed: {e.message}")
            return 1


def main():
    """Run the blog client."""
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
