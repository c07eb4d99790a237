"""Actions accepted by the store.

Every async operation has one action per lifecycle step: Requested,
Succeeded and Failed.
"""

from dataclasses import dataclass
from enum import Enum

from supablog.models import Post, User


class MutationPolicy(str, Enum):
    """How the post list follows a successful create."""

    OPTIMISTIC_PREPEND = "optimistic_prepend"
    REFETCH = "refetch"


@dataclass(frozen=True)
class Action:
    pass


# === Posts ===

@dataclass(frozen=True)
class FetchPostsRequested(Action):
    page: int
    per_page: int


@dataclass(frozen=True)
class FetchPostsSucceeded(Action):
    posts: tuple[Post, ...]
    count: int


@dataclass(frozen=True)
class FetchPostsFailed(Action):
    message: str


@dataclass(frozen=True)
class CreatePostRequested(Action):
    title: str
    content: str


@dataclass(frozen=True)
class CreatePostSucceeded(Action):
    post: Post
    policy: MutationPolicy = MutationPolicy.OPTIMISTIC_PREPEND


@dataclass(frozen=True)
class CreatePostFailed(Action):
    message: str


@dataclass(frozen=True)
class UpdatePostRequested(Action):
    id: str
    title: str
    content: str


@dataclass(frozen=True)
class UpdatePostSucceeded(Action):
    post: Post


@dataclass(frozen=True)
class UpdatePostFailed(Action):
    message: str


@dataclass(frozen=True)
class DeletePostRequested(Action):
    id: str


@dataclass(frozen=True)
class DeletePostSucceeded(Action):
    id: str
    deleted: int = 1  # rows confirmed by the backend


@dataclass(frozen=True)
class DeletePostFailed(Action):
    message: str


@dataclass(frozen=True)
class SetPage(Action):
    page: int


@dataclass(frozen=True)
class SetCurrentPost(Action):
    post: Post | None


@dataclass(frozen=True)
class ClearPostsError(Action):
    pass


# === Auth ===

@dataclass(frozen=True)
class SignUpRequested(Action):
    email: str


@dataclass(frozen=True)
class SignUpSucceeded(Action):
    user: User | None


@dataclass(frozen=True)
class SignUpFailed(Action):
    message: str


@dataclass(frozen=True)
class SignInRequested(Action):
    email: str


@dataclass(frozen=True)
class SignInSucceeded(Action):
    user: User


@dataclass(frozen=True)
class SignInFailed(Action):
    message: str


@dataclass(frozen=True)
class SignOutRequested(Action):
    pass


@dataclass(frozen=True)
class SignOutSucceeded(Action):
    pass


@dataclass(frozen=True)
class SignOutFailed(Action):
    message: str


@dataclass(frozen=True)
class SetUser(Action):
    user: User | None


@dataclass(frozen=True)
class ClearAuthError(Action):
    pass
