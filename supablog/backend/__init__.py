"""Backends for blog posts and user sessions."""

from .base import AuthListener, BlogBackend
from .supabase import SupabaseBackend

__all__ = ["AuthListener", "BlogBackend", "SupabaseBackend"]
