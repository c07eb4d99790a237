"""Blog client: Supabase-backed posts and auth with request-lifecycle state."""

__version__ = "0.1.0"
