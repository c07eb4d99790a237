"""Application settings: backend table, paging and display constants."""

import os

from dotenv import load_dotenv

load_dotenv()

# Backend
POSTS_TABLE = "posts"
SUPABASE_URL_ENV = "SUPABASE_URL"
SUPABASE_KEY_ENV = "SUPABASE_KEY"

# Paging
POSTS_PER_PAGE = 10

# Display
PREVIEW_LENGTH = 200  # characters of content shown in the post list
DATE_FORMAT = "%b %d, %Y"  # e.g. "Jan 15, 2025"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
