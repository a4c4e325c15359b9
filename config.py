"""Global configuration values."""

import os
from pathlib import Path

# Default Gemini model (can be overridden via env)
DEFAULT_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

# Which provider answers recommendation requests: "gemini" or "openai"
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "gemini").strip().lower()

# Model used when LLM_PROVIDER=openai
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")

# Local data directory (favorites live here)
DATA_DIR = Path(os.environ.get("DATA_DIR", "./data"))

# Storage key for the favorites list
FAVORITES_KEY = "giftgenie_favorites"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
