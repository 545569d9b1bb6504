"""Configuration settings for the file service."""

import os


DATABASE_PATH = os.environ.get("SHAREBOX_DATABASE_PATH", "/app/data/metadata.db")

BLOB_ROOT = os.environ.get("SHAREBOX_BLOB_ROOT", "/app/data/blobs")

DEFAULT_CONTAINER = os.environ.get("SHAREBOX_DEFAULT_CONTAINER", "files")

SERVICE_HOST = os.environ.get("SHAREBOX_HOST", "0.0.0.0")

SERVICE_PORT = int(os.environ.get("SHAREBOX_PORT", "8000"))

PUBLIC_BASE_URL = os.environ.get("SHAREBOX_PUBLIC_BASE_URL", f"http://localhost:{SERVICE_PORT}")

URL_SIGNING_KEY = os.environ.get("SHAREBOX_URL_SIGNING_KEY", "change-me")

MAX_PAGE_SIZE = int(os.environ.get("SHAREBOX_MAX_PAGE_SIZE", "100"))

AI_CANDIDATE_LIMIT = int(os.environ.get("SHAREBOX_AI_CANDIDATE_LIMIT", "50"))

AI_POOL_SIZE = int(os.environ.get("SHAREBOX_AI_POOL_SIZE", "100"))

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "").strip()

OPENAI_API_BASE = os.environ.get("OPENAI_API_BASE", "https://api.openai.com/v1")

OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo")

RANKING_TIMEOUT_SECONDS = float(os.environ.get("RANKING_TIMEOUT_SECONDS", "15"))
