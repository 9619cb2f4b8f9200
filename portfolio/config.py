"""Configuration and constants."""

import os
from pathlib import Path

# Local store lives under the working directory; created on first write
DATA_DIR = Path(os.getenv("PORTFOLIO_DATA_DIR", "data"))

GITHUB_USERNAME = os.getenv("GITHUB_USERNAME", "BastianAsmussen")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_API = os.getenv("GITHUB_API_URL", "https://api.github.com")

SITE_NAME = os.getenv("SITE_NAME", "Bastian Asmussen")
SITE_TAGLINE = os.getenv("SITE_TAGLINE", "Software developer. Systems, backends and the occasional side project.")

# Fixed page sizes, no pagination
REPOS_PER_PAGE = 100
EVENTS_PER_PAGE = int(os.getenv("GITHUB_EVENTS_PER_PAGE", "10"))

# Cache TTLs
PROJECTS_CACHE_TTL_SECONDS = 3600  # 1 hour, process lifetime
CLIENT_CACHE_TTL_SECONDS = 300  # 5 minutes, local store

LOCAL_STORE_PATH = Path(os.getenv("PORTFOLIO_STORE", str(DATA_DIR / "local_store.json")))
