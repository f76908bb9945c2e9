"""
Character Builder Configuration

Settings come from the environment (optionally a .env file next to the
backend) so the same build runs as a local sidecar or a hosted API.
"""
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BACKEND_DIR = Path(__file__).parent.parent

# Catalogue datasets (ancestries, paths, talents, gear, surges, skills)
CHARACTER_DATA_DIR = Path(os.getenv("CHARACTER_DATA_DIR", str(BACKEND_DIR / "gamedata" / "data")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILTER = os.getenv("LOG_FILTER", "")

API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))


def get_cors_origins() -> List[str]:
    """Comma-separated CORS_ORIGINS, defaulting to the local dev frontend"""
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
