"""Central configuration loader for the Homebuyer Roadmap system."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent
SCHEMAS_DIR = PROJECT_ROOT / "config" / "schemas"
TMP_DIR = PROJECT_ROOT / "tmp"

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")

# Schema file paths (remote payload shapes + cached state)
SURVEY_RESPONSES_SCHEMA = SCHEMAS_DIR / "survey_responses.schema.json"
USER_TODOS_SCHEMA = SCHEMAS_DIR / "user_todos.schema.json"
TODO_RECORD_SCHEMA = SCHEMAS_DIR / "todo_record.schema.json"
AUTH_RESPONSE_SCHEMA = SCHEMAS_DIR / "auth_response.schema.json"
CACHED_STEPS_SCHEMA = SCHEMAS_DIR / "cached_steps.schema.json"

# Local cache
CACHE_DIR = Path(os.getenv("CACHE_DIR", str(TMP_DIR / "cache")))
CACHE_FILENAME = os.getenv("CACHE_FILENAME", "local_cache.json")

# Remote store
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3001/api").rstrip("/")
REMOTE_TIMEOUT = float(os.getenv("REMOTE_TIMEOUT", "10"))
