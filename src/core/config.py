"""
Configuration constants and environment setup.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# GITHUB CREDENTIALS (from environment)
# =============================================================================

GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN", "")
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")
GITHUB_TIMEOUT_SECONDS = float(os.environ.get("GITHUB_TIMEOUT_SECONDS", "30"))

# =============================================================================
# PROJECT CONFIGURATION
# =============================================================================

GITHUB_ORG = os.environ.get("GITHUB_ORG", "")
GITHUB_REPO_OWNER = os.environ.get("GITHUB_REPO_OWNER", "") or GITHUB_ORG
GITHUB_REPO = os.environ.get("GITHUB_REPO", "")
GITHUB_PROJECT_NUMBER = int(os.environ.get("GITHUB_PROJECT_NUMBER", "1"))

# Only project items carrying this label are shown (empty = no label filter)
GITHUB_REQUIRED_LABEL = os.environ.get("GITHUB_REQUIRED_LABEL", "")

# Lower bound on issue creation date when the client does not send one
DEFAULT_SINCE = os.environ.get("DEFAULT_SINCE", "")

# Optional overrides; discovered by field name when empty
PROJECT_START_FIELD_ID = os.environ.get("PROJECT_START_FIELD_ID", "")
PROJECT_END_FIELD_ID = os.environ.get("PROJECT_END_FIELD_ID", "")

# Wait before writing custom fields on a freshly created issue
FIELD_SYNC_DELAY_SECONDS = float(os.environ.get("FIELD_SYNC_DELAY_SECONDS", "2.0"))

# =============================================================================
# CALENDAR DISPLAY
# =============================================================================

UNASSIGNED = "unassigned"
STATUS_FIELD_KEYWORDS = ("status", "state", "progress")
DEFAULT_OPTION_COLOR = "#6b7280"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
API_VERSION = "1.0.0"
