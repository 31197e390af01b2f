"""Centralized constants for the artifactindex utils package.

Single source of truth for the working directory layout used by the CLI.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Working directory for catalogs, exports and logs
STATE_DIR = Path("./.artifactindex")

# Log files
ERROR_LOG_FILE = STATE_DIR / "error.log"

# Default artifacts
CATALOG_FILE = STATE_DIR / "catalog.db"
EXPORT_FILE = STATE_DIR / "documents.ndjson"
CONFIG_FILE_NAME = "config.json"
