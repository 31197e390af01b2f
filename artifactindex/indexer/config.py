"""Indexer configuration - constants only.

Values that operators tune per deployment are read from the environment
once at import time; everything else is a fixed property of the Maven
repository layout and the search-index document format.
"""

import os

# =============================================================================
# EXPORT CONFIGURATION
# =============================================================================


def _get_page_size(env_var: str, default: int, max_value: int) -> int:
    """Get catalog page size from environment or use default."""
    try:
        value = int(os.environ.get(env_var, default))
    except (ValueError, TypeError):
        return default
    if value <= 0:
        return default
    return min(value, max_value)


MAX_PAGE_SIZE = 10000

# Artifacts fetched from the catalog per page during an export
DEFAULT_PAGE_SIZE = _get_page_size("ARTIFACTINDEX_PAGE_SIZE", 1000, MAX_PAGE_SIZE)

# Stable unique key used to order catalog pages
PAGE_ORDER_KEY = "uuid"


# =============================================================================
# INDEXABILITY
# =============================================================================

# Repository bookkeeping files that never become index documents
NON_INDEXABLE_FILE_NAMES: frozenset[str] = frozenset({
    "maven-metadata.xml",
})

NON_INDEXABLE_SUFFIXES: tuple[str, ...] = (
    ".properties",
    ".asc",
    ".md5",
    ".sha1",
)


# =============================================================================
# MAVEN LAYOUT
# =============================================================================

SOURCES_CLASSIFIER = "sources"
JAVADOC_CLASSIFIER = "javadoc"
SIGNATURE_EXTENSION = "sha1"

DEFAULT_PACKAGING = "jar"
MAVEN_PLUGIN_PACKAGING = "maven-plugin"

# Archive extensions scanned for class names, mapped to the entry prefix
# stripped from each class file name (None = no prefix)
CLASS_SCAN_PREFIXES: dict[str, str | None] = {
    "jar": None,
    "war": "WEB-INF/classes/",
}

CLASS_FILE_SUFFIX = ".class"
INNER_CLASS_SEPARATOR = "$"

# Embedded descriptor locations
EMBEDDED_POM_NAME = "pom.xml"
EMBEDDED_POM_DIR = "/META-INF"
PLUGIN_DESCRIPTOR_PATH = "/META-INF/maven/plugin.xml"


# =============================================================================
# DOCUMENT FORMAT
# =============================================================================

# Placeholder for missing values in composite fields
NOT_AVAILABLE = "NA"

# Separator inside the unique key field
UINFO_SEPARATOR = "|"

# Separator of the legacy info line
INFO_SEPARATOR = "\n"
