"""artifactindex - search-index metadata extraction for Maven-layout repositories."""

__version__ = "0.3.0"
