"""Console output infrastructure."""
from .ui import console, print_header, print_success

__all__ = ["console", "print_header", "print_success"]
