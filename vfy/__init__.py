"""vfy: scan source trees for exposed secrets and insecure defaults."""

__version__ = "0.1.0"
