"""Todo API: user sessions and owner-scoped todo lists."""

__version__ = "1.0.0"
