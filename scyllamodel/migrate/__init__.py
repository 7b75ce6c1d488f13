"""Schema differences between code and database, and the CQL that applies them."""

__all__ = ["data", "runner"]