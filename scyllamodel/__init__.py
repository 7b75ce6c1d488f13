"""CQL query generation and schema migration statements for ScyllaDB models."""

__version__ = "0.1.0"

__all__ = ["fields", "queries", "finders", "mutations", "migrate"]