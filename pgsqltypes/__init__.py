"""PostgreSQL value types (arrays, hstore, JSON, decimals, bytes, bytea, timestamps, geometry) and their text encodings."""

__version__ = "0.1.0"