"""PostgreSQL binary wire-format codecs, result sets, errors, password-file lookup and SQLSTATE code generation."""

__version__ = "0.1.0"