"""Centralized constants for database schema, HTTP identity, and other shared values.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class DatabaseTables:
    """Database table names.

    Centralizing table names prevents typos in SQL queries and makes
    schema changes easier to track.
    """

    POLLS = "polls"
    STATEMENTS = "statements"
    RESPONSES = "responses"
    AUTHORS = "authors"


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These pragmas are applied to each connection to ensure consistent behavior.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
    PAGE_COUNT = "PRAGMA page_count"
    PAGE_SIZE = "PRAGMA page_size"


class IdentityDefaults:
    """Where a request's voter identity is read from unless configured otherwise."""

    SESSION_COOKIE_NAME = "session_id"
    USER_ID_HEADER = "X-User-Id"
    SESSION_COOKIE_MAX_AGE_S = 60 * 60 * 24 * 365
