"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Voter Identity Errors
    IDENTITY_BOTH_SET = "Voter identity must not have both a user id and a session id"
    IDENTITY_NONE_SET = "Voter identity requires a user id or a session id"

    # Statement Validation Errors
    EMPTY_STATEMENT_TEXT = "Statement text cannot be empty"

    # Poll Validation Errors
    EMPTY_POLL_TITLE = "Poll title cannot be empty"

    # Voting Errors
    INVALID_VALENCE = "Valence must be one of: {choices}"
    NOT_ACTIVE_STATEMENT = "Statement {statement_id} is not the active statement"
    QUEUE_EXHAUSTED = "There are no statements left to react to"
    DUPLICATE_STATEMENT = "Statement {statement_id} is already queued"
    UNSAVED_STATEMENT = "Only stored statements (with an ID) can be queued"

    # Access Errors
    POLL_ADMIN_REQUIRED = "Only the poll owner can do this"
    PRIVATE_POLL = "This poll is private"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting viewpoints in %s mode on %s:%s"
    APP_STOPPED = "viewpoints stopped"
    APP_FATAL_ERROR = "Fatal error: %s"
    APP_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    CONTAINER_SHUTDOWN_FAILED = "Failed stopping %s: %r"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"
    DATABASE_STATS_FAILED = "Failed to collect database stats: %s"

    # Polls and Statements
    POLL_SAVED = "Saved poll %s (%s)"
    STATEMENT_CREATED = "Created statement %s in poll %s"
    STATEMENT_DELETED = "Deleted statement %s from poll %s (%s responses)"
    AUTHOR_SAVED = "Saved author %s"

    # Responses
    RESPONSE_INSERTED = "Recorded %s on statement %s by %s"
    RESPONSES_LISTED = "Listed %d responses for poll %s (all=%s)"

    # Voting Sessions
    VOTING_SESSION_STARTED = "Started voting session for %s on poll %s with %d statements"
    VOTING_SESSION_DISCARDED = "Discarded voting session for %s on poll %s"
    VOTING_REACTION_ISSUED = "Issued %s on statement %s for %s (%d left)"
    VOTING_QUEUE_EXHAUSTED = "Voting queue exhausted for %s"
    VOTING_STATEMENT_APPENDED = "Appended statement %s to voting queue for %s"
    VOTING_WRITE_FAILED = "Failed to record %s on statement %s for %s: %r"
    VOTING_RETRYING = "Retrying %d failed reaction writes for %s"
    VOTING_STATEMENT_FORGOTTEN = "Removed deleted statement %s from voting session for %s"
    VOTING_WRITE_DROPPED = "Dropped failed write for deleted statement %s for %s: %r"
    VOTING_SESSIONS_FORGOT_STATEMENT = "Removed deleted statement %s from %d voting sessions"
    VOTING_SESSION_EVICTED = "Evicted idle voting session for %s on poll %s"

    # Web
    SESSION_COOKIE_ISSUED = "Issued anonymous session %s"
    REQUEST_REJECTED = "Rejected %s %s: %s"
