"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from viewpoints.application.commands.create_statement import (
    CreateStatementCommand,
    CreateStatementHandler,
)
from viewpoints.application.commands.delete_statement import (
    DeleteStatementCommand,
    DeleteStatementHandler,
    DeleteStatementResult,
)
from viewpoints.application.commands.record_response import (
    RecordResponseCommand,
    RecordResponseHandler,
)

__all__ = [
    # Responses
    "RecordResponseCommand",
    "RecordResponseHandler",
    # Statements
    "CreateStatementCommand",
    "CreateStatementHandler",
    "DeleteStatementCommand",
    "DeleteStatementHandler",
    "DeleteStatementResult",
]
