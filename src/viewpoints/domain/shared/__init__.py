"""
Shared Domain Kernel

Contains exceptions, constrained types and events shared across all bounded contexts.
"""

from viewpoints.domain.shared.exceptions import (
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    MissingVoterIdentityError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "PermissionDeniedError",
    "MissingVoterIdentityError",
    "InvalidOperationError",
]
