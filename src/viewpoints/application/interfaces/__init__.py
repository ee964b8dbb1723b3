"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from viewpoints.application.interfaces.identity_resolver import IdentityResolver
from viewpoints.application.interfaces.reaction_sink import ReactionSink

__all__ = [
    "IdentityResolver",
    "ReactionSink",
]
