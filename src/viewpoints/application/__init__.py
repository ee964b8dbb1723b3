"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: write operations (RecordResponseCommand, CreateStatementCommand, etc.)
- queries/: read operations (ListPollResponsesQuery, ListPublicPollsQuery, etc.)
- services/: the voting session controller and its per-voter registry
- interfaces/: Port interfaces for infrastructure adapters
"""
