from .replication import (
    # Enums
    ErrorKind,
    Phase,
    RunStatus,
    WriteKind,
    # Core types
    Item,
    KeySchema,
    Page,
    TableRef,
    WriteOperation,
    # Accounting
    ChunkResult,
    PhaseStats,
    RunState,
    # Job input/output
    ReplicationErrorInfo,
    ReplicationRequest,
    ReplicationResult,
)

__all__ = [
    # Enums
    "ErrorKind",
    "Phase",
    "RunStatus",
    "WriteKind",

    # Core types
    "Item",
    "KeySchema",
    "Page",
    "TableRef",
    "WriteOperation",

    # Accounting
    "ChunkResult",
    "PhaseStats",
    "RunState",

    # Job input/output
    "ReplicationErrorInfo",
    "ReplicationRequest",
    "ReplicationResult",
]
