from .config import ReplicatorConfig
from .exceptions import (
    BatchWriteCallFailed,
    ConnectionError,
    DescribeKeySchemaFailed,
    PartialWriteUnprocessed,
    ReplicatorError,
    RetryableError,
    ScanFailed,
    TableNotFoundError,
    ValidationError,
)
from .models import (
    # Enums
    ErrorKind,
    Phase,
    RunStatus,
    WriteKind,
    # Data model
    KeySchema,
    Page,
    TableRef,
    WriteOperation,
    PhaseStats,
    RunState,
    ReplicationRequest,
    ReplicationResult,
)
from .core import (
    TableGateway,
    create_table_gateway,
)
from .replication import (
    ChunkedBatchWriter,
    ReplicationOrchestrator,
    ScanPaginator,
    project_key,
    replicate,
)
from .utils import (
    CallbackProgress,
    NullProgress,
    ProgressReporter,
    ProgressSink,
    configure_logging,
    create_progress,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "ReplicatorConfig",

    # Exceptions
    "BatchWriteCallFailed",
    "ConnectionError",
    "DescribeKeySchemaFailed",
    "PartialWriteUnprocessed",
    "ReplicatorError",
    "RetryableError",
    "ScanFailed",
    "TableNotFoundError",
    "ValidationError",

    # Enums
    "ErrorKind",
    "Phase",
    "RunStatus",
    "WriteKind",

    # Data model
    "KeySchema",
    "Page",
    "TableRef",
    "WriteOperation",
    "PhaseStats",
    "RunState",
    "ReplicationRequest",
    "ReplicationResult",

    # Storage client
    "TableGateway",
    "create_table_gateway",

    # Replication engine
    "ChunkedBatchWriter",
    "ReplicationOrchestrator",
    "ScanPaginator",
    "project_key",
    "replicate",

    # Progress sinks
    "CallbackProgress",
    "NullProgress",
    "ProgressReporter",
    "ProgressSink",

    # Ambient helpers
    "configure_logging",
    "create_progress",
]
