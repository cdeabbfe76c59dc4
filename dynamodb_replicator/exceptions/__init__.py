# Base exception class
from .base import ReplicatorError

# Storage client exceptions
from .domain_exceptions import (
    ValidationError,
    TableNotFoundError,
    ConnectionError,
    RetryableError,
)

# Replication taxonomy
from .domain_exceptions import (
    ScanFailed,
    DescribeKeySchemaFailed,
    BatchWriteCallFailed,
    PartialWriteUnprocessed,
)

__all__ = [
    # Base exception
    "ReplicatorError",

    # Storage client exceptions (alphabetically ordered)
    "ConnectionError",
    "RetryableError",
    "TableNotFoundError",
    "ValidationError",

    # Replication taxonomy
    "BatchWriteCallFailed",
    "DescribeKeySchemaFailed",
    "PartialWriteUnprocessed",
    "ScanFailed",
]
