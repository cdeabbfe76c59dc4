"""
Domain-Specific Exceptions for the Table Replicator

This module consolidates all exceptions that extend the base ReplicatorError.

Organized by category:
1. Storage Client Errors (mapped from botocore ClientError)
2. Replication Errors (one per failing storage operation)
3. Recoverable Conditions
"""

from typing import Any, Dict, List, Optional

from .base import ReplicatorError


# =============================================================================
# Storage Client Errors
# =============================================================================

class ValidationError(ReplicatorError):
    """Raised when a request or an item is invalid.

    Used for:
    - ValidationException from DynamoDB
    - Items missing a key attribute required for a delete
    - Invalid replication requests (empty table names, bad region)
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        super().__init__(message, original_error, {'validation_errors': self.errors or None})


class TableNotFoundError(ReplicatorError):
    """Raised when the source or destination table does not exist."""

    def __init__(self, table_name: str, original_error: Optional[Exception] = None):
        super().__init__(f"Table '{table_name}' not found", original_error, table_name=table_name)


class ConnectionError(ReplicatorError):
    """Raised when the storage client cannot reach or authenticate with DynamoDB.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Invalid endpoint configurations
    - Unrecognized service errors
    """


class RetryableError(ReplicatorError):
    """Raised when throttling or a transient service error outlasted the client's retries."""

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None, original_error: Optional[Exception] = None):
        """Initialize retryable error.

        Args:
            message: Human-readable error message
            retry_after_seconds: Suggested retry delay in seconds
            original_error: The original exception that caused this error
        """
        self.retry_after_seconds = retry_after_seconds
        super().__init__(message, original_error, {'retry_after_seconds': retry_after_seconds or None})


# =============================================================================
# Replication Errors
# =============================================================================

class ScanFailed(ReplicatorError):
    """Raised when a Scan call fails. Aborts pagination of the current phase."""

    def __init__(self, table_name: str, message: str, page_number: Optional[int] = None, original_error: Optional[Exception] = None):
        """Initialize scan failure.

        Args:
            table_name: Table being scanned
            message: Human-readable error message
            page_number: 1-based number of the page that failed
            original_error: The original exception that caused this error
        """
        self.page_number = page_number
        super().__init__(message, original_error, {'page_number': page_number}, table_name=table_name)


class DescribeKeySchemaFailed(ReplicatorError):
    """Raised when the destination key schema cannot be read.

    Always raised before any destructive action takes place.
    """

    def __init__(self, table_name: str, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error, table_name=table_name)


class BatchWriteCallFailed(ReplicatorError):
    """Raised when a BatchWriteItem call itself errors (not merely partial)."""

    def __init__(self, table_name: str, message: str, chunk_size: Optional[int] = None, original_error: Optional[Exception] = None):
        self.chunk_size = chunk_size
        super().__init__(message, original_error, {'chunk_size': chunk_size}, table_name=table_name)


# =============================================================================
# Recoverable Conditions
# =============================================================================

class PartialWriteUnprocessed(ReplicatorError):
    """Some operations in a chunk were still unprocessed after retries.

    Logged as a warning and counted by default; only raised when the run is
    configured with fail_on_unprocessed.
    """

    def __init__(self, table_name: str, unprocessed_requests: List[Dict[str, Any]], attempts: int):
        """Initialize partial write condition.

        Args:
            table_name: Destination table
            unprocessed_requests: Raw PutRequest/DeleteRequest entries left over
            attempts: Number of BatchWriteItem calls made for the chunk
        """
        self.unprocessed_requests = unprocessed_requests
        self.unprocessed_count = len(unprocessed_requests)
        self.attempts = attempts
        message = f"{self.unprocessed_count} operations unprocessed after {attempts} attempts"
        super().__init__(message, None, {'unprocessed_count': self.unprocessed_count}, table_name=table_name)
