"""
Thin DynamoDB Table Gateway

This module provides the storage client the replicator drives: a lightweight
wrapper around the boto3 low-level DynamoDB client exposing exactly the three
calls replication needs.

- scan: one bounded page of a table plus its continuation token
- batch_write: one BatchWriteItem call, returning the unprocessed requests
- describe_key_schema: the ordered primary key attribute names of a table

The low-level client is used instead of the Table resource so that items keep
their AttributeValue type tags ({"S": ...}, {"N": ...}) from scan to write.
Connection, credentials and per-call retry/backoff belong to the botocore
client configuration built here; callers never retry a failed call.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ReplicatorConfig
from ..exceptions import (
    BatchWriteCallFailed,
    ConnectionError,
    DescribeKeySchemaFailed,
    RetryableError,
    ScanFailed,
    TableNotFoundError,
    ValidationError,
)
from ..models import Item, KeySchema

logger = logging.getLogger(__name__)


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str
) -> Exception:
    """Map DynamoDB ClientError to domain-specific exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "Scan", "BatchWriteItem")
        table_name: The DynamoDB table name

    Returns:
        Appropriate domain exception
    """
    error_code = error.response['Error']['Code']
    error_message = error.response['Error'].get('Message', '')

    full_message = f"{operation} on {table_name}: {error_message}"

    if error_code == 'ResourceNotFoundException':
        return TableNotFoundError(table_name, original_error=error)

    elif error_code == 'ValidationException':
        return ValidationError(f"Validation failed - {full_message}", original_error=error)

    elif error_code in [
        'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
        'ThrottlingException', 'TooManyRequestsException'
    ]:
        return RetryableError(f"Throttling - {full_message}", original_error=error)

    elif error_code in [
        'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
        'RequestTimeoutException'
    ]:
        return RetryableError(f"Service unavailable - {full_message}", original_error=error)

    elif error_code in ['UnrecognizedClientException', 'AccessDeniedException']:
        return ConnectionError(f"Authentication/authorization failed - {full_message}", original_error=error)

    elif error_code in ['ExpiredTokenException', 'TokenRefreshRequiredException']:
        return ConnectionError(f"Token expired - {full_message}", original_error=error)

    elif error_code in ['InvalidEndpointException', 'IncompleteSignatureException', 'InvalidSignatureException']:
        return ConnectionError(f"Invalid endpoint or signature - {full_message}", original_error=error)

    elif error_code == 'ItemCollectionSizeLimitExceededException':
        return ValidationError(f"Item collection size limit exceeded - {full_message}", original_error=error)

    # Default to ConnectionError for unknown errors
    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to ConnectionError")
    return ConnectionError(f"DynamoDB operation failed - {full_message}", original_error=error)


def _map_error(error: Exception, operation: str, table_name: str) -> Exception:
    if isinstance(error, ClientError):
        return map_dynamodb_error(error, operation, table_name)
    return ConnectionError(f"{operation} on {table_name} failed: {error}", original_error=error)


class TableGateway:
    """
    Thin gateway for the DynamoDB calls used by table replication.

    One gateway serves every table in the configured region, so a single
    instance handles both the source and the destination of a job.
    """

    def __init__(self, config: ReplicatorConfig):
        """Initialize table gateway.

        Args:
            config: Replicator configuration
        """
        self.config = config
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the low-level DynamoDB client."""
        if self._client is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    aws_session_token=self.config.aws_session_token,
                    region_name=self.config.region_name
                )

                client_kwargs = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    client_kwargs['endpoint_url'] = self.config.endpoint_url

                # Retry policy lives in the client; every call gets the same budget
                client_kwargs['config'] = Config(
                    retries={
                        'max_attempts': self.config.max_retries,
                        'mode': self.config.retry_mode
                    },
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )

                self._client = session.client('dynamodb', **client_kwargs)
                logger.debug(
                    f"Created DynamoDB client for {self.config.region_name} "
                    f"(max_attempts={self.config.max_retries}, mode={self.config.retry_mode})"
                )
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._client

    def scan(
        self,
        table_name: str,
        exclusive_start_key: Optional[Item] = None,
        limit: Optional[int] = None,
        page_number: Optional[int] = None
    ) -> Tuple[List[Item], Optional[Item]]:
        """
        Execute one DynamoDB Scan call.

        A single call returns at most 1MB of item data; the continuation token
        is returned as-is for the caller to pass back.

        Args:
            table_name: Table to scan
            exclusive_start_key: LastEvaluatedKey of the previous page
            limit: Optional Limit for the call
            page_number: Page being requested, for error context

        Returns:
            Tuple of (items, last_evaluated_key); the key is None on the final page

        Raises:
            ScanFailed: The call failed after the client's own retries
        """
        scan_kwargs: Dict[str, Any] = {'TableName': table_name}
        if exclusive_start_key is not None:
            scan_kwargs['ExclusiveStartKey'] = exclusive_start_key
        if limit is not None:
            scan_kwargs['Limit'] = limit

        try:
            response = self.client.scan(**scan_kwargs)
        except (ClientError, BotoCoreError) as e:
            mapped = _map_error(e, "Scan", table_name)
            raise ScanFailed(table_name, str(mapped), page_number, original_error=mapped) from e

        return response.get('Items', []), response.get('LastEvaluatedKey')

    def batch_write(self, table_name: str, requests: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Execute one BatchWriteItem call against a single table.

        Args:
            table_name: Destination table
            requests: PutRequest/DeleteRequest entries (at most 25)

        Returns:
            The requests DynamoDB left unprocessed (empty when all were applied)

        Raises:
            BatchWriteCallFailed: The call itself failed
        """
        try:
            response = self.client.batch_write_item(
                RequestItems={table_name: requests}
            )
        except (ClientError, BotoCoreError) as e:
            mapped = _map_error(e, "BatchWriteItem", table_name)
            raise BatchWriteCallFailed(table_name, str(mapped), len(requests), original_error=mapped) from e

        unprocessed = response.get('UnprocessedItems') or {}
        return unprocessed.get(table_name, [])

    def describe_key_schema(self, table_name: str) -> KeySchema:
        """
        Read the primary key attributes of a table.

        Returns:
            KeySchema with the partition key first, then the sort key if any

        Raises:
            DescribeKeySchemaFailed: The table could not be described
        """
        try:
            response = self.client.describe_table(TableName=table_name)
        except (ClientError, BotoCoreError) as e:
            mapped = _map_error(e, "DescribeTable", table_name)
            raise DescribeKeySchemaFailed(table_name, str(mapped), original_error=mapped) from e

        key_schema = response['Table']['KeySchema']
        # DynamoDB does not promise HASH before RANGE in the response
        ordered = sorted(key_schema, key=lambda k: 0 if k['KeyType'] == 'HASH' else 1)
        names = tuple(k['AttributeName'] for k in ordered)
        logger.debug(f"Key schema of {table_name}: {names}")
        return KeySchema(table_name=table_name, attribute_names=names)


def create_table_gateway(config: ReplicatorConfig) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: Replicator configuration

    Returns:
        Configured TableGateway instance
    """
    return TableGateway(config)
