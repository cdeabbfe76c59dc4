import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

# DynamoDB BatchWriteItem accepts at most 25 requests per call
MAX_BATCH_SIZE = 25


class ReplicatorConfig(BaseModel):
    """Configuration for the DynamoDB connection and the replication run."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    aws_session_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SESSION_TOKEN"),
        description="AWS session token for temporary credentials"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1")),
        description="AWS region name"
    )

    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Client retry policy, applied by botocore to every call
    max_retries: int = Field(
        default=13,
        description="Maximum retry attempts the storage client makes per call"
    )

    retry_base_delay_ms: int = Field(
        default=200,
        description="Base delay in milliseconds for exponential backoff"
    )

    retry_mode: str = Field(
        default="standard",
        description="botocore retry mode (legacy, standard, adaptive)"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=10,
        description="Maximum number of connections in the connection pool"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Replication settings
    batch_size: int = Field(
        default=MAX_BATCH_SIZE,
        description="Write operations per BatchWriteItem call"
    )

    page_size: Optional[int] = Field(
        default=None,
        description="Optional scan Limit; the 1MB page cap always applies"
    )

    unprocessed_retries: int = Field(
        default=8,
        description="Resubmissions of UnprocessedItems before giving up on them"
    )

    fail_on_unprocessed: bool = Field(
        default=False,
        description="Abort the run when items remain unprocessed after retries"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("REPLICATOR_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for replication operations"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('retry_mode')
    @classmethod
    def validate_retry_mode(cls, v):
        """Validate botocore retry mode."""
        valid_modes = ['legacy', 'standard', 'adaptive']
        if v not in valid_modes:
            raise ValueError(f"Retry mode must be one of: {valid_modes}")
        return v

    @field_validator('batch_size')
    @classmethod
    def validate_batch_size(cls, v):
        """Validate batch size against the BatchWriteItem limit."""
        if not 1 <= v <= MAX_BATCH_SIZE:
            raise ValueError(f"Batch size must be between 1 and {MAX_BATCH_SIZE}")
        return v

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v):
        if v is not None and v < 1:
            raise ValueError("Page size must be a positive integer")
        return v

    @field_validator('max_retries', 'unprocessed_retries', 'retry_base_delay_ms')
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Retry settings must not be negative")
        return v

    @property
    def retry_base_delay(self) -> float:
        """Base backoff delay in seconds."""
        return self.retry_base_delay_ms / 1000.0

    @classmethod
    def from_env(cls) -> 'ReplicatorConfig':
        """Create configuration from environment variables.

        Returns:
            ReplicatorConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls, endpoint_url: str = "http://localhost:8000") -> 'ReplicatorConfig':
        """Create configuration for DynamoDB Local or LocalStack.

        Args:
            endpoint_url: Local DynamoDB endpoint

        Returns:
            ReplicatorConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url=endpoint_url,
            max_retries=3,
            enable_debug_logging=True
        )

    @classmethod
    def with_region(cls, region_name: str, **kwargs) -> 'ReplicatorConfig':
        """Create configuration bound to a specific region.

        Args:
            region_name: AWS region (e.g., 'ap-southeast-2')
            **kwargs: Additional configuration parameters

        Returns:
            ReplicatorConfig instance
        """
        return cls(region_name=region_name, **kwargs)

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True
    )
