"""
Replication Data Model

Items travel through the replicator in DynamoDB's low-level AttributeValue
form, e.g. ``{"pk": {"S": "user#1"}, "n": {"N": "42"}}``. Values are never
deserialized: a put re-sends the scanned item byte-for-byte and a delete
sends the key attributes with their type tags intact.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

Item = Dict[str, Dict[str, Any]]


class WriteKind(str, Enum):
    """Kind of request inside a BatchWriteItem call."""
    PUT = "put"
    DELETE = "delete"


class Phase(str, Enum):
    """Phase of a replication job."""
    WIPE = "wipe"
    COPY = "copy"


class RunStatus(str, Enum):
    """Terminal state of a replication job."""
    DONE = "done"
    FAILED = "failed"
    ABORTED_BEFORE_COPY = "aborted_before_copy"


class ErrorKind(str, Enum):
    """Kind of error that ended a replication job."""
    SCAN_FAILED = "scan_failed"
    DESCRIBE_KEY_SCHEMA_FAILED = "describe_key_schema_failed"
    BATCH_WRITE_CALL_FAILED = "batch_write_call_failed"
    PARTIAL_WRITE_UNPROCESSED = "partial_write_unprocessed"
    INVALID_ITEM = "invalid_item"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


class TableRef(BaseModel):
    """Region plus table name."""
    region: str
    table_name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.region}/{self.table_name}"


class KeySchema(BaseModel):
    """Ordered primary key attributes of a table: partition key, then optional sort key."""
    table_name: str
    attribute_names: Tuple[str, ...] = Field(..., min_length=1, max_length=2)

    model_config = ConfigDict(frozen=True)


class Page(BaseModel):
    """One Scan response: items plus the continuation token (absent on the final page)."""
    items: List[Item] = Field(default_factory=list)
    last_evaluated_key: Optional[Item] = None
    page_number: int = Field(..., ge=1)

    @property
    def is_last(self) -> bool:
        return self.last_evaluated_key is None

    def __len__(self) -> int:
        return len(self.items)


class WriteOperation(BaseModel):
    """A single put or delete destined for one table."""
    kind: WriteKind
    payload: Item

    model_config = ConfigDict(frozen=True)

    def to_request(self) -> Dict[str, Any]:
        """Render as a BatchWriteItem request entry."""
        if self.kind == WriteKind.PUT:
            return {'PutRequest': {'Item': self.payload}}
        return {'DeleteRequest': {'Key': self.payload}}


class ChunkResult(BaseModel):
    """Outcome of submitting one write chunk."""
    submitted: int = Field(..., ge=0)
    unprocessed: int = Field(default=0, ge=0)
    attempts: int = Field(default=1, ge=1)

    @property
    def confirmed(self) -> int:
        return self.submitted - self.unprocessed


class PhaseStats(BaseModel):
    """Counters for one phase (wipe or copy) of a job."""
    phase: Phase
    table_name: str
    pages: int = 0
    items_seen: int = 0
    submitted: int = 0
    unprocessed: int = 0

    @classmethod
    def from_state(cls, phase: Phase, table_name: str, state: 'RunState') -> 'PhaseStats':
        return cls(
            phase=phase,
            table_name=table_name,
            pages=state.page_index,
            items_seen=state.items_seen,
            submitted=state.submitted,
            unprocessed=state.unprocessed
        )


class RunState(BaseModel):
    """Per-job counters. Only ever incremented."""
    items_seen: int = 0
    submitted: int = 0
    unprocessed: int = 0
    page_index: int = 0
    has_error: bool = False

    def record_page(self, page: Page) -> None:
        self.page_index += 1
        self.items_seen += len(page.items)

    def record_chunk(self, result: ChunkResult) -> None:
        self.submitted += result.submitted
        self.unprocessed += result.unprocessed

    def mark_error(self) -> None:
        self.has_error = True


class ReplicationRequest(BaseModel):
    """Validated input of one replication job."""
    region: str
    source_table: str
    destination_table: str
    wipe_first: bool = False

    @field_validator('region', 'source_table', 'destination_table')
    @classmethod
    def validate_not_blank(cls, v, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip()

    @property
    def source(self) -> TableRef:
        return TableRef(region=self.region, table_name=self.source_table)

    @property
    def destination(self) -> TableRef:
        return TableRef(region=self.region, table_name=self.destination_table)


class ReplicationErrorInfo(BaseModel):
    """The error that ended a job."""
    kind: ErrorKind
    message: str
    phase: Optional[Phase] = None


class ReplicationResult(BaseModel):
    """Structured outcome of a replication job.

    Exit codes:
        0: completed
        1: copy failed (partial writes left in place)
        2: wipe failed, copy skipped
        3: invalid request or configuration
    """
    status: RunStatus
    wipe: Optional[PhaseStats] = None
    copy_stats: Optional[PhaseStats] = None
    error: Optional[ReplicationErrorInfo] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.DONE

    @property
    def exit_code(self) -> int:
        if self.status == RunStatus.DONE:
            return 0
        if self.error is not None and self.error.kind == ErrorKind.INVALID_REQUEST:
            return 3
        if self.status == RunStatus.ABORTED_BEFORE_COPY:
            return 2
        return 1

    @property
    def total_unprocessed(self) -> int:
        return sum(stats.unprocessed for stats in (self.wipe, self.copy_stats) if stats is not None)
