"""
Replication Orchestrator

Runs one replication job as a small state machine:

    Start -> Configure -> [WipeDestination] -> CopySource -> Done
                                 |                  |
                                 v                  v
                         AbortedBeforeCopy        Failed

WipeDestination only runs when requested. If it fails, CopySource never
starts: writing into a half-wiped table would leave a destination that is
neither the old data nor a copy of the source. A failed copy leaves its
partial writes in place; puts are keyed overwrites, so re-running the job
picks up where it stopped.

Every storage call is made sequentially. There is no job-level retry and no
cancellation other than stopping the process.
"""

import logging
from typing import Callable, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import ReplicatorConfig
from ..core import TableGateway, create_table_gateway
from ..exceptions import (
    BatchWriteCallFailed,
    DescribeKeySchemaFailed,
    PartialWriteUnprocessed,
    ReplicatorError,
    ScanFailed,
    ValidationError,
)
from ..models import (
    ErrorKind,
    Item,
    Phase,
    PhaseStats,
    ReplicationErrorInfo,
    ReplicationRequest,
    ReplicationResult,
    RunState,
    RunStatus,
    WriteOperation,
)
from ..utils.progress import NullProgress, ProgressSink
from .keys import delete_operation, put_operation
from .paginator import ScanPaginator
from .writer import ChunkedBatchWriter

logger = logging.getLogger(__name__)

_ERROR_KINDS = (
    (ScanFailed, ErrorKind.SCAN_FAILED),
    (DescribeKeySchemaFailed, ErrorKind.DESCRIBE_KEY_SCHEMA_FAILED),
    (BatchWriteCallFailed, ErrorKind.BATCH_WRITE_CALL_FAILED),
    (PartialWriteUnprocessed, ErrorKind.PARTIAL_WRITE_UNPROCESSED),
    (ValidationError, ErrorKind.INVALID_ITEM),
)


def classify_error(error: Exception) -> ErrorKind:
    """Map an exception raised inside a phase to its ErrorKind."""
    for error_type, kind in _ERROR_KINDS:
        if isinstance(error, error_type):
            return kind
    return ErrorKind.UNEXPECTED


class ReplicationOrchestrator:
    """
    Composes paginator, key projection and batch writer into wipe and copy phases.

    An orchestrator owns its gateway and progress sink; run one job per
    instance at a time.
    """

    def __init__(
        self,
        config: ReplicatorConfig,
        gateway: Optional[TableGateway] = None,
        progress: Optional[ProgressSink] = None
    ):
        """Initialize orchestrator.

        Args:
            config: Replicator configuration (region, retry policy, batch settings)
            gateway: Storage client; built from config when omitted
            progress: Progress sink; nothing is drawn when omitted
        """
        self.config = config
        self.gateway = gateway or create_table_gateway(config)
        self.progress = progress or NullProgress()
        self.paginator = ScanPaginator(self.gateway, config.page_size)
        self.writer = ChunkedBatchWriter.from_config(self.gateway, config, self.progress)

    def wipe(self, table_name: str, state: Optional[RunState] = None) -> PhaseStats:
        """
        Delete every item of a table.

        The key schema is read once, before the first delete is issued.

        Raises:
            DescribeKeySchemaFailed, ScanFailed, BatchWriteCallFailed,
            PartialWriteUnprocessed, ValidationError
        """
        state = state if state is not None else RunState()
        logger.info(f"---- Start deleting from {table_name}")

        key_schema = self.gateway.describe_key_schema(table_name)
        self._transfer(
            table_name,
            table_name,
            lambda item: delete_operation(key_schema, item),
            state,
            "deleted"
        )

        logger.info(f"Total {state.submitted} records have been deleted")
        logger.info(f"---- Finished deleting from {table_name} SUCCESSFULLY")
        return PhaseStats.from_state(Phase.WIPE, table_name, state)

    def copy(self, source_table: str, destination_table: str, state: Optional[RunState] = None) -> PhaseStats:
        """
        Upsert every item of the source table into the destination table.

        Items are written exactly as scanned. Destination items whose keys are
        absent from the source are left untouched.

        Raises:
            ScanFailed, BatchWriteCallFailed, PartialWriteUnprocessed
        """
        state = state if state is not None else RunState()
        logger.info(f"---- Start upserting records in {destination_table}")

        self._transfer(source_table, destination_table, put_operation, state, "processed")

        logger.info(f"Total {state.submitted} records have been processed")
        logger.info(f"---- Finished upserting records in {destination_table} SUCCESSFULLY!")
        return PhaseStats.from_state(Phase.COPY, destination_table, state)

    def _transfer(
        self,
        scan_table: str,
        write_table: str,
        to_operation: Callable[[Item], WriteOperation],
        state: RunState,
        verb: str
    ) -> None:
        for page in self.paginator.pages(scan_table):
            state.record_page(page)
            if page.items:
                self.progress.init(len(page), f"Progress of scan batch {page.page_number}: ")

            operations: Iterable[WriteOperation] = (to_operation(item) for item in page.items)
            written = self.writer.write_all(write_table, operations, page_total=len(page), state=state)

            if written > 0:
                logger.info(f"{written} records have been {verb}")

    def run(self, request: ReplicationRequest) -> ReplicationResult:
        """
        Execute one job. Never raises; the outcome is in the returned result.

        Args:
            request: Validated job input

        Returns:
            ReplicationResult with terminal status, per-phase counts and error
        """
        source = request.source_table
        destination = request.destination_table

        if source == destination:
            logger.warning(f"Source and destination are the same table: {source}")

        wipe_stats = None
        if request.wipe_first:
            wipe_state = RunState()
            try:
                wipe_stats = self.wipe(destination, wipe_state)
            except Exception as e:
                wipe_state.mark_error()
                logger.error(f"---- Finished deleting from {destination} UNSUCCESSFULLY! Error: {e}", exc_info=True)
                logger.error(f"Copy into {destination} skipped because the wipe failed")
                return ReplicationResult(
                    status=RunStatus.ABORTED_BEFORE_COPY,
                    wipe=PhaseStats.from_state(Phase.WIPE, destination, wipe_state),
                    error=self._error_info(e, Phase.WIPE)
                )
            finally:
                self.progress.close()

        copy_state = RunState()
        try:
            copy_stats = self.copy(source, destination, copy_state)
        except Exception as e:
            copy_state.mark_error()
            logger.error(f"---- Finished upserting in {destination} UNSUCCESSFULLY! Error: {e}", exc_info=True)
            return ReplicationResult(
                status=RunStatus.FAILED,
                wipe=wipe_stats,
                copy_stats=PhaseStats.from_state(Phase.COPY, destination, copy_state),
                error=self._error_info(e, Phase.COPY)
            )
        finally:
            self.progress.close()

        result = ReplicationResult(status=RunStatus.DONE, wipe=wipe_stats, copy_stats=copy_stats)
        if result.total_unprocessed:
            logger.warning(f"{result.total_unprocessed} operations were submitted but never confirmed")
        logger.info("--------- Job is done!")
        return result

    @staticmethod
    def _error_info(error: Exception, phase: Phase) -> ReplicationErrorInfo:
        if not isinstance(error, ReplicatorError):
            message = f"{error.__class__.__name__}: {error}"
        else:
            message = str(error)
        return ReplicationErrorInfo(kind=classify_error(error), message=message, phase=phase)


def replicate(
    region: str,
    source_table: str,
    destination_table: str,
    wipe_first: bool = False,
    config: Optional[ReplicatorConfig] = None,
    gateway: Optional[TableGateway] = None,
    progress: Optional[ProgressSink] = None,
    **overrides
) -> ReplicationResult:
    """
    Replicate the contents of one DynamoDB table into another.

    Args:
        region: AWS region of both tables
        source_table: Table to read from
        destination_table: Table to write to
        wipe_first: Delete every destination item before copying; otherwise upsert
        config: Base configuration; its region is replaced by ``region``
        gateway: Storage client, mainly for tests
        progress: Progress sink
        **overrides: ReplicatorConfig fields applied on top of ``config`` or the
            environment defaults. Unknown fields and ``region_name`` are rejected.

    Returns:
        ReplicationResult. Check ``succeeded`` or ``exit_code``. Invalid input
        comes back as an INVALID_REQUEST result instead of an exception.

    Example:
        result = replicate("ap-southeast-2", "orders-restored", "orders", wipe_first=True)
        if not result.succeeded:
            print(result.error.message)
    """
    try:
        request = ReplicationRequest(
            region=region,
            source_table=source_table,
            destination_table=destination_table,
            wipe_first=wipe_first
        )
        if 'region_name' in overrides:
            raise ValueError("region_name cannot be overridden; pass the region argument")
        if config is None:
            config = ReplicatorConfig.with_region(request.region, **overrides)
        elif overrides or config.region_name != request.region:
            config = ReplicatorConfig(**{**config.model_dump(), **overrides, 'region_name': request.region})
    except (PydanticValidationError, TypeError, ValueError) as e:
        logger.error(f"Invalid replication request: {e}")
        return ReplicationResult(
            status=RunStatus.FAILED,
            error=ReplicationErrorInfo(kind=ErrorKind.INVALID_REQUEST, message=str(e))
        )

    logger.info(
        f"Replicating {request.source} -> {request.destination} "
        f"({'wipe then copy' if request.wipe_first else 'upsert'})"
    )
    return ReplicationOrchestrator(config, gateway=gateway, progress=progress).run(request)
