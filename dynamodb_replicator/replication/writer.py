"""
Chunked Batch Writer

Groups a lazy sequence of put/delete operations into BatchWriteItem calls of
at most 25 requests, submitted one at a time in the original order.

BatchWriteItem is not atomic: DynamoDB may hand back part of a chunk as
UnprocessedItems when the table runs out of write capacity. Only that
leftover subset is resubmitted, with exponential backoff. Whatever is still
unprocessed after the retry budget is reported as PartialWriteUnprocessed,
logged and counted, and the run goes on (unless fail_on_unprocessed is set).
The submitted count includes those operations; the unprocessed count says
how many of them were not confirmed.

An error raised by the call itself is never retried here and aborts the run.
"""

import logging
import time
from itertools import islice
from typing import Iterable, Iterator, List, Optional

from ..config import ReplicatorConfig
from ..config.config import MAX_BATCH_SIZE
from ..core import TableGateway
from ..exceptions import BatchWriteCallFailed, PartialWriteUnprocessed
from ..models import ChunkResult, RunState, WriteOperation
from ..utils.progress import NullProgress, ProgressSink

logger = logging.getLogger(__name__)


def chunked(operations: Iterable[WriteOperation], size: int) -> Iterator[List[WriteOperation]]:
    """Split operations into lists of ``size``; only the last may be shorter."""
    iterator = iter(operations)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


class ChunkedBatchWriter:
    """
    Sequential BatchWriteItem submitter for one table at a time.

    Args:
        gateway: Storage client
        batch_size: Requests per call, at most 25
        unprocessed_retries: Resubmissions of leftover UnprocessedItems per chunk
        base_delay: Backoff base in seconds, doubled on each resubmission
        fail_on_unprocessed: Raise PartialWriteUnprocessed instead of logging it
        progress: Sink receiving (cumulative, page_total) after each chunk
    """

    def __init__(
        self,
        gateway: TableGateway,
        batch_size: int = MAX_BATCH_SIZE,
        unprocessed_retries: int = 8,
        base_delay: float = 0.2,
        fail_on_unprocessed: bool = False,
        progress: Optional[ProgressSink] = None
    ):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self.gateway = gateway
        self.batch_size = batch_size
        self.unprocessed_retries = unprocessed_retries
        self.base_delay = base_delay
        self.fail_on_unprocessed = fail_on_unprocessed
        self.progress = progress or NullProgress()

    @classmethod
    def from_config(
        cls,
        gateway: TableGateway,
        config: ReplicatorConfig,
        progress: Optional[ProgressSink] = None
    ) -> 'ChunkedBatchWriter':
        return cls(
            gateway,
            batch_size=config.batch_size,
            unprocessed_retries=config.unprocessed_retries,
            base_delay=config.retry_base_delay,
            fail_on_unprocessed=config.fail_on_unprocessed,
            progress=progress
        )

    def write_all(
        self,
        table_name: str,
        operations: Iterable[WriteOperation],
        page_total: Optional[int] = None,
        state: Optional[RunState] = None
    ) -> int:
        """
        Submit every operation in chunks.

        Args:
            table_name: Destination table
            operations: Put/delete operations, consumed lazily in order
            page_total: Item count of the scan page being written, for progress
            state: Run counters to record each chunk into

        Returns:
            Number of operations submitted

        Raises:
            BatchWriteCallFailed: A BatchWriteItem call failed
            PartialWriteUnprocessed: Leftovers remained and fail_on_unprocessed is set
        """
        cumulative = 0
        for chunk in chunked(operations, self.batch_size):
            result = self.write_chunk(table_name, chunk, state)
            cumulative += result.submitted

            total = page_total if page_total is not None else cumulative
            self.progress.update(cumulative, total)
            logger.info(f"{cumulative}/{total} records processed in {table_name}")

        return cumulative

    def write_chunk(
        self,
        table_name: str,
        chunk: List[WriteOperation],
        state: Optional[RunState] = None
    ) -> ChunkResult:
        """
        Submit one chunk, resubmitting UnprocessedItems with backoff.

        The chunk is recorded into ``state`` before any error leaves this
        method once a call has been accepted, so a failed run still reports
        the writes DynamoDB applied.
        """
        if len(chunk) > MAX_BATCH_SIZE:
            raise ValueError(f"Chunk of {len(chunk)} exceeds the {MAX_BATCH_SIZE} request limit")

        pending = [operation.to_request() for operation in chunk]
        attempts = 0

        try:
            while pending:
                pending = self.gateway.batch_write(table_name, pending)
                attempts += 1

                if not pending or attempts > self.unprocessed_retries:
                    break

                # Exponential backoff with jitter
                delay = self.base_delay * (2 ** (attempts - 1)) + self.base_delay * (time.time() % 1)
                logger.warning(
                    f"Retrying {len(pending)} unprocessed items in {table_name} after {delay:.2f}s "
                    f"(attempt {attempts + 1}/{self.unprocessed_retries + 1})"
                )
                time.sleep(delay)
        except BatchWriteCallFailed:
            # A retry failed after the first call applied part of the chunk
            if attempts and state is not None:
                state.record_chunk(ChunkResult(submitted=len(chunk), unprocessed=len(pending), attempts=attempts))
            raise

        result = ChunkResult(submitted=len(chunk), unprocessed=len(pending), attempts=max(attempts, 1))
        if state is not None:
            state.record_chunk(result)

        if pending:
            condition = PartialWriteUnprocessed(table_name, pending, attempts)
            if self.fail_on_unprocessed:
                logger.error(f"Batch write to {table_name} incomplete: {condition}")
                raise condition
            logger.warning(f"Batch write to {table_name} incomplete, continuing: {condition}")

        return result
