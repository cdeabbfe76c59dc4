"""Tests for the replication data model."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from dynamodb_replicator.models import (
    ChunkResult,
    ErrorKind,
    KeySchema,
    Page,
    Phase,
    PhaseStats,
    ReplicationErrorInfo,
    ReplicationRequest,
    ReplicationResult,
    RunState,
    RunStatus,
    TableRef,
    WriteKind,
    WriteOperation,
)


class TestPage:

    def test_last_page_has_no_token(self):
        assert Page(items=[], page_number=1).is_last is True
        assert Page(items=[], last_evaluated_key={'pk': {'S': 'a'}}, page_number=1).is_last is False

    def test_len(self):
        page = Page(items=[{'pk': {'S': 'a'}}, {'pk': {'S': 'b'}}], page_number=2)

        assert len(page) == 2

    def test_page_numbers_start_at_one(self):
        with pytest.raises(PydanticValidationError):
            Page(items=[], page_number=0)


class TestKeySchemaAndTableRef:

    def test_key_schema_bounds(self):
        with pytest.raises(PydanticValidationError):
            KeySchema(table_name="t", attribute_names=())
        with pytest.raises(PydanticValidationError):
            KeySchema(table_name="t", attribute_names=("a", "b", "c"))

    def test_table_ref_is_immutable(self):
        ref = TableRef(region="ap-southeast-2", table_name="orders")

        assert str(ref) == "ap-southeast-2/orders"
        with pytest.raises(PydanticValidationError):
            ref.table_name = "other"


class TestWriteOperation:

    def test_put_request(self):
        operation = WriteOperation(kind=WriteKind.PUT, payload={'pk': {'S': 'a'}, 'n': {'N': '1'}})

        assert operation.to_request() == {'PutRequest': {'Item': {'pk': {'S': 'a'}, 'n': {'N': '1'}}}}

    def test_delete_request(self):
        operation = WriteOperation(kind=WriteKind.DELETE, payload={'pk': {'S': 'a'}})

        assert operation.to_request() == {'DeleteRequest': {'Key': {'pk': {'S': 'a'}}}}


class TestRunState:

    def test_counters_accumulate(self):
        state = RunState()

        state.record_page(Page(items=[{'pk': {'S': 'a'}}] * 3, page_number=1))
        state.record_page(Page(items=[], page_number=2))
        state.record_chunk(ChunkResult(submitted=3, unprocessed=1, attempts=4))

        assert state.page_index == 2
        assert state.items_seen == 3
        assert state.submitted == 3
        assert state.unprocessed == 1
        assert state.has_error is False

    def test_phase_stats_snapshot(self):
        state = RunState(items_seen=10, submitted=10, unprocessed=2, page_index=1)

        stats = PhaseStats.from_state(Phase.COPY, "orders", state)

        assert stats.phase == Phase.COPY
        assert stats.pages == 1
        assert stats.submitted == 10
        assert stats.unprocessed == 2


class TestReplicationRequest:

    def test_strips_names(self):
        request = ReplicationRequest(region=" us-east-1 ", source_table="a ", destination_table=" b")

        assert request.source.table_name == "a"
        assert request.destination == TableRef(region="us-east-1", table_name="b")
        assert request.wipe_first is False

    @pytest.mark.parametrize("field", ["region", "source_table", "destination_table"])
    def test_blank_fields_rejected(self, field):
        values = {"region": "us-east-1", "source_table": "a", "destination_table": "b"}
        values[field] = "  "

        with pytest.raises(PydanticValidationError, match=f"{field} is required"):
            ReplicationRequest(**values)


class TestReplicationResult:

    def test_done(self):
        result = ReplicationResult(status=RunStatus.DONE)

        assert result.succeeded is True
        assert result.exit_code == 0

    def test_copy_failed(self):
        result = ReplicationResult(
            status=RunStatus.FAILED,
            error=ReplicationErrorInfo(kind=ErrorKind.BATCH_WRITE_CALL_FAILED, message="boom", phase=Phase.COPY)
        )

        assert result.succeeded is False
        assert result.exit_code == 1

    def test_wipe_failed(self):
        result = ReplicationResult(
            status=RunStatus.ABORTED_BEFORE_COPY,
            error=ReplicationErrorInfo(kind=ErrorKind.SCAN_FAILED, message="boom", phase=Phase.WIPE)
        )

        assert result.exit_code == 2

    def test_invalid_request(self):
        result = ReplicationResult(
            status=RunStatus.FAILED,
            error=ReplicationErrorInfo(kind=ErrorKind.INVALID_REQUEST, message="region is required")
        )

        assert result.exit_code == 3

    def test_total_unprocessed(self):
        result = ReplicationResult(
            status=RunStatus.DONE,
            wipe=PhaseStats(phase=Phase.WIPE, table_name="b", unprocessed=1),
            copy_stats=PhaseStats(phase=Phase.COPY, table_name="b", unprocessed=2)
        )

        assert result.total_unprocessed == 3
