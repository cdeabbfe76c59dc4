"""
End-to-end replication against moto's in-memory DynamoDB.

These tests exercise the real TableGateway: botocore request shapes,
LastEvaluatedKey pagination with Limit, BatchWriteItem and DescribeTable.
"""

from decimal import Decimal

import pytest

from dynamodb_replicator import ReplicationOrchestrator, RunStatus, replicate
from dynamodb_replicator.models import ErrorKind, ReplicationRequest


def put_items(client, table_name, count, start=0, with_sort_key=False):
    for i in range(start, start + count):
        item = {
            'pk': {'S': f"order-{i:04d}"},
            'amount': {'N': str(Decimal('10.5') * i)},
            'blob': {'B': bytes([i % 256])},
            'lines': {'L': [{'S': 'widget'}, {'N': '2'}]},
            'labels': {'SS': ['new', 'paid']},
            'shipping': {'M': {'city': {'S': 'Sydney'}, 'express': {'BOOL': i % 2 == 0}}},
            'note': {'NULL': True},
        }
        if with_sort_key:
            item['version'] = {'N': str(i % 3)}
        client.put_item(TableName=table_name, Item=item)


def by_key(items):
    return {item['pk']['S']: item for item in items}


class TestMotoReplication:

    def test_upsert_copy_preserves_every_attribute(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table):
        create_table('orders-restored')
        create_table('orders')
        put_items(mock_dynamodb_client, 'orders-restored', 60)

        result = replicate(
            'us-east-1', 'orders-restored', 'orders',
            config=replicator_config, gateway=moto_gateway
        )

        assert result.status == RunStatus.DONE
        assert result.copy_stats.submitted == 60
        assert by_key(scan_table('orders')) == by_key(scan_table('orders-restored'))

    def test_pagination_with_small_pages(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table):
        create_table('source')
        create_table('destination')
        put_items(mock_dynamodb_client, 'source', 45)
        config = replicator_config.model_copy(update={'page_size': 7})

        result = ReplicationOrchestrator(config, gateway=moto_gateway).run(
            ReplicationRequest(region='us-east-1', source_table='source', destination_table='destination')
        )

        assert result.succeeded
        assert result.copy_stats.pages >= 7
        assert result.copy_stats.items_seen == 45
        assert len(scan_table('destination')) == 45

    def test_wipe_composite_key_table(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table):
        create_table('source', range_key='version')
        create_table('destination', range_key='version')
        put_items(mock_dynamodb_client, 'source', 12, with_sort_key=True)
        put_items(mock_dynamodb_client, 'destination', 30, start=100, with_sort_key=True)

        result = replicate(
            'us-east-1', 'source', 'destination', wipe_first=True,
            config=replicator_config, gateway=moto_gateway
        )

        assert result.succeeded
        assert result.wipe.submitted == 30
        assert by_key(scan_table('destination')) == by_key(scan_table('source'))

    def test_wipe_with_empty_source_empties_destination(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table):
        create_table('source')
        create_table('destination')
        put_items(mock_dynamodb_client, 'destination', 10)

        result = replicate(
            'us-east-1', 'source', 'destination', wipe_first=True,
            config=replicator_config, gateway=moto_gateway
        )

        assert result.succeeded
        assert result.wipe.submitted == 10
        assert result.copy_stats.submitted == 0
        assert scan_table('destination') == []

    def test_upsert_leaves_extra_destination_rows(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table):
        create_table('source')
        create_table('destination')
        put_items(mock_dynamodb_client, 'source', 5)
        put_items(mock_dynamodb_client, 'destination', 3, start=900)

        result = replicate('us-east-1', 'source', 'destination', config=replicator_config, gateway=moto_gateway)

        assert result.succeeded
        assert len(scan_table('destination')) == 8

    def test_missing_destination_aborts_before_copy(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config):
        create_table('source')
        put_items(mock_dynamodb_client, 'source', 5)

        result = replicate(
            'us-east-1', 'source', 'nope', wipe_first=True,
            config=replicator_config, gateway=moto_gateway
        )

        assert result.status == RunStatus.ABORTED_BEFORE_COPY
        assert result.error.kind == ErrorKind.DESCRIBE_KEY_SCHEMA_FAILED
        assert "nope" in result.error.message

    def test_missing_source_fails_copy(self, create_table, moto_gateway, replicator_config):
        create_table('destination')

        result = replicate('us-east-1', 'nope', 'destination', config=replicator_config, gateway=moto_gateway)

        assert result.status == RunStatus.FAILED
        assert result.error.kind == ErrorKind.SCAN_FAILED

    @pytest.mark.parametrize("runs", [1, 2])
    def test_idempotent_reruns(self, mock_dynamodb_client, create_table, moto_gateway, replicator_config, scan_table, runs):
        create_table('source')
        create_table('destination')
        put_items(mock_dynamodb_client, 'source', 30)

        for _ in range(runs):
            replicate('us-east-1', 'source', 'destination', config=replicator_config, gateway=moto_gateway)

        assert by_key(scan_table('destination')) == by_key(scan_table('source'))
