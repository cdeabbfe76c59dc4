"""
Test configuration and fixtures for the table replicator.

Provides an in-memory gateway for unit tests and moto-backed DynamoDB
tables for end-to-end replication tests.
"""

import os
import sys
from pathlib import Path

# Add parent directory to path so we can import dynamodb_replicator and tests.helpers
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from dynamodb_replicator import ReplicatorConfig, TableGateway
from tests.helpers import FakeGateway


@pytest.fixture
def replicator_config():
    """Replicator configuration for testing, with no backoff delay."""
    return ReplicatorConfig(
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        aws_session_token=None,
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        retry_base_delay_ms=0,
        max_retries=3
    )


@pytest.fixture
def fake_gateway():
    """In-memory gateway with 100-item scan pages."""
    return FakeGateway(page_size=100)


# ===== moto fixtures =====

@pytest.fixture
def aws_credentials():
    """Keep boto3 away from real credentials."""
    env = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
    }
    original = {k: os.environ.get(k) for k in env}
    os.environ.update(env)
    yield
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def mock_dynamodb_client(aws_credentials):
    """Mocked low-level DynamoDB client."""
    with mock_aws():
        yield boto3.client('dynamodb', region_name='us-east-1')


@pytest.fixture
def create_table(mock_dynamodb_client):
    """Factory creating a pay-per-request table with a string partition key and optional sort key."""

    def _create(name: str, hash_key: str = 'pk', range_key: str = None):
        key_schema = [{'AttributeName': hash_key, 'KeyType': 'HASH'}]
        attribute_definitions = [{'AttributeName': hash_key, 'AttributeType': 'S'}]
        if range_key:
            key_schema.append({'AttributeName': range_key, 'KeyType': 'RANGE'})
            attribute_definitions.append({'AttributeName': range_key, 'AttributeType': 'N'})

        mock_dynamodb_client.create_table(
            TableName=name,
            KeySchema=key_schema,
            AttributeDefinitions=attribute_definitions,
            BillingMode='PAY_PER_REQUEST'
        )
        return name

    return _create


@pytest.fixture
def moto_gateway(replicator_config, mock_dynamodb_client):
    """TableGateway talking to the mocked DynamoDB."""
    return TableGateway(replicator_config)


def scan_all(client, table_name):
    """Read every item of a table through the raw client."""
    items = []
    kwargs = {'TableName': table_name}
    while True:
        response = client.scan(**kwargs)
        items.extend(response['Items'])
        if 'LastEvaluatedKey' not in response:
            return items
        kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']


@pytest.fixture
def scan_table(mock_dynamodb_client):
    """Return a function listing every item of a mocked table."""
    return lambda table_name: scan_all(mock_dynamodb_client, table_name)
