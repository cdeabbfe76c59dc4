"""
Test helpers for the table replicator.

Provides an in-memory stand-in for the DynamoDB gateway and item builders.
"""

from .fake_gateway import FakeGateway, make_item, make_items

__all__ = [
    'FakeGateway',
    'make_item',
    'make_items',
]
