"""
Table replication engine.

- ScanPaginator: pulls pages from a table until the continuation token runs out
- ChunkedBatchWriter: submits put/delete operations in chunks of 25
- project_key: reduces an item to its primary key for deletes
- ReplicationOrchestrator / replicate: wipe and copy phases of one job
"""

from .keys import delete_operation, project_key, put_operation
from .orchestrator import ReplicationOrchestrator, classify_error, replicate
from .paginator import ScanPaginator
from .writer import ChunkedBatchWriter, chunked

__all__ = [
    "ChunkedBatchWriter",
    "ReplicationOrchestrator",
    "ScanPaginator",
    "chunked",
    "classify_error",
    "delete_operation",
    "project_key",
    "put_operation",
    "replicate",
]
