"""
Root of the replicator's exception hierarchy.

Almost every failure belongs to one table, so the table name is a first-class
attribute and always leads the rendered context. Context entries whose value
is None are dropped, which lets subclasses pass optional details (page
number, chunk size, retry hint) without checking them first.
"""

from typing import Any, Dict, Optional


class ReplicatorError(Exception):
    """Base exception for all replication errors.

    Attributes:
        message: Human-readable error message
        original_error: Mapped or botocore error underneath, if any
        table_name: Table the failing call was made against, if known
        context: Rendered details, table name first
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        table_name: Optional[str] = None
    ):
        self.message = message
        self.original_error = original_error
        self.table_name = table_name
        details = {'table_name': table_name}
        details.update(context or {})
        self.context = {k: v for k, v in details.items() if v is not None}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} (Context: {details})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.message!r}, "
            f"table_name={self.table_name!r}, original_error={self.original_error!r})"
        )
