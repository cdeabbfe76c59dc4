"""
Scan Paginator

Drives repeated Scan calls against one table until DynamoDB stops returning
a LastEvaluatedKey. Each call is capped by DynamoDB at roughly 1MB of item
data; the paginator accepts whatever page size comes back.

The scan is not a snapshot. Items written or deleted while pagination is in
progress may or may not appear in later pages.
"""

import json
import logging
from typing import Iterator, Optional

from ..core import TableGateway
from ..exceptions import ScanFailed
from ..models import Item, Page

logger = logging.getLogger(__name__)


def _token_fingerprint(token: Item) -> str:
    return json.dumps(token, sort_keys=True, default=str)


class ScanPaginator:
    """
    Lazy, finite, non-restartable sequence of scan pages.

    The continuation token of page n is passed verbatim as the
    ExclusiveStartKey of page n+1. Failures propagate as ScanFailed and are
    never retried here; the gateway's client already applied its retry policy.
    """

    def __init__(self, gateway: TableGateway, page_size: Optional[int] = None):
        """Initialize paginator.

        Args:
            gateway: Storage client
            page_size: Optional scan Limit per call
        """
        self.gateway = gateway
        self.page_size = page_size

    def pages(self, table_name: str) -> Iterator[Page]:
        """
        Yield every page of a table.

        An empty table yields exactly one empty page.

        Args:
            table_name: Table to scan

        Yields:
            Page objects, numbered from 1

        Raises:
            ScanFailed: A scan call failed, or DynamoDB repeated a continuation token
        """
        start_key: Optional[Item] = None
        consumed = set()
        page_number = 0

        while True:
            page_number += 1
            items, last_key = self.gateway.scan(
                table_name,
                exclusive_start_key=start_key,
                limit=self.page_size,
                page_number=page_number
            )
            logger.debug(f"Scanned page {page_number} of {table_name}: {len(items)} items")

            yield Page(items=items, last_evaluated_key=last_key, page_number=page_number)

            if last_key is None:
                return

            fingerprint = _token_fingerprint(last_key)
            if fingerprint in consumed:
                raise ScanFailed(
                    table_name,
                    f"Scan of {table_name} returned an already consumed continuation token",
                    page_number
                )
            consumed.add(fingerprint)

            logger.info("Scanning for more...")
            start_key = last_key
