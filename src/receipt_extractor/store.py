"""In-memory storage for parsed receipts."""

import logging
import threading
from typing import Dict, List

from .exceptions import ReceiptNotFoundError
from .models import ReceiptData, ReceiptResult

logger = logging.getLogger(__name__)


class ReceiptStore:
    """Thread-safe map of receipt id to ReceiptResult, kept in insertion order."""

    def __init__(self):
        self._receipts: Dict[str, ReceiptResult] = {}
        self._lock = threading.Lock()

    def add(self, filename: str, data: ReceiptData) -> ReceiptResult:
        """Store parsed data under a new id and return the stored result."""
        result = ReceiptResult(filename=filename, data=data)
        with self._lock:
            self._receipts[result.id] = result
        logger.info(f"Stored receipt {result.id} ({filename})")
        return result

    def get(self, receipt_id: str) -> ReceiptResult:
        with self._lock:
            result = self._receipts.get(receipt_id)
        if result is None:
            raise ReceiptNotFoundError(receipt_id)
        return result

    def list(self) -> List[ReceiptResult]:
        with self._lock:
            return list(self._receipts.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)
