"""Review queue for receipts whose extraction is incomplete or inconsistent."""

import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
from pathlib import Path

from .models import ReceiptData, ReceiptResult

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = 0.01
SNIPPET_LENGTH = 200


@dataclass
class ReviewItem:
    """Represents a receipt that needs manual review."""
    file_path: str
    reason: str
    receipt_id: Optional[str] = None
    suggested_vendor: Optional[str] = None
    suggested_date: Optional[str] = None
    suggested_amount: Optional[float] = None
    raw_snippet: str = ""


class ReviewQueue:
    """Collects receipts a person should look at.

    The parser leaves fields it cannot find empty and never cross-checks
    amounts; this queue is where those gaps are surfaced.
    """

    def __init__(self, amount_tolerance: float = AMOUNT_TOLERANCE):
        """
        Initialize review queue.

        Args:
            amount_tolerance: Allowed difference between subtotal + tax and total
        """
        self.items: List[ReviewItem] = []
        self.amount_tolerance = amount_tolerance

    def review_reasons(self, data: ReceiptData) -> List[str]:
        """List the reasons a parsed receipt needs review (empty if none)."""
        reasons = []

        if data.amount is None:
            reasons.append("missing amount")
        if data.date is None:
            reasons.append("missing date")
        if data.vendor_name is None:
            reasons.append("missing vendor")

        if None not in (data.amount, data.subtotal_amount, data.tax_amount):
            expected = data.subtotal_amount + data.tax_amount
            if abs(expected - data.amount) > self.amount_tolerance:
                reasons.append(f"subtotal + tax ({expected:.2f}) does not match total ({data.amount:.2f})")

        return reasons

    def should_review(self, data: ReceiptData) -> bool:
        """Determine if a parsed receipt should be sent to review."""
        return bool(self.review_reasons(data))

    def add_item(self,
                 file_path: str,
                 reason: str,
                 receipt_id: Optional[str] = None,
                 suggested_vendor: Optional[str] = None,
                 suggested_date: Optional[str] = None,
                 suggested_amount: Optional[float] = None,
                 raw_snippet: str = ""):
        """Add an item to the review queue."""
        item = ReviewItem(
            file_path=file_path,
            reason=reason,
            receipt_id=receipt_id,
            suggested_vendor=suggested_vendor,
            suggested_date=suggested_date,
            suggested_amount=suggested_amount,
            raw_snippet=raw_snippet
        )

        self.items.append(item)
        logger.debug(f"Added to review queue: {Path(file_path).name} - {reason}")

    def add_from_result(self, result: ReceiptResult, file_path: Optional[str] = None) -> bool:
        """
        Add a stored receipt to the queue if its extraction is uncertain.

        Args:
            result: Stored receipt
            file_path: Source path, defaults to the stored filename

        Returns:
            True if the receipt was queued
        """
        data = result.data
        reasons = self.review_reasons(data)
        if not reasons:
            return False

        file_path = file_path or result.filename
        logger.info(f"Sending {Path(file_path).name} to review: {'; '.join(reasons)}")

        self.add_item(
            file_path=file_path,
            reason="; ".join(reasons),
            receipt_id=result.id,
            suggested_vendor=data.vendor_name,
            suggested_date=data.date,
            suggested_amount=data.amount,
            raw_snippet=make_snippet(data.raw_text)
        )
        return True

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the review queue."""
        if not self.items:
            return {"total": 0}

        reason_counts: Dict[str, int] = {}
        for item in self.items:
            for reason in item.reason.split(';'):
                reason = reason.strip()
                # Mismatch reasons carry amounts; count them under one key
                if reason.startswith("subtotal + tax"):
                    reason = "amount mismatch"
                reason_counts[reason] = reason_counts.get(reason, 0) + 1

        return {
            "total": len(self.items),
            "missing_data": sum(1 for item in self.items if 'missing' in item.reason),
            "reason_breakdown": reason_counts
        }

    def clear(self):
        """Clear all items from the review queue."""
        self.items.clear()


def make_snippet(raw_text: str) -> str:
    """One-line preview of raw text, safe to put in a spreadsheet cell."""
    snippet = ' '.join(raw_text.split())[:SNIPPET_LENGTH]
    snippet = ''.join(char for char in snippet if ord(char) >= 32)
    if len(raw_text) > SNIPPET_LENGTH:
        snippet += "..."
    return snippet
