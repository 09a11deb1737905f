"""Records produced by the receipt parser and by the storage layer."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ReceiptData:
    """Best-effort fields extracted from one receipt's text.

    Every field except ``raw_text`` may be ``None``, meaning the value was not
    confidently found. Values are not cross-checked against each other.
    """
    raw_text: str
    vendor_name: Optional[str] = None
    date: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = None
    subtotal_amount: Optional[float] = None
    tax_amount: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rawText': self.raw_text,
            'vendorName': self.vendor_name,
            'date': self.date,
            'invoiceNumber': self.invoice_number,
            'amount': self.amount,
            'subtotalAmount': self.subtotal_amount,
            'taxAmount': self.tax_amount,
        }


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ReceiptResult:
    """A parsed receipt together with the identity assigned when it was stored."""
    filename: str
    data: ReceiptData
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    uploaded_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'filename': self.filename,
            'uploadedAt': self.uploaded_at,
            'data': self.data.to_dict(),
        }
