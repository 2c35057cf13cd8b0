import threading
import uuid
from typing import Dict, Optional

from receipt import Receipt


class ReceiptStore:
    """
    In-memory, append-only storage for accepted receipts and their points.

    Each map has its own lock, held only for the single dict access. Nothing
    is ever removed or overwritten apart from a racing put_score writing the
    same points twice.
    """

    def __init__(self):
        self._receipts: Dict[uuid.UUID, Receipt] = {}
        self._points: Dict[uuid.UUID, int] = {}
        self._receipts_lock = threading.Lock()
        self._points_lock = threading.Lock()

    def put(self, receipt: Receipt) -> uuid.UUID:
        """ Stores the receipt under a fresh random id and returns the id """
        receipt_id = uuid.uuid4()
        with self._receipts_lock:
            self._receipts[receipt_id] = receipt
        return receipt_id

    def get_receipt(self, receipt_id: uuid.UUID) -> Optional[Receipt]:
        with self._receipts_lock:
            return self._receipts.get(receipt_id)

    def get_score(self, receipt_id: uuid.UUID) -> Optional[int]:
        with self._points_lock:
            return self._points.get(receipt_id)

    def put_score(self, receipt_id: uuid.UUID, points: int):
        with self._points_lock:
            self._points[receipt_id] = points

    def __len__(self):
        with self._receipts_lock:
            return len(self._receipts)
