"""In-memory priority queue for waiting patients using heapq."""

import heapq
from typing import List, Optional, Set, Tuple

from models import PatientRecord

# Min-heap: we store ((-priority, arrival_order, patient_id), record) so higher
# priority and earlier arrival come first. arrival_order is unique, so the
# record itself is never compared.
_Entry = Tuple[Tuple[int, int, str], PatientRecord]


class PriorityIndex:
    """Waiting patients ordered by (priority desc, arrival asc)."""

    def __init__(self) -> None:
        self._heap: List[_Entry] = []

    def insert(self, record: PatientRecord) -> None:
        heapq.heappush(self._heap, (record.sort_key, record))

    def peek_highest(self) -> Optional[PatientRecord]:
        """Return the highest-priority patient without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0][1]

    def extract_highest(self) -> Optional[PatientRecord]:
        """Dequeue and return the highest-priority patient, or None if empty."""
        if not self._heap:
            return None
        _, record = heapq.heappop(self._heap)
        return record

    def ordered(self) -> List[PatientRecord]:
        """Return current contents in priority order (no mutation)."""
        return [record for _, record in sorted(self._heap)]

    def ids(self) -> Set[str]:
        return {record.patient_id for _, record in self._heap}

    def __len__(self) -> int:
        return len(self._heap)
