"""Name-sorted index of waiting patients with binary-search lookup.

Records are kept sorted by ``(name.casefold(), arrival_order)``. A parallel
list of those keys is maintained so :mod:`bisect` can search it directly;
both lists are only ever changed together.
"""

import bisect
from typing import Iterator, List, Set, Tuple

from models import PatientRecord


class NameIndex:
    """Case-insensitive, name-ordered view of the waiting pool."""

    def __init__(self) -> None:
        self._keys: List[Tuple[str, int]] = []
        self._records: List[PatientRecord] = []

    def lower_bound(self, name: str) -> int:
        """First position whose name is >= ``name`` (case-insensitive).

        Returns ``len(self)`` when every name sorts below ``name``.
        """
        # (key,) sorts before every (key, arrival) pair with the same name
        return bisect.bisect_left(self._keys, (name.casefold(),))

    def insert(self, record: PatientRecord) -> int:
        """Insert ``record`` at its sorted position and return that position."""
        key = (record.name_key, record.arrival_order)
        pos = bisect.bisect_left(self._keys, key)
        self._keys.insert(pos, key)
        self._records.insert(pos, record)
        return pos

    def remove(self, record: PatientRecord) -> bool:
        """Remove the entry with ``record``'s id. Returns False if it is not present."""
        name_key = record.name_key
        i = self.lower_bound(record.name)
        while i < len(self._keys) and self._keys[i][0] == name_key:
            if self._records[i].patient_id == record.patient_id:
                del self._keys[i]
                del self._records[i]
                return True
            i += 1
        return False

    def find_exact(self, name: str) -> List[PatientRecord]:
        """All records whose name case-insensitively equals ``name``, in index order."""
        name_key = name.casefold()
        i = self.lower_bound(name)
        matches = []
        while i < len(self._keys) and self._keys[i][0] == name_key:
            matches.append(self._records[i])
            i += 1
        return matches

    def ids(self) -> Set[str]:
        return {record.patient_id for record in self._records}

    def __iter__(self) -> Iterator[PatientRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
