"""Append-only log of treated patients, most recent first."""

from collections import deque
from typing import Deque, Iterator, List

from models import PatientRecord


class History:
    def __init__(self) -> None:
        self._served: Deque[PatientRecord] = deque()

    def record(self, served: PatientRecord) -> None:
        """Log a patient that has just been treated."""
        self._served.appendleft(served)

    def restore(self, served: PatientRecord) -> None:
        """Append at the oldest end. Used when rebuilding from the treated file."""
        self._served.append(served)

    def all(self) -> List[PatientRecord]:
        return list(self._served)

    def __iter__(self) -> Iterator[PatientRecord]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._served)
