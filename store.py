"""Patient store: owns the priority queue, the name index and the treated log.

Every mutation goes through this class so that the priority queue and the
name index always hold the same set of patients.
"""

import logging
from typing import List, Optional, Set

from pydantic import ValidationError

from config import get_treated_path, get_waiting_path
from history import History
from models import InvalidPatientError, PatientRecord, generate_patient_id
from name_index import NameIndex
from persistence import read_records, write_files
from queue_store import PriorityIndex

logger = logging.getLogger(__name__)


class PatientStore:
    def __init__(
        self,
        waiting_path: Optional[str] = None,
        treated_path: Optional[str] = None,
    ) -> None:
        self.waiting_path = waiting_path or get_waiting_path()
        self.treated_path = treated_path or get_treated_path()
        self._queue = PriorityIndex()
        self._names = NameIndex()
        self._history = History()
        self._next_arrival = 0

    @property
    def next_arrival(self) -> int:
        return self._next_arrival

    @property
    def waiting_count(self) -> int:
        return len(self._queue)

    def _insert(self, record: PatientRecord) -> None:
        self._queue.insert(record)
        self._names.insert(record)

    def add_patient(self, name: str, age: int, priority: int, contact: str = "") -> PatientRecord:
        """Register a new waiting patient. Raises InvalidPatientError, leaving state untouched."""
        try:
            record = PatientRecord(
                patient_id=generate_patient_id(),
                name=name,
                age=age,
                priority=priority,
                contact=contact,
                arrival_order=self._next_arrival,
            )
        except ValidationError as e:
            raise InvalidPatientError(_describe(e)) from e
        self._next_arrival += 1
        self._insert(record)
        logger.info("Added patient %s name=%s priority=%d", record.patient_id, record.name, record.priority)
        return record

    def peek_next(self) -> Optional[PatientRecord]:
        return self._queue.peek_highest()

    def serve_next(self) -> Optional[PatientRecord]:
        """Treat the highest-priority patient, or return None if nobody is waiting."""
        record = self._queue.extract_highest()
        if record is None:
            return None
        if not self._names.remove(record):
            logger.error("Patient %s missing from name index while serving", record.patient_id)
        self._history.record(record)
        logger.info("Serving patient %s name=%s priority=%d", record.patient_id, record.name, record.priority)
        return record

    def list_waiting(self) -> List[PatientRecord]:
        return self._queue.ordered()

    def search_by_name(self, name: str) -> List[PatientRecord]:
        """Waiting patients named ``name`` (case-insensitive), in treatment order."""
        name = (name or "").strip()
        if not name:
            return []
        return sorted(self._names.find_exact(name), key=lambda r: r.sort_key)

    def served(self) -> List[PatientRecord]:
        """Treated patients, most recent first."""
        return self._history.all()

    def index_ids(self) -> tuple:
        """(queue ids, name index ids); equal whenever the store is consistent."""
        return self._queue.ids(), self._names.ids()

    # --- Persistence ---

    def save(self) -> bool:
        """Overwrite both state files. Returns False (and logs) on I/O failure."""
        try:
            counts = write_files(
                {
                    self.waiting_path: self._queue.ordered(),
                    self.treated_path: self._history.all(),
                }
            )
        except OSError as e:
            logger.error("Failed to save state: %s", e)
            return False
        logger.info(
            "State saved: %d waiting, %d treated",
            counts[self.waiting_path],
            counts[self.treated_path],
        )
        return True

    def load(self) -> bool:
        """Replace in-memory state with the contents of both state files.

        Both files are read fully before anything is replaced, so on I/O
        failure the current state is kept and False is returned.
        """
        try:
            waiting = list(read_records(self.waiting_path))
            treated = list(read_records(self.treated_path))
        except OSError as e:
            logger.error("Failed to load state: %s", e)
            return False

        self._queue = PriorityIndex()
        self._names = NameIndex()
        self._history = History()
        seen: Set[str] = set()
        max_arrival = -1

        for record in waiting:
            if _is_duplicate(record, seen, self.waiting_path):
                continue
            self._insert(record)
            max_arrival = max(max_arrival, record.arrival_order)
        for record in treated:
            if _is_duplicate(record, seen, self.treated_path):
                continue
            self._history.restore(record)
            max_arrival = max(max_arrival, record.arrival_order)

        self._next_arrival = max(self._next_arrival, max_arrival + 1)
        logger.info(
            "State loaded: %d waiting, %d treated, next arrival %d",
            len(self._queue),
            len(self._history),
            self._next_arrival,
        )
        return True


def _is_duplicate(record: PatientRecord, seen: Set[str], path: str) -> bool:
    if record.patient_id in seen:
        logger.warning("Skipping duplicate patient %s in %s", record.patient_id, path)
        return True
    seen.add(record.patient_id)
    return False


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts)
