"""CSV line codec and file I/O for the waiting and treated patient files.

One record per line::

    identifier,name,age,priority,contact,arrivalOrder

There is no quoting; ``PatientRecord`` already replaces commas and line
breaks in free-text fields with a space, so every record fits on one line.
"""

import logging
import os
import re
import tempfile
from typing import Dict, Iterable, Iterator

from pydantic import ValidationError

from models import PatientRecord, clean_text

logger = logging.getLogger(__name__)

FIELD_COUNT = 6

_INTEGER = re.compile(r"-?[0-9]+")


class MalformedLineError(ValueError):
    """A persisted line could not be turned into a PatientRecord."""


def _to_int(field: str, value: str) -> int:
    # int() alone would also take "1_0", "+5" and non-ASCII digits
    if not _INTEGER.fullmatch(value):
        raise MalformedLineError(f"{field}: not a base-10 integer: {value!r}")
    return int(value)


def format_line(record: PatientRecord) -> str:
    return ",".join(
        [
            record.patient_id,
            clean_text(record.name),
            str(record.age),
            str(record.priority),
            clean_text(record.contact),
            str(record.arrival_order),
        ]
    )


def parse_line(line: str) -> PatientRecord:
    """Parse one line. Raises MalformedLineError on wrong field count or bad values."""
    parts = [p.strip() for p in line.rstrip("\r\n").split(",")]
    if len(parts) != FIELD_COUNT:
        raise MalformedLineError(f"expected {FIELD_COUNT} fields, got {len(parts)}")
    patient_id, name, age, priority, contact, arrival = parts
    try:
        return PatientRecord(
            patient_id=patient_id,
            name=name,
            age=_to_int("age", age),
            priority=_to_int("priority", priority),
            contact=contact,
            arrival_order=_to_int("arrival_order", arrival),
        )
    except ValidationError as e:
        raise MalformedLineError(str(e)) from e


def read_records(path: str) -> Iterator[PatientRecord]:
    """Yield records from ``path`` in file order, skipping malformed lines.

    Lines are decoded one at a time so a bad byte only costs its own line.
    A missing file is treated as empty. Other OS errors propagate.
    """
    if not os.path.exists(path):
        logger.info("No state file at %s, starting empty", path)
        return
    with open(path, "rb") as fh:
        for lineno, raw in enumerate(fh, start=1):
            try:
                line = raw.decode("utf-8")
                if not line.strip():
                    continue
                record = parse_line(line)
            except (UnicodeDecodeError, MalformedLineError) as e:
                logger.warning("Skipping %s line %d: %s", path, lineno, e)
                continue
            yield record


def write_files(files: Dict[str, Iterable[PatientRecord]]) -> Dict[str, int]:
    """Overwrite every ``path -> records`` entry. Returns the count written per path.

    All files are first written to temporary siblings; none is replaced
    until every one has been written, so a failure leaves the old files intact.
    """
    staged = {}
    counts = {}
    try:
        for path, records in files.items():
            parent = os.path.dirname(os.path.abspath(path))
            os.makedirs(parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".csv", dir=parent)
            staged[path] = tmp_path
            count = 0
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                for record in records:
                    fh.write(format_line(record) + "\n")
                    count += 1
            counts[path] = count
        for path, tmp_path in staged.items():
            os.replace(tmp_path, path)
    finally:
        for tmp_path in staged.values():
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
    return counts


def write_records(path: str, records: Iterable[PatientRecord]) -> int:
    """Overwrite ``path`` with ``records``. Returns the number written."""
    return write_files({path: records})[path]
