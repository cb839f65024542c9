import os
import sys

import pytest

# Ensure project root is on sys.path so the top-level modules are importable
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models import PatientRecord  # noqa: E402
from store import PatientStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return PatientStore(
        waiting_path=str(tmp_path / "waiting.csv"),
        treated_path=str(tmp_path / "treated.csv"),
    )


@pytest.fixture
def make_record():
    def _make(name="Pat", priority=5, arrival=0, patient_id=None, age=30, contact=""):
        return PatientRecord(
            patient_id=patient_id or f"p{arrival}",
            name=name,
            age=age,
            priority=priority,
            contact=contact,
            arrival_order=arrival,
        )

    return _make
