import pytest
from pydantic import ValidationError

from models import PatientRecord, generate_patient_id


def test_fields_are_trimmed(make_record):
    r = make_record(name="  Alice  ", contact=" 555-0100 ")
    assert r.name == "Alice"
    assert r.contact == "555-0100"


@pytest.mark.parametrize("priority", [0, 11, -3])
def test_priority_out_of_range_is_rejected(make_record, priority):
    with pytest.raises(ValidationError):
        make_record(priority=priority)


def test_blank_name_and_negative_age_are_rejected(make_record):
    with pytest.raises(ValidationError):
        make_record(name="   ")
    with pytest.raises(ValidationError):
        make_record(age=-1)


def test_identifier_must_be_csv_safe(make_record):
    with pytest.raises(ValidationError):
        make_record(patient_id="a,b")
    with pytest.raises(ValidationError):
        make_record(patient_id="a b")


def test_records_are_frozen(make_record):
    r = make_record()
    with pytest.raises(ValidationError):
        r.priority = 9


def test_sort_key_orders_priority_desc_then_arrival():
    high = PatientRecord(patient_id="a", name="A", age=1, priority=9, arrival_order=5)
    early = PatientRecord(patient_id="b", name="B", age=1, priority=5, arrival_order=1)
    late = PatientRecord(patient_id="c", name="C", age=1, priority=5, arrival_order=2)
    assert sorted([late, early, high], key=lambda r: r.sort_key) == [high, early, late]


def test_generated_ids_are_unique_and_valid(make_record):
    ids = {generate_patient_id() for _ in range(200)}
    assert len(ids) == 200
    make_record(patient_id=ids.pop())
