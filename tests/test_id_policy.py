import re
from datetime import date, datetime, timedelta, timezone

from app.services.id_policy import generate_lot_id, lot_id_generator, now_iso, to_iso


def test_lot_id_format():
    lot_id = generate_lot_id(now=datetime(2026, 10, 19, 15, 30, 12))
    assert re.fullmatch(r"lot_20261019_153012_[a-z0-9]{8}", lot_id)


def test_lot_ids_unique_over_many_generations():
    generate = lot_id_generator()
    keys = {generate() for _ in range(1000)}
    assert len(keys) == 1000


def test_lot_id_generator_uses_prefix_and_length():
    lot_id = lot_id_generator(prefix="LOT-", suffix_length=4)()
    assert lot_id.startswith("LOT-")
    assert len(lot_id.rsplit("_", 1)[1]) == 4


def test_to_iso_converts_offsets_to_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    value = datetime(2026, 1, 1, 5, 30, 0, 250000, tzinfo=ist)
    assert to_iso(value) == "2026-01-01T00:00:00.250Z"


def test_to_iso_passes_other_values_through():
    assert to_iso(date(2026, 1, 2)) == "2026-01-02"
    assert to_iso("text") == "text"
    assert to_iso(12) == 12


def test_now_iso_shape():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", now_iso())
