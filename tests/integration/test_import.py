import json
from datetime import date

import pytest

from duo.core.errors import ValidationError
from duo.core.models import Priority, Status, Who
from duo.fixed import get_blocks
from duo.importer import import_legacy, read_records
from duo.tasks import get_tasks

LEGACY_TASKS = [
    {
        "id": "aaa111",
        "title": "comprar entradas",
        "notes": "",
        "who": "yo",
        "priority": "alta",
        "date": "2024-05-17",
        "time": "20:00",
        "status": "pendiente",
        "created_at": "2024-05-01 10:00:00",
    },
    {"id": "bbb222", "title": "regar plantas", "who": "pareja", "priority": "media", "status": "hecho"},
    {"id": "ccc333", "title": "  ", "who": "ambos"},
]

LEGACY_FIXED = [
    {
        "id": "fff111",
        "label": "turno hospital",
        "who": "ella",
        "days": ["1", "3", "xx"],
        "start": "08:00",
        "end": "20:00",
        "location": "",
        "date_start": None,
        "date_end": "2024-12-31",
    },
    {"id": "fff222", "label": "sin horario", "who": "el", "days": ["2"], "start": "", "end": ""},
]


@pytest.fixture
def legacy_dir(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "tasks.json").write_text(json.dumps(LEGACY_TASKS, ensure_ascii=False))
    (data / "fixed.json").write_text(json.dumps(LEGACY_FIXED, ensure_ascii=False))
    return data


def test_import_legacy(tmp_duo_dir, frozen_clock, legacy_dir):
    counts = import_legacy(legacy_dir)
    assert counts == {"tasks": 2, "fixed": 1, "skipped": 2}

    tasks = {t.id: t for t in get_tasks()}
    assert set(tasks) == {"aaa111", "bbb222"}
    assert tasks["aaa111"].who is Who.SELF
    assert tasks["aaa111"].priority is Priority.HIGH
    assert tasks["aaa111"].scheduled_date == date(2024, 5, 17)
    assert tasks["bbb222"].who is Who.PARTNER
    assert tasks["bbb222"].status is Status.DONE
    assert tasks["bbb222"].created_at is not None

    [block] = get_blocks()
    assert block.id == "fff111"
    assert block.who is Who.PARTNER
    assert block.days == ("1", "3", "xx")
    assert block.date_end == date(2024, 12, 31)


def test_import_is_repeatable(tmp_duo_dir, legacy_dir):
    import_legacy(legacy_dir)
    again = import_legacy(legacy_dir)
    assert again["tasks"] == 0
    assert again["fixed"] == 0
    assert len(get_tasks()) == 2


def test_import_missing_directory(tmp_duo_dir, tmp_path):
    with pytest.raises(ValidationError):
        import_legacy(tmp_path / "nope")


def test_read_records_tolerates_bad_files(tmp_path):
    assert read_records(tmp_path / "missing.json") == []
    empty = tmp_path / "empty.json"
    empty.write_text("  ")
    assert read_records(empty) == []
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")
    assert read_records(corrupt) == []
    scalar = tmp_path / "scalar.json"
    scalar.write_text("42")
    assert read_records(scalar) == []
    mixed = tmp_path / "mixed.json"
    mixed.write_text(json.dumps([{"id": "x"}, "junk", 3]))
    assert read_records(mixed) == [{"id": "x"}]
