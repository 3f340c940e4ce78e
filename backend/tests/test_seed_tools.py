"""
Catalog seeding from the bundled JSON file.
"""
import pytest
from sqlalchemy.orm import Session

from compass.models import Category, Tool
from compass.scripts.seed_tools import DEFAULT_FILE, _coerce_difficulty, _load_file, seed_catalog


def test_bundled_seed_file_loads_and_seeds(db: Session):
    data = _load_file(DEFAULT_FILE)

    counts = seed_catalog(db, data)

    assert counts["created"] == len(data["tools"])
    assert counts["updated"] == 0
    assert db.query(Tool).count() == len(data["tools"])
    assert db.query(Category).count() == len(data["categories"])
    chatgpt = db.query(Tool).filter(Tool.name == "ChatGPT").one()
    assert chatgpt.category.name == "Productivity"
    assert chatgpt.status == "active"


def test_seed_is_idempotent(db: Session):
    data = _load_file(DEFAULT_FILE)
    seed_catalog(db, data)

    counts = seed_catalog(db, data)

    assert counts == {"created": 0, "updated": len(data["tools"]), "skipped": 0}
    assert db.query(Tool).count() == len(data["tools"])


def test_seed_updates_in_place_and_skips_incomplete_rows(db: Session):
    seed_catalog(db, {"tools": [{"name": "Helper", "description": "v1", "setup_difficulty": "EASY"}]})

    counts = seed_catalog(
        db,
        {
            "categories": [{"name": "Automation", "color": "#F59E0B"}],
            "tools": [
                {"name": "Helper", "description": "v2", "category": "Automation", "setup_difficulty": "extreme"},
                {"name": "", "description": "nameless"},
                {"name": "No Description"},
                {"name": "Writer", "description": "Drafts copy", "category": "Content"},
            ],
        },
    )

    assert counts == {"created": 1, "updated": 1, "skipped": 2}
    helper = db.query(Tool).filter(Tool.name == "Helper").one()
    assert helper.description == "v2"
    assert helper.setup_difficulty is None
    assert helper.category.name == "Automation"
    # Categories referenced only by tools are created on the fly
    assert db.query(Category).filter(Category.name == "Content").count() == 1


@pytest.mark.parametrize(
    "raw,expected",
    [("easy", "easy"), (" Hard ", "hard"), ("MEDIUM", "medium"), ("", None), (None, None), ("trivial", None)],
)
def test_coerce_difficulty(raw, expected):
    assert _coerce_difficulty(raw) == expected


def test_load_file_rejects_bad_shapes(tmp_path):
    with pytest.raises(FileNotFoundError):
        _load_file(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text('{"categories": []}', encoding="utf-8")
    with pytest.raises(ValueError):
        _load_file(bad)
