# backend/compass/scripts/seed_tools.py

"""
Seed the tool catalog (categories + tools) from a JSON file.

Usage:

  cd backend
  python -m compass.scripts.seed_tools
  python -m compass.scripts.seed_tools --file compass/data/tools_seed.json

Idempotent: categories and tools are matched by name and updated in place.
"""

import argparse
import json
from pathlib import Path
from datetime import datetime

from sqlalchemy.orm import Session

from compass.database import SessionLocal
from compass import models

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_FILE = BASE_DIR / "data" / "tools_seed.json"

LIST_FIELDS = [
    "target_roles",
    "target_industries",
    "target_company_sizes",
    "features",
    "integrations",
    "pros",
    "cons",
]
SCALAR_FIELDS = [
    "pricing_model",
    "pricing_amount",
    "website_url",
    "logo_url",
    "time_to_value",
    "user_rating",
    "expert_rating",
    "popularity_score",
    "implementation_guide",
    "video_tutorial_url",
]


def _coerce_difficulty(raw):
    """Map 'easy' | 'medium' | 'hard' (any case) to its stored value, else None."""
    if not raw:
        return None
    try:
        return models.SetupDifficulty(str(raw).strip().lower()).value
    except ValueError:
        return None


def _load_file(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")

    print(f"[seed_tools] Loading catalog from: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get("tools"), list):
        raise ValueError(f"Expected an object with a 'tools' list in {path}")
    return data


def _upsert_categories(db: Session, raw_categories: list[dict]) -> dict[str, models.Category]:
    by_name = {c.name: c for c in db.query(models.Category).all()}
    for c in raw_categories:
        name = (c.get("name") or "").strip()
        if not name:
            continue
        category = by_name.get(name)
        if category is None:
            category = models.Category(name=name)
            db.add(category)
            by_name[name] = category
        category.description = c.get("description")
        category.color = c.get("color")
        category.icon = c.get("icon")
    db.flush()
    return by_name


def seed_catalog(db: Session, data: dict) -> dict[str, int]:
    """Upsert categories and tools by name. Commits once at the end."""
    categories = _upsert_categories(db, data.get("categories") or [])

    created = 0
    updated = 0
    skipped = 0

    for t in data["tools"]:
        name = (t.get("name") or "").strip()
        description = (t.get("description") or "").strip()
        if not name or not description:
            skipped += 1
            continue

        category_name = (t.get("category") or "").strip()
        category = categories.get(category_name)
        if category_name and category is None:
            category = models.Category(name=category_name)
            db.add(category)
            db.flush()
            categories[category_name] = category

        tool = db.query(models.Tool).filter(models.Tool.name == name).one_or_none()
        if tool is None:
            tool = models.Tool(name=name, description=description)
            db.add(tool)
            created += 1
        else:
            tool.description = description
            tool.updated_at = datetime.utcnow()
            updated += 1

        tool.category_id = category.id if category else None
        tool.setup_difficulty = _coerce_difficulty(t.get("setup_difficulty"))
        tool.status = t.get("status") or models.ToolStatus.ACTIVE.value
        for field in LIST_FIELDS:
            setattr(tool, field, t.get(field) or [])
        for field in SCALAR_FIELDS:
            setattr(tool, field, t.get(field))

    db.commit()
    return {"created": created, "updated": updated, "skipped": skipped}


def main():
    parser = argparse.ArgumentParser(
        description="Seed the tool catalog from a JSON file."
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_FILE,
        help=f"Path to the catalog JSON (default: {DEFAULT_FILE})",
    )
    args = parser.parse_args()

    data = _load_file(args.file)
    db: Session = SessionLocal()
    try:
        counts = seed_catalog(db, data)
        print(
            f"[seed_tools] Seed complete. Created={counts['created']}, "
            f"Updated={counts['updated']}, Skipped={counts['skipped']}"
        )
    finally:
        db.close()


if __name__ == "__main__":
    main()
