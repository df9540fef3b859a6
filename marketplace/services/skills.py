"""Skill registry helpers.

Two de-duplication policies coexist on purpose:

* storage (``unique_in_order``, ``merge_skill_names``, ``add_category_skills``)
  compares names by exact string equality, so "React" and "react" can both be
  stored;
* display (``flag_display_duplicates``) compares case-insensitively, which is
  what the moderation panel uses to grey out skills a category already has.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from marketplace.models.category import CategorySkill

logger = logging.getLogger(__name__)


def clean_skill_names(values: Iterable[object] | None) -> list[str]:
    """Keep non-blank strings, stripped. Order is preserved."""
    if not values:
        return []
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


def unique_in_order(names: Iterable[str]) -> list[str]:
    """Drop exact duplicates, keeping first occurrences."""
    return list(dict.fromkeys(names))


def merge_skill_names(existing: Iterable[str], additions: Iterable[str]) -> list[str]:
    """Existing names followed by additions not already present (exact match)."""
    merged = unique_in_order(existing)
    seen = set(merged)
    for name in additions:
        if name not in seen:
            merged.append(name)
            seen.add(name)
    return merged


def flag_display_duplicates(candidates: Iterable[str], existing: Iterable[str]) -> list[dict]:
    """Mark candidates that an existing name already covers, ignoring case."""
    existing_lower = {name.lower() for name in existing}
    return [{"name": name, "is_duplicate": name.lower() in existing_lower} for name in candidates]


def get_category_skill_names(db: Session, category_id: int) -> list[str]:
    """Skill names of a category in insertion order."""
    rows = (
        db.query(CategorySkill.name)
        .filter(CategorySkill.category_id == category_id)
        .order_by(CategorySkill.id)
        .all()
    )
    return [name for (name,) in rows]


def add_category_skills(db: Session, category_id: int, names: Iterable[str]) -> None:
    """Attach skills to a category, silently ignoring ones it already has.

    Uses ``INSERT ... ON CONFLICT DO NOTHING`` on the (category_id, name)
    unique constraint so concurrent inserts of the same skill cannot fail.
    """
    rows = [{"category_id": category_id, "name": name} for name in unique_in_order(names)]
    if not rows:
        return

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        existing = set(get_category_skill_names(db, category_id))
        db.add_all(CategorySkill(**row) for row in rows if row["name"] not in existing)
        db.flush()
        return

    stmt = insert(CategorySkill).values(rows)
    stmt = stmt.on_conflict_do_nothing(index_elements=["category_id", "name"])
    db.execute(stmt)
    logger.debug(f"Ensured {len(rows)} skills on category {category_id}")
