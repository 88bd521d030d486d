"""
Small query helpers shared by the services.

session.exec() hands back COUNT results as a bare int for select(func.count(...)) but as a
Row when more than one column is selected. scalar_int() and grouped_counts() normalize
both shapes so callers can compare against capacities without caring which one they got.
"""
from typing import Any, Dict

from sqlalchemy import func
from sqlmodel import Session, select


def scalar_int(x: Any) -> int:
    """COUNT/aggregate result as int. Accepts an int, None, or a 1-tuple/Row."""
    if x is None:
        return 0
    try:
        return int(x[0])
    except TypeError:
        return int(x)


def grouped_counts(session: Session, key_column, *where) -> Dict[str, int]:
    """{key: row count} for rows matching `where`, grouped by key_column."""
    rows = session.exec(select(key_column, func.count()).where(*where).group_by(key_column)).all()
    return {str(key): scalar_int(count) for key, count in rows}
