"""
Exclusive boolean flags.

Some flags may be held by at most one row in a partition: the homepage flag
across all static pages, and the is_current flag per timeline entry_type.
Setting the flag on one row clears it on every competing row. The caller's
transaction covers both writes, so a rollback undoes the demotion too.
"""
import logging
from typing import Any, Dict, Optional, Type

from sqlalchemy.orm import Session

from apps.shared.database import Base

logger = logging.getLogger(__name__)


def claim_exclusive_flag(
    db: Session,
    model: Type[Base],
    flag: str,
    row_id: int,
    value: bool,
    partition: Optional[Dict[str, Any]] = None,
) -> int:
    """
    Clear `flag` on every other row of `model` in the partition when `value` is true.

    Args:
        db: Session whose transaction also carries the triggering write
        model: Mapped class holding the flag column (e.g. StaticPage)
        flag: Name of the boolean column (e.g. 'is_homepage')
        row_id: Primary key of the row that keeps or receives the flag
        value: New flag value for row_id; False never demotes anything
        partition: Column/value pairs limiting which rows compete,
                   e.g. {'entry_type': 'career'}. None means all rows.

    Returns:
        Number of rows demoted. Zero is not an error.

    Does not commit and does not touch row_id itself.
    """
    if not value:
        return 0

    if not hasattr(model, flag):
        raise ValueError(f"Model {model.__name__} does not have field '{flag}'")

    column = getattr(model, flag)
    query = db.query(model).filter(model.id != row_id, column == True)  # noqa: E712
    for field, field_value in (partition or {}).items():
        query = query.filter(getattr(model, field) == field_value)

    demoted = query.update({column: False}, synchronize_session="fetch")

    if demoted:
        logger.info(
            f"Cleared {model.__tablename__}.{flag} on {demoted} row(s) "
            f"in favour of id={row_id} (partition={partition or 'all'})"
        )
    return demoted
