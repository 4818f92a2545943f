"""
Deleting content items.

A blog post, static page or project owns SEO metadata and social sharing
settings through (content_type, content_id). Nothing in the schema removes
those rows, so the delete removes them first and then the item, all in one
transaction: either every row goes or none does.
"""
import logging
from typing import Dict, Union

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.cms.associations import cascade_delete, owner_model, resolve_content_type
from apps.cms.exceptions import NotFound
from apps.cms.models import ContentType

logger = logging.getLogger(__name__)


def delete_content_item(
    db: Session, content_type: Union[ContentType, str], content_id: int
) -> Dict[str, int]:
    """
    Delete a content item together with its associations.

    Returns:
        Association rows removed per table.

    Raises:
        InvalidContentType: unknown tag
        NotFound: no such content item
    """
    tag = resolve_content_type(content_type)
    model = owner_model(tag)

    item = db.query(model).filter(model.id == content_id).first()
    if not item:
        raise NotFound(f"{tag.value} with id {content_id} not found")

    try:
        with transaction(db):
            removed = cascade_delete(db, tag, content_id)
            db.delete(item)
            db.flush()
    except Exception as e:
        logger.error(f"Deleting {tag.value} {content_id} failed, rolled back: {e}", exc_info=True)
        raise

    logger.info(f"Deleted {tag.value} {content_id} with associations {removed}")
    return removed
