"""
Records owned by a content item through a (content_type, content_id) pair.

SEO metadata and social sharing settings carry no foreign key to their
owner. The owner is looked up through OWNER_MODELS when a record is created,
and the records are removed explicitly when the owner is deleted.
"""
import logging
from typing import Any, Dict, Optional, Type, Union

from sqlalchemy.orm import Session

from apps.shared.database import Base, transaction
from apps.cms.exceptions import AssociationExists, InvalidContentType, NotFound, OwnerNotFound
from apps.cms.media import validate_media_reference
from apps.cms.models import (
    BlogPost,
    ContentType,
    Project,
    SeoMetadata,
    SocialSharingSettings,
    StaticPage,
)

logger = logging.getLogger(__name__)

# Tag -> table holding the owning content item
OWNER_MODELS: Dict[ContentType, Type[Base]] = {
    ContentType.BLOG_POST: BlogPost,
    ContentType.STATIC_PAGE: StaticPage,
    ContentType.PROJECT: Project,
}

# Every association kind keyed by (content_type, content_id)
ASSOCIATION_MODELS = (SeoMetadata, SocialSharingSettings)

ASSOCIATION_LABELS = {
    SeoMetadata: "SEO metadata",
    SocialSharingSettings: "Social sharing settings",
}


def resolve_content_type(content_type: Union[ContentType, str]) -> ContentType:
    try:
        return ContentType(content_type)
    except ValueError:
        raise InvalidContentType(f"Invalid content type: {content_type}") from None


def owner_model(content_type: Union[ContentType, str]) -> Type[Base]:
    return OWNER_MODELS[resolve_content_type(content_type)]


def get_owner(db: Session, content_type: Union[ContentType, str], content_id: int):
    """Return the owning content row, or None if it no longer exists."""
    model = owner_model(content_type)
    return db.query(model).filter(model.id == content_id).first()


def assert_owner_exists(db: Session, content_type: Union[ContentType, str], content_id: int):
    owner = get_owner(db, content_type, content_id)
    if owner is None:
        tag = resolve_content_type(content_type).value
        raise OwnerNotFound(f"Content not found: {tag} with id {content_id}")
    return owner


def resolve_owner_title(
    db: Session, content_type: Union[ContentType, str], content_id: int
) -> Optional[str]:
    """Display title of the owner, or None if the owner is gone."""
    owner = get_owner(db, content_type, content_id)
    return owner.title if owner is not None else None


def find_by_owner(
    db: Session,
    model: Type[Base],
    content_type: Union[ContentType, str],
    content_id: int,
):
    """Return the owner's record of this kind, or None."""
    tag = resolve_content_type(content_type).value
    return (
        db.query(model)
        .filter(model.content_type == tag, model.content_id == content_id)
        .first()
    )


def cascade_delete(
    db: Session, content_type: Union[ContentType, str], content_id: int
) -> Dict[str, int]:
    """
    Delete every association of every kind belonging to the owner.

    Runs inside the caller's transaction and does not commit. Deleting
    when nothing matches is a no-op.

    Returns:
        Rows deleted per association table, e.g. {'seo_metadata': 1, ...}
    """
    tag = resolve_content_type(content_type).value
    deleted = {}
    for model in ASSOCIATION_MODELS:
        deleted[model.__tablename__] = (
            db.query(model)
            .filter(model.content_type == tag, model.content_id == content_id)
            .delete(synchronize_session="fetch")
        )
    return deleted


# ──────────────────────────────────────────────────────────────────────────────
# Create / read / update / delete for a single association kind
# ──────────────────────────────────────────────────────────────────────────────

def get_association(db: Session, model: Type[Base], association_id: int):
    return db.query(model).filter(model.id == association_id).first()


def _require_association(db: Session, model: Type[Base], association_id: int):
    record = get_association(db, model, association_id)
    if not record:
        raise NotFound(f"{ASSOCIATION_LABELS[model]} with id {association_id} not found")
    return record


def create_association(db: Session, model: Type[Base], data: Dict[str, Any]):
    """
    Insert a record for an existing owner.

    The owner must exist and must not already have a record of this kind.
    """
    content_type = resolve_content_type(data["content_type"])
    content_id = data["content_id"]

    assert_owner_exists(db, content_type, content_id)
    if find_by_owner(db, model, content_type, content_id) is not None:
        raise AssociationExists(
            f"{ASSOCIATION_LABELS[model]} already exists for {content_type.value} {content_id}"
        )
    if data.get("social_image_id") is not None:
        validate_media_reference(db, data["social_image_id"], "Social image")

    record = model(**{**data, "content_type": content_type.value})
    with transaction(db):
        db.add(record)
    db.refresh(record)

    logger.info(
        f"Created {model.__tablename__} {record.id} for {content_type.value} {content_id}"
    )
    return record


def update_association(db: Session, model: Type[Base], association_id: int, changes: Dict[str, Any]):
    record = _require_association(db, model, association_id)

    if changes.get("social_image_id") is not None:
        validate_media_reference(db, changes["social_image_id"], "Social image")

    with transaction(db):
        for key, value in changes.items():
            setattr(record, key, value)
    db.refresh(record)

    logger.info(f"Updated {model.__tablename__} {association_id}: {sorted(changes)}")
    return record


def delete_association(db: Session, model: Type[Base], association_id: int) -> None:
    record = _require_association(db, model, association_id)
    with transaction(db):
        db.delete(record)
    logger.info(f"Deleted {model.__tablename__} {association_id}")
