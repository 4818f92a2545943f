"""
Blog posts, static pages and projects.

The three content kinds share create/read/update logic; the model class is
passed in. Deletes go through apps.cms.lifecycle so that SEO and sharing
records are removed with the item.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from apps.shared.database import Base, transaction
from apps.cms.exceptions import DuplicateSlug, NotFound
from apps.cms.media import validate_media_reference
from apps.cms.models import BlogPost, ContentStatus, Project, StaticPage
from apps.cms.singleton import claim_exclusive_flag

logger = logging.getLogger(__name__)

LABELS = {
    BlogPost: "Blog post",
    StaticPage: "Static page",
    Project: "Project",
}


def _ordering(model: Type[Base]):
    if model is BlogPost:
        return (BlogPost.created_at.desc(), BlogPost.id.desc())
    if model is StaticPage:
        return (StaticPage.title.asc(),)
    return (model.sort_order.asc(), model.created_at.desc(), model.id.desc())


def ensure_slug_available(
    db: Session, model: Type[Base], slug: str, exclude_id: Optional[int] = None
) -> None:
    query = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        raise DuplicateSlug(f"Slug '{slug}' already exists")


def list_content(db: Session, model: Type[Base], status: Optional[str] = None) -> List[Any]:
    query = db.query(model)
    if status is not None:
        query = query.filter(model.status == ContentStatus(status).value)
    return query.order_by(*_ordering(model)).all()


def get_content(db: Session, model: Type[Base], content_id: int):
    return db.query(model).filter(model.id == content_id).first()


def get_content_by_slug(db: Session, model: Type[Base], slug: str):
    return db.query(model).filter(model.slug == slug).first()


def get_homepage(db: Session) -> Optional[StaticPage]:
    return db.query(StaticPage).filter(StaticPage.is_homepage == True).first()  # noqa: E712


def _stamp_publication(model: Type[Base], values: Dict[str, Any], current_published_at=None) -> None:
    """Blog posts entering 'published' without a date are stamped with now."""
    if model is not BlogPost:
        return
    if values.get("status") != ContentStatus.PUBLISHED.value:
        return
    if values.get("published_at") is None and current_published_at is None:
        values["published_at"] = datetime.now(timezone.utc).replace(tzinfo=None)


def create_content(db: Session, model: Type[Base], data: Dict[str, Any]):
    ensure_slug_available(db, model, data["slug"])
    validate_media_reference(db, data.get("featured_image_id"), "Featured image")

    values = dict(data)
    _stamp_publication(model, values)

    item = model(**values)
    with transaction(db):
        db.add(item)
        db.flush()
        if model is StaticPage:
            claim_exclusive_flag(db, StaticPage, "is_homepage", item.id, bool(item.is_homepage))
    db.refresh(item)

    logger.info(f"Created {model.__tablename__} {item.id} '{item.slug}'")
    return item


def update_content(db: Session, model: Type[Base], content_id: int, changes: Dict[str, Any]):
    """Apply only the supplied fields. Setting is_homepage demotes the old homepage."""
    item = get_content(db, model, content_id)
    if not item:
        raise NotFound(f"{LABELS[model]} with id {content_id} not found")

    if "slug" in changes and changes["slug"] != item.slug:
        ensure_slug_available(db, model, changes["slug"], exclude_id=content_id)
    if "featured_image_id" in changes:
        validate_media_reference(db, changes["featured_image_id"], "Featured image")

    values = dict(changes)
    if "status" in values:
        # An explicit published_at in the request replaces the stored one
        stored = None if "published_at" in values or model is not BlogPost else item.published_at
        _stamp_publication(model, values, stored)

    with transaction(db):
        if model is StaticPage and values.get("is_homepage") is True:
            claim_exclusive_flag(db, StaticPage, "is_homepage", item.id, True)
        for key, value in values.items():
            setattr(item, key, value)
    db.refresh(item)

    logger.info(f"Updated {model.__tablename__} {content_id}: {sorted(changes)}")
    return item
