"""
Media library.

Media rows hold file metadata only; storing and resizing the binaries is
handled outside this service. A media row can sit in a folder, appear in
galleries, and be referenced as a featured or social image.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.cms.exceptions import NotFound, ReferenceNotFound
from apps.cms.hierarchy import validate_parent
from apps.cms.models import BlogPost, GalleryImage, Media, Project, SeoMetadata, StaticPage

logger = logging.getLogger(__name__)

# Content tables with a featured_image_id column pointing at media
FEATURED_IMAGE_MODELS = (BlogPost, StaticPage, Project)


def validate_media_reference(db: Session, media_id: Optional[int], label: str = "Media") -> None:
    """Fail with ReferenceNotFound when a non-null media id names no row."""
    if media_id is None:
        return
    exists = db.query(Media.id).filter(Media.id == media_id).first()
    if not exists:
        raise ReferenceNotFound(f"{label} with id {media_id} not found")


def get_media(db: Session, media_id: int) -> Optional[Media]:
    return db.query(Media).filter(Media.id == media_id).first()


def _require_media(db: Session, media_id: int) -> Media:
    media = get_media(db, media_id)
    if not media:
        raise NotFound(f"Media with id {media_id} not found")
    return media


def list_media(db: Session) -> List[Media]:
    return db.query(Media).order_by(Media.created_at.desc(), Media.id.desc()).all()


def list_media_in_folder(db: Session, folder_id: Optional[int]) -> List[Media]:
    """Media directly inside folder_id; None lists media at the root."""
    query = db.query(Media)
    if folder_id is None:
        query = query.filter(Media.folder_id.is_(None))
    else:
        query = query.filter(Media.folder_id == folder_id)
    return query.order_by(Media.created_at.desc(), Media.id.desc()).all()


def search_media(db: Session, term: str) -> List[Media]:
    """Case-insensitive substring match on names, alt text and description."""
    pattern = f"%{term}%"
    return (
        db.query(Media)
        .filter(
            or_(
                Media.filename.ilike(pattern),
                Media.original_name.ilike(pattern),
                Media.alt_text.ilike(pattern),
                Media.description.ilike(pattern),
            )
        )
        .order_by(Media.created_at.desc(), Media.id.desc())
        .all()
    )


def create_media(db: Session, data: Dict[str, Any]) -> Media:
    validate_parent(db, data.get("folder_id"))

    media = Media(**data)
    with transaction(db):
        db.add(media)
    db.refresh(media)

    logger.info(f"Registered media {media.id} '{media.filename}' in folder {media.folder_id}")
    return media


def update_media(db: Session, media_id: int, changes: Dict[str, Any]) -> Media:
    media = _require_media(db, media_id)
    if "folder_id" in changes:
        validate_parent(db, changes["folder_id"])

    with transaction(db):
        for key, value in changes.items():
            setattr(media, key, value)
    db.refresh(media)

    logger.info(f"Updated media {media_id}: {sorted(changes)}")
    return media


def move_media(db: Session, media_ids: List[int], folder_id: Optional[int]) -> int:
    """Move several media rows into folder_id (None = root). All or nothing."""
    validate_parent(db, folder_id)

    found = {row.id for row in db.query(Media.id).filter(Media.id.in_(media_ids)).all()}
    for media_id in media_ids:
        if media_id not in found:
            raise NotFound(f"Media with id {media_id} not found")

    with transaction(db):
        moved = (
            db.query(Media)
            .filter(Media.id.in_(media_ids))
            .update({Media.folder_id: folder_id}, synchronize_session="fetch")
        )

    logger.info(f"Moved {moved} media item(s) to folder {folder_id}")
    return moved


def delete_media(db: Session, media_id: int) -> None:
    """
    Delete a media row and every reference to it.

    Gallery entries showing it are removed; featured and social image
    references are cleared. Everything commits together.
    """
    media = _require_media(db, media_id)

    try:
        with transaction(db):
            removed = (
                db.query(GalleryImage)
                .filter(GalleryImage.media_id == media_id)
                .delete(synchronize_session="fetch")
            )
            for model in FEATURED_IMAGE_MODELS:
                db.query(model).filter(model.featured_image_id == media_id).update(
                    {model.featured_image_id: None}, synchronize_session="fetch"
                )
            db.query(SeoMetadata).filter(SeoMetadata.social_image_id == media_id).update(
                {SeoMetadata.social_image_id: None}, synchronize_session="fetch"
            )
            db.delete(media)
    except Exception as e:
        logger.error(f"Deleting media {media_id} failed: {e}", exc_info=True)
        raise

    logger.info(f"Deleted media {media_id}; removed from {removed} gallery slot(s)")
