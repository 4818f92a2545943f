"""
Image galleries: an ordered list of media with optional captions.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.cms.content import ensure_slug_available
from apps.cms.exceptions import NotFound
from apps.cms.media import validate_media_reference
from apps.cms.models import GalleryImage, ImageGallery

logger = logging.getLogger(__name__)


def list_galleries(db: Session) -> List[ImageGallery]:
    return db.query(ImageGallery).order_by(ImageGallery.created_at.desc(), ImageGallery.id.desc()).all()


def get_gallery(db: Session, gallery_id: int) -> Optional[ImageGallery]:
    return db.query(ImageGallery).filter(ImageGallery.id == gallery_id).first()


def get_gallery_by_slug(db: Session, slug: str) -> Optional[ImageGallery]:
    return db.query(ImageGallery).filter(ImageGallery.slug == slug).first()


def _require_gallery(db: Session, gallery_id: int) -> ImageGallery:
    gallery = get_gallery(db, gallery_id)
    if not gallery:
        raise NotFound(f"Gallery with id {gallery_id} not found")
    return gallery


def _require_gallery_image(db: Session, gallery_image_id: int) -> GalleryImage:
    image = db.query(GalleryImage).filter(GalleryImage.id == gallery_image_id).first()
    if not image:
        raise NotFound(f"Gallery image with id {gallery_image_id} not found")
    return image


def create_gallery(db: Session, data: Dict[str, Any]) -> ImageGallery:
    ensure_slug_available(db, ImageGallery, data["slug"])

    gallery = ImageGallery(**data)
    with transaction(db):
        db.add(gallery)
    db.refresh(gallery)

    logger.info(f"Created gallery {gallery.id} '{gallery.slug}'")
    return gallery


def update_gallery(db: Session, gallery_id: int, changes: Dict[str, Any]) -> ImageGallery:
    gallery = _require_gallery(db, gallery_id)
    if "slug" in changes and changes["slug"] != gallery.slug:
        ensure_slug_available(db, ImageGallery, changes["slug"], exclude_id=gallery_id)

    with transaction(db):
        for key, value in changes.items():
            setattr(gallery, key, value)
    db.refresh(gallery)
    return gallery


def delete_gallery(db: Session, gallery_id: int) -> None:
    """Delete a gallery and its image slots. The media rows stay."""
    gallery = _require_gallery(db, gallery_id)
    with transaction(db):
        db.delete(gallery)
    logger.info(f"Deleted gallery {gallery_id}")


def add_image(db: Session, gallery_id: int, data: Dict[str, Any]) -> GalleryImage:
    _require_gallery(db, gallery_id)
    validate_media_reference(db, data["media_id"])

    image = GalleryImage(gallery_id=gallery_id, **data)
    with transaction(db):
        db.add(image)
    db.refresh(image)

    logger.info(f"Added media {image.media_id} to gallery {gallery_id} at {image.sort_order}")
    return image


def remove_image(db: Session, gallery_image_id: int) -> None:
    """Remove an image slot. The media row itself is kept."""
    image = _require_gallery_image(db, gallery_image_id)
    with transaction(db):
        db.delete(image)


def update_caption(db: Session, gallery_image_id: int, caption: Optional[str]) -> GalleryImage:
    image = _require_gallery_image(db, gallery_image_id)
    with transaction(db):
        image.caption = caption
    db.refresh(image)
    return image


def reorder_images(db: Session, gallery_id: int, orders: List[Dict[str, int]]) -> None:
    """Set sort_order on images of one gallery. Each id must belong to it."""
    _require_gallery(db, gallery_id)

    ids = [item["id"] for item in orders]
    owned = {
        row.id
        for row in db.query(GalleryImage.id)
        .filter(GalleryImage.gallery_id == gallery_id, GalleryImage.id.in_(ids))
        .all()
    }
    for image_id in ids:
        if image_id not in owned:
            raise NotFound(f"Gallery image with id {image_id} not found in gallery {gallery_id}")

    with transaction(db):
        for item in orders:
            db.query(GalleryImage).filter(GalleryImage.id == item["id"]).update(
                {GalleryImage.sort_order: item["sort_order"]}, synchronize_session="fetch"
            )
