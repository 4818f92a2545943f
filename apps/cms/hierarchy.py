"""
Media folder tree.

Folders reference their parent by id. A move is rejected when it would make
a folder its own parent or its own ancestor. Deleting a folder is only
allowed once it has no child folders; its media move up to the deleted
folder's parent (or the root).
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.cms.exceptions import InvalidHierarchy, NonEmptyHierarchy, NotFound, ReferenceNotFound
from apps.cms.models import Media, MediaFolder

logger = logging.getLogger(__name__)


def get_folder(db: Session, folder_id: int) -> Optional[MediaFolder]:
    return db.query(MediaFolder).filter(MediaFolder.id == folder_id).first()


def list_folders(db: Session) -> List[MediaFolder]:
    """All folders, root folders first, then grouped by parent and sorted by name."""
    return (
        db.query(MediaFolder)
        .order_by(MediaFolder.parent_id.is_not(None), MediaFolder.parent_id, MediaFolder.name)
        .all()
    )


def list_child_folders(db: Session, folder_id: Optional[int]) -> List[MediaFolder]:
    query = db.query(MediaFolder)
    if folder_id is None:
        query = query.filter(MediaFolder.parent_id.is_(None))
    else:
        query = query.filter(MediaFolder.parent_id == folder_id)
    return query.order_by(MediaFolder.name).all()


def _require_folder(db: Session, folder_id: int) -> MediaFolder:
    folder = get_folder(db, folder_id)
    if not folder:
        raise NotFound(f"Media folder with id {folder_id} not found")
    return folder


def validate_parent(db: Session, parent_id: Optional[int]) -> None:
    """Fail with ReferenceNotFound when a non-null parent_id names no folder."""
    if parent_id is None:
        return
    exists = db.query(MediaFolder.id).filter(MediaFolder.id == parent_id).first()
    if not exists:
        raise ReferenceNotFound(f"Media folder with id {parent_id} not found")


def validate_no_self_parent(folder_id: int, parent_id: Optional[int]) -> None:
    if parent_id is not None and parent_id == folder_id:
        raise InvalidHierarchy("A folder cannot be its own parent")


def validate_no_cycle(db: Session, folder_id: int, parent_id: Optional[int]) -> None:
    """
    Fail with InvalidHierarchy if folder_id is an ancestor of parent_id.

    Walks parent links upward from parent_id. The visited set stops the walk
    on a chain that is already cyclic instead of looping forever.
    """
    visited = set()
    current = parent_id
    while current is not None and current not in visited:
        if current == folder_id:
            raise InvalidHierarchy(
                f"Cannot move folder {folder_id} into its own descendant {parent_id}"
            )
        visited.add(current)
        row = db.query(MediaFolder.parent_id).filter(MediaFolder.id == current).first()
        current = row.parent_id if row else None


def create_folder(db: Session, name: str, parent_id: Optional[int] = None) -> MediaFolder:
    validate_parent(db, parent_id)

    folder = MediaFolder(name=name, parent_id=parent_id)
    with transaction(db):
        db.add(folder)
    db.refresh(folder)

    logger.info(f"Created media folder {folder.id} '{name}' under parent {parent_id}")
    return folder


def update_folder(db: Session, folder_id: int, changes: Dict[str, Any]) -> MediaFolder:
    """
    Rename and/or move a folder.

    `changes` holds only the supplied fields: 'name' and/or 'parent_id'.
    A supplied parent_id of None moves the folder to the root.
    """
    folder = _require_folder(db, folder_id)

    if "parent_id" in changes:
        new_parent_id = changes["parent_id"]
        validate_no_self_parent(folder_id, new_parent_id)
        validate_parent(db, new_parent_id)
        validate_no_cycle(db, folder_id, new_parent_id)

    with transaction(db):
        for key, value in changes.items():
            setattr(folder, key, value)
    db.refresh(folder)

    logger.info(f"Updated media folder {folder_id}: {sorted(changes)}")
    return folder


def delete_folder(db: Session, folder_id: int) -> int:
    """
    Delete an empty-of-subfolders folder and re-home its media.

    Returns the number of media rows moved to the folder's parent.
    Both the move and the delete commit together or not at all.
    """
    folder = _require_folder(db, folder_id)

    child_count = db.query(MediaFolder).filter(MediaFolder.parent_id == folder_id).count()
    if child_count:
        raise NonEmptyHierarchy(
            f"Media folder {folder_id} still contains {child_count} folder(s)"
        )

    target_id = folder.parent_id
    try:
        with transaction(db):
            moved = (
                db.query(Media)
                .filter(Media.folder_id == folder_id)
                .update({Media.folder_id: target_id}, synchronize_session="fetch")
            )
            db.delete(folder)
    except Exception as e:
        logger.error(f"Deleting media folder {folder_id} failed: {e}", exc_info=True)
        raise

    logger.info(f"Deleted media folder {folder_id}; moved {moved} media item(s) to folder {target_id}")
    return moved
