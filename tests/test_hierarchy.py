"""Media folder tree: parent validation, cycle checks and delete with re-homing."""
import pytest

from apps.cms import hierarchy, media
from apps.cms.exceptions import InvalidHierarchy, NonEmptyHierarchy, NotFound, ReferenceNotFound
from apps.cms.models import Media, MediaFolder


def _media(db, name, folder_id=None):
    return media.create_media(
        db,
        {
            "filename": f"{name}.jpg",
            "original_name": f"{name}.jpg",
            "mime_type": "image/jpeg",
            "size": 1024,
            "folder_id": folder_id,
        },
    )


def test_create_folder_under_missing_parent_inserts_nothing(db):
    with pytest.raises(ReferenceNotFound):
        hierarchy.create_folder(db, "Photos", parent_id=999)
    assert db.query(MediaFolder).count() == 0


def test_create_nested_folders(db):
    root = hierarchy.create_folder(db, "Photos")
    child = hierarchy.create_folder(db, "2024", parent_id=root.id)

    assert child.parent_id == root.id
    assert [f.id for f in hierarchy.list_child_folders(db, root.id)] == [child.id]
    assert [f.id for f in hierarchy.list_child_folders(db, None)] == [root.id]


def test_self_parent_is_rejected_and_row_unchanged(db):
    folder = hierarchy.create_folder(db, "Photos")

    with pytest.raises(InvalidHierarchy):
        hierarchy.update_folder(db, folder.id, {"parent_id": folder.id})

    db.refresh(folder)
    assert folder.parent_id is None


def test_move_under_descendant_is_rejected(db):
    a = hierarchy.create_folder(db, "A")
    b = hierarchy.create_folder(db, "B", parent_id=a.id)
    c = hierarchy.create_folder(db, "C", parent_id=b.id)

    with pytest.raises(InvalidHierarchy):
        hierarchy.update_folder(db, a.id, {"parent_id": b.id})
    with pytest.raises(InvalidHierarchy):
        hierarchy.update_folder(db, a.id, {"parent_id": c.id})

    db.refresh(a)
    assert a.parent_id is None


def test_move_to_missing_parent_is_rejected(db):
    folder = hierarchy.create_folder(db, "Photos")
    with pytest.raises(ReferenceNotFound):
        hierarchy.update_folder(db, folder.id, {"parent_id": 42})


def test_update_missing_folder(db):
    with pytest.raises(NotFound):
        hierarchy.update_folder(db, 1, {"name": "Nope"})


def test_rename_only_keeps_parent(db):
    parent = hierarchy.create_folder(db, "Photos")
    folder = hierarchy.create_folder(db, "Old", parent_id=parent.id)

    updated = hierarchy.update_folder(db, folder.id, {"name": "New"})

    assert updated.name == "New"
    assert updated.parent_id == parent.id


def test_move_to_root_with_explicit_null(db):
    parent = hierarchy.create_folder(db, "Photos")
    folder = hierarchy.create_folder(db, "2024", parent_id=parent.id)

    updated = hierarchy.update_folder(db, folder.id, {"parent_id": None})
    assert updated.parent_id is None


def test_sibling_move_is_allowed(db):
    a = hierarchy.create_folder(db, "A")
    b = hierarchy.create_folder(db, "B")

    updated = hierarchy.update_folder(db, b.id, {"parent_id": a.id})
    assert updated.parent_id == a.id


def test_delete_moves_media_to_parent(db):
    parent = hierarchy.create_folder(db, "Photos")
    folder = hierarchy.create_folder(db, "2024", parent_id=parent.id)
    first = _media(db, "one", folder.id)
    second = _media(db, "two", folder.id)
    elsewhere = _media(db, "three")

    moved = hierarchy.delete_folder(db, folder.id)

    assert moved == 2
    assert hierarchy.get_folder(db, folder.id) is None
    for item in (first, second):
        db.refresh(item)
        assert item.folder_id == parent.id
    db.refresh(elsewhere)
    assert elsewhere.folder_id is None


def test_delete_root_folder_moves_media_to_root(db):
    folder = hierarchy.create_folder(db, "Photos")
    item = _media(db, "one", folder.id)

    hierarchy.delete_folder(db, folder.id)

    db.refresh(item)
    assert item.folder_id is None


def test_delete_with_children_is_blocked(db):
    parent = hierarchy.create_folder(db, "Photos")
    hierarchy.create_folder(db, "2024", parent_id=parent.id)
    item = _media(db, "one", parent.id)

    with pytest.raises(NonEmptyHierarchy):
        hierarchy.delete_folder(db, parent.id)

    assert hierarchy.get_folder(db, parent.id) is not None
    db.refresh(item)
    assert item.folder_id == parent.id


def test_delete_missing_folder(db):
    with pytest.raises(NotFound):
        hierarchy.delete_folder(db, 7)


def test_failed_delete_rolls_back_reassignment(db, monkeypatch):
    parent = hierarchy.create_folder(db, "Photos")
    folder = hierarchy.create_folder(db, "2024", parent_id=parent.id)
    item = _media(db, "one", folder.id)

    def fail(instance):
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(db, "delete", fail)
    with pytest.raises(RuntimeError):
        hierarchy.delete_folder(db, folder.id)
    monkeypatch.undo()

    assert hierarchy.get_folder(db, folder.id) is not None
    assert db.query(Media).filter(Media.id == item.id).one().folder_id == folder.id
