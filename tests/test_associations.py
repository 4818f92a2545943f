"""
SEO metadata and sharing settings keyed by (content_type, content_id), and
deleting content items together with them.
"""
import pytest

from apps.cms import associations, content, lifecycle, media
from apps.cms.exceptions import (
    AssociationExists,
    InvalidContentType,
    NotFound,
    OwnerNotFound,
    ReferenceNotFound,
)
from apps.cms.models import BlogPost, Project, SeoMetadata, SocialSharingSettings, StaticPage


def _post(db, slug="hello"):
    return content.create_content(db, BlogPost, {"title": "Hello", "slug": slug, "content": "Body"})


def _project(db, slug="site"):
    return content.create_content(
        db, Project, {"title": "Site", "slug": slug, "description": "Personal site"}
    )


def _attach(db, content_type, content_id):
    seo = associations.create_association(
        db, SeoMetadata, {"content_type": content_type, "content_id": content_id, "meta_title": "T"}
    )
    sharing = associations.create_association(
        db, SocialSharingSettings, {"content_type": content_type, "content_id": content_id}
    )
    return seo, sharing


def _count(db, model, content_type, content_id):
    return (
        db.query(model)
        .filter(model.content_type == content_type, model.content_id == content_id)
        .count()
    )


def test_owner_dispatch():
    assert associations.owner_model("blog_post") is BlogPost
    assert associations.owner_model("static_page") is StaticPage
    assert associations.owner_model("project") is Project


def test_unknown_tag_is_rejected(db):
    with pytest.raises(InvalidContentType):
        associations.assert_owner_exists(db, "gallery", 1)


def test_create_requires_existing_owner(db):
    with pytest.raises(OwnerNotFound):
        associations.create_association(
            db, SeoMetadata, {"content_type": "blog_post", "content_id": 1}
        )
    assert db.query(SeoMetadata).count() == 0


def test_owner_is_checked_in_the_tagged_table(db):
    project = _project(db)
    with pytest.raises(OwnerNotFound):
        associations.create_association(
            db, SocialSharingSettings, {"content_type": "static_page", "content_id": project.id}
        )


def test_second_record_of_same_kind_is_rejected(db):
    post = _post(db)
    _attach(db, "blog_post", post.id)

    with pytest.raises(AssociationExists):
        associations.create_association(
            db, SeoMetadata, {"content_type": "blog_post", "content_id": post.id}
        )


def test_social_image_must_exist(db):
    post = _post(db)
    with pytest.raises(ReferenceNotFound):
        associations.create_association(
            db,
            SeoMetadata,
            {"content_type": "blog_post", "content_id": post.id, "social_image_id": 5},
        )


def test_find_by_owner_returns_none_when_absent(db):
    post = _post(db)
    assert associations.find_by_owner(db, SeoMetadata, "blog_post", post.id) is None

    seo, _ = _attach(db, "blog_post", post.id)
    assert associations.find_by_owner(db, SeoMetadata, "blog_post", post.id).id == seo.id


def test_resolve_owner_title(db):
    post = _post(db)
    assert associations.resolve_owner_title(db, "blog_post", post.id) == "Hello"
    assert associations.resolve_owner_title(db, "blog_post", post.id + 1) is None


def test_update_and_delete_by_id(db):
    post = _post(db)
    seo, sharing = _attach(db, "blog_post", post.id)

    updated = associations.update_association(db, SeoMetadata, seo.id, {"meta_title": None})
    assert updated.meta_title is None

    associations.delete_association(db, SocialSharingSettings, sharing.id)
    assert associations.find_by_owner(db, SocialSharingSettings, "blog_post", post.id) is None

    with pytest.raises(NotFound):
        associations.delete_association(db, SocialSharingSettings, sharing.id)


def test_cascade_delete_is_idempotent(db):
    post = _post(db)
    removed = associations.cascade_delete(db, "blog_post", post.id)
    db.commit()
    assert removed == {"seo_metadata": 0, "social_sharing_settings": 0}


def test_delete_post_removes_only_its_associations(db):
    post = _post(db)
    other = _post(db, slug="other")
    project = _project(db)
    _attach(db, "blog_post", post.id)
    _attach(db, "blog_post", other.id)
    _attach(db, "project", project.id)

    removed = lifecycle.delete_content_item(db, "blog_post", post.id)

    assert removed == {"seo_metadata": 1, "social_sharing_settings": 1}
    assert content.get_content(db, BlogPost, post.id) is None
    for model in (SeoMetadata, SocialSharingSettings):
        assert _count(db, model, "blog_post", post.id) == 0
        assert _count(db, model, "blog_post", other.id) == 1
        assert _count(db, model, "project", project.id) == 1


def test_delete_project_keeps_same_id_of_other_type(db):
    project = _project(db)
    page = content.create_content(
        db, StaticPage, {"title": "About", "slug": "about", "content": "..."}
    )
    assert project.id == page.id
    _attach(db, "project", project.id)
    _attach(db, "static_page", page.id)

    lifecycle.delete_content_item(db, "project", project.id)

    assert _count(db, SeoMetadata, "static_page", page.id) == 1
    assert _count(db, SocialSharingSettings, "static_page", page.id) == 1


def test_delete_missing_item(db):
    with pytest.raises(NotFound):
        lifecycle.delete_content_item(db, "static_page", 3)


def test_failed_item_delete_restores_associations(db, monkeypatch):
    post = _post(db)
    _attach(db, "blog_post", post.id)

    def fail(instance):
        raise RuntimeError("constraint violation")

    monkeypatch.setattr(db, "delete", fail)
    with pytest.raises(RuntimeError):
        lifecycle.delete_content_item(db, "blog_post", post.id)
    monkeypatch.undo()

    assert content.get_content(db, BlogPost, post.id) is not None
    assert _count(db, SeoMetadata, "blog_post", post.id) == 1
    assert _count(db, SocialSharingSettings, "blog_post", post.id) == 1


def test_deleted_owner_can_not_get_new_records(db):
    post = _post(db)
    lifecycle.delete_content_item(db, "blog_post", post.id)

    with pytest.raises(OwnerNotFound):
        associations.create_association(
            db, SeoMetadata, {"content_type": "blog_post", "content_id": post.id}
        )


def test_media_delete_clears_social_image(db):
    post = _post(db)
    image = media.create_media(
        db,
        {"filename": "a.png", "original_name": "a.png", "mime_type": "image/png", "size": 10},
    )
    seo = associations.create_association(
        db,
        SeoMetadata,
        {"content_type": "blog_post", "content_id": post.id, "social_image_id": image.id},
    )

    media.delete_media(db, image.id)

    db.refresh(seo)
    assert seo.social_image_id is None
