import pytest

from apps.cms import associations, content, media, sharing
from apps.cms.exceptions import OwnerNotFound
from apps.cms.models import BlogPost, Project, SeoMetadata, SocialSharingSettings


def _post(db, **extra):
    data = {"title": "Hello World", "slug": "hello-world", "content": "Body", "excerpt": "A first post"}
    data.update(extra)
    return content.create_content(db, BlogPost, data)


def test_truncate_text():
    assert sharing.truncate_text("short", 10) == "short"
    assert sharing.truncate_text("a" * 12, 10) == "aaaaaaa..."
    assert len(sharing.truncate_text("b" * 500, 160)) == 160


def test_sharing_urls_use_title_and_encode(db):
    post = _post(db)

    urls = sharing.generate_sharing_urls(db, "blog_post", post.id, "https://site.dev/")

    assert urls["copy_link"] == f"https://site.dev/blog_post/{post.id}"
    encoded = f"https%3A%2F%2Fsite.dev%2Fblog_post%2F{post.id}"
    assert urls["twitter"] == f"https://twitter.com/intent/tweet?url={encoded}&text=Hello%20World"
    assert urls["facebook"] == f"https://www.facebook.com/sharer/sharer.php?u={encoded}"
    assert urls["linkedin"].endswith(f"?url={encoded}&title=Hello%20World")


def test_sharing_urls_prefer_custom_message(db):
    post = _post(db)
    associations.create_association(
        db,
        SocialSharingSettings,
        {"content_type": "blog_post", "content_id": post.id, "custom_message": "Read this & share!"},
    )

    urls = sharing.generate_sharing_urls(db, "blog_post", post.id, "https://site.dev")

    assert urls["twitter"].endswith("&text=Read%20this%20%26%20share!")
    assert urls["linkedin"].endswith("&title=Hello%20World")


def test_sharing_urls_for_missing_owner(db):
    with pytest.raises(OwnerNotFound):
        sharing.generate_sharing_urls(db, "project", 1, "https://site.dev")


def test_preview_falls_back_to_content(db):
    post = _post(db)

    preview = sharing.generate_seo_preview(db, "blog_post", post.id)

    assert preview["google_preview"]["title"] == "Hello World"
    assert preview["google_preview"]["description"] == "A first post"
    assert preview["google_preview"]["url"].endswith("/blog-posts/hello-world")
    assert preview["facebook_preview"]["image"] is None
    assert preview["twitter_preview"]["title"] == "Hello World"


def test_preview_without_any_description(db):
    post = _post(db, excerpt=None)
    preview = sharing.generate_seo_preview(db, "blog_post", post.id)
    assert preview["twitter_preview"]["description"] == sharing.NO_DESCRIPTION


def test_preview_fallback_chain(db):
    project = content.create_content(
        db, Project, {"title": "Site", "slug": "site", "description": "Portfolio"}
    )
    image = media.create_media(
        db, {"filename": "og.png", "original_name": "og.png", "mime_type": "image/png", "size": 5}
    )
    associations.create_association(
        db,
        SeoMetadata,
        {
            "content_type": "project",
            "content_id": project.id,
            "meta_title": "Meta " + "x" * 80,
            "og_title": "Open Graph",
            "social_image_id": image.id,
            "canonical_url": "https://site.dev/work/site",
        },
    )

    preview = sharing.generate_seo_preview(db, "project", project.id)

    google = preview["google_preview"]
    assert len(google["title"]) == 60
    assert google["title"].endswith("...")
    assert google["url"] == "https://site.dev/work/site"
    assert google["description"] == "Portfolio"
    assert preview["facebook_preview"]["title"] == "Open Graph"
    assert preview["twitter_preview"]["title"] == "Open Graph"
    assert preview["twitter_preview"]["image"] == "/uploads/og.png"


def test_preview_for_missing_owner(db):
    with pytest.raises(OwnerNotFound):
        sharing.generate_seo_preview(db, "static_page", 9)
