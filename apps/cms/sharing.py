"""
Presentation helpers for social sharing links and search/social previews.

These only read; they format what the association index returns.
"""
import os
from typing import Optional, Union
from urllib.parse import quote

from sqlalchemy.orm import Session

from apps.cms.associations import find_by_owner, get_owner, resolve_content_type, resolve_owner_title
from apps.cms.exceptions import OwnerNotFound
from apps.cms.models import ContentType, Media, SeoMetadata, SocialSharingSettings

SITE_BASE_URL = os.getenv("SITE_BASE_URL", "https://example.com")

# (title, description) length limits per preview
GOOGLE_LIMITS = (60, 160)
FACEBOOK_LIMITS = (65, 125)
TWITTER_LIMITS = (70, 200)

UNTITLED = "Untitled"
NO_DESCRIPTION = "No description available"


def _encode(value: str) -> str:
    # Everything except unreserved marks is percent-encoded, including '/' and ':'
    return quote(value, safe="-_.!~*'()")


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def generate_sharing_urls(
    db: Session,
    content_type: Union[ContentType, str],
    content_id: int,
    base_url: str,
) -> dict:
    """Build share links for a content item, using its custom message if set."""
    tag = resolve_content_type(content_type)
    title = resolve_owner_title(db, tag, content_id)
    if title is None:
        raise OwnerNotFound(f"Content not found: {tag.value}/{content_id}")

    settings = find_by_owner(db, SocialSharingSettings, tag, content_id)
    message = (settings.custom_message if settings else None) or title

    content_url = f"{base_url.rstrip('/')}/{tag.value}/{content_id}"
    encoded_url = _encode(content_url)

    return {
        "twitter": f"https://twitter.com/intent/tweet?url={encoded_url}&text={_encode(message)}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        "linkedin": (
            f"https://www.linkedin.com/sharing/share-offsite/"
            f"?url={encoded_url}&title={_encode(title)}"
        ),
        "copy_link": content_url,
    }


def generate_seo_preview(
    db: Session,
    content_type: Union[ContentType, str],
    content_id: int,
) -> dict:
    """
    Preview how a content item appears on Google, Facebook and Twitter.

    Each platform falls back from its own fields to the more general SEO
    fields and finally to the content item itself.
    """
    tag = resolve_content_type(content_type)
    owner = get_owner(db, tag, content_id)
    if owner is None:
        raise OwnerNotFound(f"Content not found: {tag.value}/{content_id}")

    seo = find_by_owner(db, SeoMetadata, tag, content_id)

    def seo_field(name: str) -> Optional[str]:
        return getattr(seo, name) if seo is not None else None

    content_title = owner.title
    content_description = _first(getattr(owner, "description", None), getattr(owner, "excerpt", None))

    image_url = None
    if seo_field("social_image_id"):
        media = db.query(Media).filter(Media.id == seo.social_image_id).first()
        if media:
            image_url = f"/uploads/{media.filename}"

    google_title = _first(seo_field("meta_title"), content_title) or UNTITLED
    google_description = _first(seo_field("meta_description"), content_description) or NO_DESCRIPTION
    google_url = seo_field("canonical_url") or (
        f"{SITE_BASE_URL.rstrip('/')}/{tag.value.replace('_', '-')}s/{owner.slug or content_id}"
    )

    facebook_title = _first(seo_field("og_title"), seo_field("meta_title"), content_title) or UNTITLED
    facebook_description = _first(
        seo_field("og_description"), seo_field("meta_description"), content_description
    ) or NO_DESCRIPTION

    twitter_title = _first(
        seo_field("twitter_title"), seo_field("og_title"), seo_field("meta_title"), content_title
    ) or UNTITLED
    twitter_description = _first(
        seo_field("twitter_description"),
        seo_field("og_description"),
        seo_field("meta_description"),
        content_description,
    ) or NO_DESCRIPTION

    return {
        "google_preview": {
            "title": truncate_text(google_title, GOOGLE_LIMITS[0]),
            "url": google_url,
            "description": truncate_text(google_description, GOOGLE_LIMITS[1]),
        },
        "facebook_preview": {
            "title": truncate_text(facebook_title, FACEBOOK_LIMITS[0]),
            "description": truncate_text(facebook_description, FACEBOOK_LIMITS[1]),
            "image": image_url,
        },
        "twitter_preview": {
            "title": truncate_text(twitter_title, TWITTER_LIMITS[0]),
            "description": truncate_text(twitter_description, TWITTER_LIMITS[1]),
            "image": image_url,
        },
    }
