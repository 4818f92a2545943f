"""
Pydantic schemas for the content API.

Update schemas make every field optional. Services apply
model_dump(exclude_unset=True), so an omitted field is left untouched while
an explicit null clears a nullable column.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from apps.cms.models import ContentStatus, ContentType, TimelineType

SLUG_PATTERN = r"^[a-z0-9-]+$"


def _not_null(value):
    if value is None:
        raise ValueError("field may be omitted but not set to null")
    return value


class InputModel(BaseModel):
    """Base for request bodies. Enums are dumped as their plain values."""

    class Config:
        use_enum_values = True


class OutputModel(BaseModel):
    class Config:
        from_attributes = True


# ──────────────────────────────────────────────────────────────────────────────
# Media library
# ──────────────────────────────────────────────────────────────────────────────

class MediaFolderCreate(InputModel):
    name: str = Field(..., min_length=1)
    parent_id: Optional[int] = None


class MediaFolderUpdate(InputModel):
    """Rename and/or move a folder. parent_id=null moves it to the root."""
    name: Optional[str] = Field(None, min_length=1)
    parent_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class MediaFolderResponse(OutputModel):
    id: int
    name: str
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None


class MediaCreate(InputModel):
    filename: str = Field(..., min_length=1)
    original_name: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1, max_length=100)
    size: int = Field(..., ge=0)
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    alt_text: Optional[str] = None
    description: Optional[str] = None
    folder_id: Optional[int] = None


class MediaUpdate(InputModel):
    alt_text: Optional[str] = None
    description: Optional[str] = None
    folder_id: Optional[int] = None


class MediaMove(InputModel):
    media_ids: list[int] = Field(..., min_length=1)
    folder_id: Optional[int] = None


class MediaResponse(OutputModel):
    id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    alt_text: Optional[str] = None
    description: Optional[str] = None
    folder_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ──────────────────────────────────────────────────────────────────────────────
# Content items
# ──────────────────────────────────────────────────────────────────────────────

class BlogPostCreate(InputModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    content: str
    excerpt: Optional[str] = None
    featured_image_id: Optional[int] = None
    status: ContentStatus = Field(ContentStatus.DRAFT, validate_default=True)
    published_at: Optional[datetime] = None


class BlogPostUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image_id: Optional[int] = None
    status: Optional[ContentStatus] = None
    published_at: Optional[datetime] = None

    @field_validator("title", "slug", "content", "status")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class BlogPostResponse(OutputModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image_id: Optional[int] = None
    status: ContentStatus
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StaticPageCreate(InputModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    content: str
    featured_image_id: Optional[int] = None
    is_homepage: bool = False
    status: ContentStatus = Field(ContentStatus.DRAFT, validate_default=True)


class StaticPageUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    content: Optional[str] = None
    featured_image_id: Optional[int] = None
    is_homepage: Optional[bool] = None
    status: Optional[ContentStatus] = None

    @field_validator(
        "title", "slug", "content", "is_homepage", "status"
    )
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class StaticPageResponse(OutputModel):
    id: int
    title: str
    slug: str
    content: str
    featured_image_id: Optional[int] = None
    is_homepage: bool
    status: ContentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectCreate(InputModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str
    content: Optional[str] = None
    featured_image_id: Optional[int] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    technologies: list[str] = Field(default_factory=list)
    status: ContentStatus = Field(ContentStatus.DRAFT, validate_default=True)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_order: int = 0


class ProjectUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    content: Optional[str] = None
    featured_image_id: Optional[int] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    technologies: Optional[list[str]] = None
    status: Optional[ContentStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_order: Optional[int] = None

    @field_validator(
        "title", "slug", "description", "technologies", "status", "sort_order"
    )
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class ProjectResponse(OutputModel):
    id: int
    title: str
    slug: str
    description: str
    content: Optional[str] = None
    featured_image_id: Optional[int] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    technologies: list[str] = Field(default_factory=list)
    status: ContentStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ──────────────────────────────────────────────────────────────────────────────
# Galleries
# ──────────────────────────────────────────────────────────────────────────────

class ImageGalleryCreate(InputModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    status: ContentStatus = Field(ContentStatus.DRAFT, validate_default=True)


class ImageGalleryUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    status: Optional[ContentStatus] = None

    @field_validator("title", "slug", "status")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class GalleryImageCreate(InputModel):
    media_id: int
    caption: Optional[str] = None
    sort_order: int = 0


class GalleryImageCaption(InputModel):
    caption: Optional[str] = None


class GalleryImageResponse(OutputModel):
    id: int
    gallery_id: int
    media_id: int
    caption: Optional[str] = None
    sort_order: int
    created_at: Optional[datetime] = None


class ImageGalleryResponse(OutputModel):
    id: int
    title: str
    description: Optional[str] = None
    slug: str
    status: ContentStatus
    images: list[GalleryImageResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SortOrderItem(InputModel):
    id: int
    sort_order: int


# ──────────────────────────────────────────────────────────────────────────────
# Timeline
# ──────────────────────────────────────────────────────────────────────────────

class TimelineEntryCreate(InputModel):
    title: str = Field(..., min_length=1)
    organization: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    is_current: bool = False
    entry_type: TimelineType
    location: Optional[str] = None
    sort_order: int = 0


class TimelineEntryUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    organization: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: Optional[bool] = None
    entry_type: Optional[TimelineType] = None
    location: Optional[str] = None
    sort_order: Optional[int] = None

    @field_validator(
        "title", "organization", "start_date", "is_current", "entry_type", "sort_order"
    )
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class TimelineEntryResponse(OutputModel):
    id: int
    title: str
    organization: str
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    is_current: bool
    entry_type: TimelineType
    location: Optional[str] = None
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ──────────────────────────────────────────────────────────────────────────────
# SEO metadata and social sharing
# ──────────────────────────────────────────────────────────────────────────────

class SeoMetadataCreate(InputModel):
    content_type: ContentType
    content_id: int
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    social_image_id: Optional[int] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None


class SeoMetadataUpdate(InputModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    social_image_id: Optional[int] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None


class SeoMetadataResponse(OutputModel):
    id: int
    content_type: ContentType
    content_id: int
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    social_image_id: Optional[int] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SocialSharingSettingsCreate(InputModel):
    content_type: ContentType
    content_id: int
    enable_twitter: bool = True
    enable_facebook: bool = True
    enable_linkedin: bool = True
    enable_copy_link: bool = True
    custom_message: Optional[str] = None


class SocialSharingSettingsUpdate(InputModel):
    enable_twitter: Optional[bool] = None
    enable_facebook: Optional[bool] = None
    enable_linkedin: Optional[bool] = None
    enable_copy_link: Optional[bool] = None
    custom_message: Optional[str] = None

    @field_validator(
        "enable_twitter", "enable_facebook", "enable_linkedin", "enable_copy_link"
    )
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class SocialSharingSettingsResponse(OutputModel):
    id: int
    content_type: ContentType
    content_id: int
    enable_twitter: bool
    enable_facebook: bool
    enable_linkedin: bool
    enable_copy_link: bool
    custom_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PreviewCard(BaseModel):
    title: str
    description: str
    url: Optional[str] = None
    image: Optional[str] = None


class SeoPreviewResponse(BaseModel):
    google_preview: PreviewCard
    facebook_preview: PreviewCard
    twitter_preview: PreviewCard


class SharingUrlsResponse(BaseModel):
    twitter: str
    facebook: str
    linkedin: str
    copy_link: str
