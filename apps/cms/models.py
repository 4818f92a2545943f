"""
Content database models.

Blog posts, static pages and projects are the content items. SEO metadata
and social sharing settings point at a content item through a
(content_type, content_id) pair instead of a foreign key.
"""
import enum

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, JSON, ForeignKey, Index, func,
)
from sqlalchemy.orm import relationship

from apps.shared.database import Base


class ContentStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ContentType(str, enum.Enum):
    """Tag identifying which table owns a polymorphic association."""
    BLOG_POST = "blog_post"
    STATIC_PAGE = "static_page"
    PROJECT = "project"


class TimelineType(str, enum.Enum):
    CAREER = "career"
    EDUCATION = "education"


# ──────────────────────────────────────────────────────────────────────────────
# Media library
# ──────────────────────────────────────────────────────────────────────────────

class MediaFolder(Base):
    """
    Folder in the media library.

    Folders form a forest through parent_id. A folder does not own its
    child folders, and its media are re-homed rather than deleted with it.
    """
    __tablename__ = "media_folders"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    parent_id = Column(Integer, ForeignKey("media_folders.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class Media(Base):
    """Uploaded file metadata. The binary itself lives outside the database."""
    __tablename__ = "media"

    id = Column(Integer, primary_key=True)
    filename = Column(Text, nullable=False)
    original_name = Column(Text, nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    width = Column(Integer)
    height = Column(Integer)
    alt_text = Column(Text)
    description = Column(Text)
    folder_id = Column(Integer, ForeignKey("media_folders.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


# ──────────────────────────────────────────────────────────────────────────────
# Content items
# ──────────────────────────────────────────────────────────────────────────────

class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    featured_image_id = Column(Integer, ForeignKey("media.id"), nullable=True)
    status = Column(String(20), nullable=False, default=ContentStatus.DRAFT.value)
    published_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class StaticPage(Base):
    """Static page. At most one page has is_homepage set."""
    __tablename__ = "static_pages"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    content = Column(Text, nullable=False)
    featured_image_id = Column(Integer, ForeignKey("media.id"), nullable=True)
    is_homepage = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=ContentStatus.DRAFT.value)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Project(Base):
    """Portfolio project."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False)
    content = Column(Text)  # Rich text for the detail page
    featured_image_id = Column(Integer, ForeignKey("media.id"), nullable=True)
    project_url = Column(Text)
    github_url = Column(Text)
    technologies = Column(JSON, nullable=False, default=list)  # ["React", "Python", "PostgreSQL"]
    status = Column(String(20), nullable=False, default=ContentStatus.DRAFT.value)
    start_date = Column(Date)
    end_date = Column(Date)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


# ──────────────────────────────────────────────────────────────────────────────
# Galleries
# ──────────────────────────────────────────────────────────────────────────────

class ImageGallery(Base):
    __tablename__ = "image_galleries"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    status = Column(String(20), nullable=False, default=ContentStatus.DRAFT.value)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    images = relationship(
        "GalleryImage",
        cascade="all, delete-orphan",
        order_by="GalleryImage.sort_order",
    )


class GalleryImage(Base):
    """Position of a media row inside a gallery."""
    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True)
    gallery_id = Column(Integer, ForeignKey("image_galleries.id"), nullable=False, index=True)
    media_id = Column(Integer, ForeignKey("media.id"), nullable=False)
    caption = Column(Text)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


# ──────────────────────────────────────────────────────────────────────────────
# Timeline
# ──────────────────────────────────────────────────────────────────────────────

class TimelineEntry(Base):
    """
    Career or education entry.

    Within one entry_type at most one row is current, and a current entry
    has no end date.
    """
    __tablename__ = "timeline_entries"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    organization = Column(Text, nullable=False)
    description = Column(Text)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    is_current = Column(Boolean, nullable=False, default=False)
    entry_type = Column(String(20), nullable=False, index=True)
    location = Column(Text)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


# ──────────────────────────────────────────────────────────────────────────────
# Polymorphic associations
# ──────────────────────────────────────────────────────────────────────────────

class SeoMetadata(Base):
    __tablename__ = "seo_metadata"
    __table_args__ = (Index("ix_seo_metadata_owner", "content_type", "content_id"),)

    id = Column(Integer, primary_key=True)
    content_type = Column(String(20), nullable=False)
    content_id = Column(Integer, nullable=False)
    meta_title = Column(Text)
    meta_description = Column(Text)
    social_image_id = Column(Integer, ForeignKey("media.id"), nullable=True)
    og_title = Column(Text)
    og_description = Column(Text)
    twitter_title = Column(Text)
    twitter_description = Column(Text)
    canonical_url = Column(Text)
    robots = Column(Text)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class SocialSharingSettings(Base):
    __tablename__ = "social_sharing_settings"
    __table_args__ = (Index("ix_social_sharing_settings_owner", "content_type", "content_id"),)

    id = Column(Integer, primary_key=True)
    content_type = Column(String(20), nullable=False)
    content_id = Column(Integer, nullable=False)
    enable_twitter = Column(Boolean, nullable=False, default=True)
    enable_facebook = Column(Boolean, nullable=False, default=True)
    enable_linkedin = Column(Boolean, nullable=False, default=True)
    enable_copy_link = Column(Boolean, nullable=False, default=True)
    custom_message = Column(Text)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
