"""
Content Service API

Blog posts, static pages, projects, media library, galleries, timeline,
SEO metadata and social sharing settings for the personal site.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from apps.shared.database import get_db, check_db_connection, init_db, dispose_engine
from apps.shared.cors import setup_cors
from apps.shared.errors import register_exception_handlers
from apps.shared.security_headers import setup_security_headers
from apps.cms import associations, content, galleries, hierarchy, lifecycle, media, sharing, timeline
from apps.cms.models import (
    BlogPost,
    ContentStatus,
    ContentType,
    Project,
    SeoMetadata,
    SocialSharingSettings,
    StaticPage,
    TimelineType,
)
from apps.cms.schemas import (
    BlogPostCreate,
    BlogPostResponse,
    BlogPostUpdate,
    GalleryImageCaption,
    GalleryImageCreate,
    GalleryImageResponse,
    ImageGalleryCreate,
    ImageGalleryResponse,
    ImageGalleryUpdate,
    MediaCreate,
    MediaFolderCreate,
    MediaFolderResponse,
    MediaFolderUpdate,
    MediaMove,
    MediaResponse,
    MediaUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    SeoMetadataCreate,
    SeoMetadataResponse,
    SeoMetadataUpdate,
    SeoPreviewResponse,
    SharingUrlsResponse,
    SocialSharingSettingsCreate,
    SocialSharingSettingsResponse,
    SocialSharingSettingsUpdate,
    SortOrderItem,
    StaticPageCreate,
    StaticPageResponse,
    StaticPageUpdate,
    TimelineEntryCreate,
    TimelineEntryResponse,
    TimelineEntryUpdate,
)

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    dispose_engine()


app = FastAPI(
    title="Content Service",
    version="1.0.0",
    description="Content management for blog posts, pages, projects, media and timeline",
    docs_url="/cms/docs",
    openapi_url="/cms/openapi.json",
    lifespan=lifespan,
)

setup_cors(app)
setup_security_headers(app)
register_exception_handlers(app)

router = APIRouter(prefix="/cms", tags=["cms"])


def _found(item, label: str):
    if item is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return item


@router.get("/health")
def health():
    """Health check endpoint."""
    db_connected = check_db_connection()
    return {
        "status": "ok" if db_connected else "degraded",
        "service": "cms",
        "database": "connected" if db_connected else "disconnected",
    }


# ──────────────────────────────────────────────────────────────────────────────
# Blog posts
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/posts", response_model=BlogPostResponse, status_code=201)
def create_blog_post(data: BlogPostCreate, db: Session = Depends(get_db)):
    return content.create_content(db, BlogPost, data.model_dump())


@router.get("/posts", response_model=list[BlogPostResponse])
def list_blog_posts(status: Optional[ContentStatus] = None, db: Session = Depends(get_db)):
    """All blog posts, newest first."""
    return content.list_content(db, BlogPost, status)


@router.get("/posts/slug/{slug}", response_model=BlogPostResponse)
def get_blog_post_by_slug(slug: str, db: Session = Depends(get_db)):
    return _found(content.get_content_by_slug(db, BlogPost, slug), "Blog post")


@router.get("/posts/{post_id}", response_model=BlogPostResponse)
def get_blog_post(post_id: int, db: Session = Depends(get_db)):
    return _found(content.get_content(db, BlogPost, post_id), "Blog post")


@router.patch("/posts/{post_id}", response_model=BlogPostResponse)
def update_blog_post(post_id: int, data: BlogPostUpdate, db: Session = Depends(get_db)):
    return content.update_content(db, BlogPost, post_id, data.model_dump(exclude_unset=True))


@router.delete("/posts/{post_id}", status_code=204)
def delete_blog_post(post_id: int, db: Session = Depends(get_db)):
    """Delete a blog post with its SEO metadata and sharing settings."""
    lifecycle.delete_content_item(db, ContentType.BLOG_POST, post_id)


# ──────────────────────────────────────────────────────────────────────────────
# Static pages
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/pages", response_model=StaticPageResponse, status_code=201)
def create_static_page(data: StaticPageCreate, db: Session = Depends(get_db)):
    """Create a page. is_homepage=true takes the homepage flag from any other page."""
    return content.create_content(db, StaticPage, data.model_dump())


@router.get("/pages", response_model=list[StaticPageResponse])
def list_static_pages(status: Optional[ContentStatus] = None, db: Session = Depends(get_db)):
    return content.list_content(db, StaticPage, status)


@router.get("/pages/homepage", response_model=StaticPageResponse)
def get_homepage(db: Session = Depends(get_db)):
    return _found(content.get_homepage(db), "Homepage")


@router.get("/pages/slug/{slug}", response_model=StaticPageResponse)
def get_static_page_by_slug(slug: str, db: Session = Depends(get_db)):
    return _found(content.get_content_by_slug(db, StaticPage, slug), "Static page")


@router.get("/pages/{page_id}", response_model=StaticPageResponse)
def get_static_page(page_id: int, db: Session = Depends(get_db)):
    return _found(content.get_content(db, StaticPage, page_id), "Static page")


@router.patch("/pages/{page_id}", response_model=StaticPageResponse)
def update_static_page(page_id: int, data: StaticPageUpdate, db: Session = Depends(get_db)):
    return content.update_content(db, StaticPage, page_id, data.model_dump(exclude_unset=True))


@router.delete("/pages/{page_id}", status_code=204)
def delete_static_page(page_id: int, db: Session = Depends(get_db)):
    lifecycle.delete_content_item(db, ContentType.STATIC_PAGE, page_id)


# ──────────────────────────────────────────────────────────────────────────────
# Projects
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(data: ProjectCreate, db: Session = Depends(get_db)):
    return content.create_content(db, Project, data.model_dump())


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(status: Optional[ContentStatus] = None, db: Session = Depends(get_db)):
    """
    List projects.
    Sorted by sort_order (ascending), then by created_at (descending).
    """
    return content.list_content(db, Project, status)


@router.get("/projects/slug/{slug}", response_model=ProjectResponse)
def get_project_by_slug(slug: str, db: Session = Depends(get_db)):
    return _found(content.get_content_by_slug(db, Project, slug), "Project")


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(project_id: int, db: Session = Depends(get_db)):
    return _found(content.get_content(db, Project, project_id), "Project")


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
def update_project(project_id: int, data: ProjectUpdate, db: Session = Depends(get_db)):
    return content.update_content(db, Project, project_id, data.model_dump(exclude_unset=True))


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(project_id: int, db: Session = Depends(get_db)):
    lifecycle.delete_content_item(db, ContentType.PROJECT, project_id)


# ──────────────────────────────────────────────────────────────────────────────
# Media folders
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/folders", response_model=MediaFolderResponse, status_code=201)
def create_folder(data: MediaFolderCreate, db: Session = Depends(get_db)):
    return hierarchy.create_folder(db, data.name, data.parent_id)


@router.get("/folders", response_model=list[MediaFolderResponse])
def list_folders(db: Session = Depends(get_db)):
    """All folders; build the tree client-side from parent_id."""
    return hierarchy.list_folders(db)


@router.get("/folders/{folder_id}", response_model=MediaFolderResponse)
def get_folder(folder_id: int, db: Session = Depends(get_db)):
    return _found(hierarchy.get_folder(db, folder_id), "Media folder")


@router.get("/folders/{folder_id}/children", response_model=list[MediaFolderResponse])
def list_child_folders(folder_id: int, db: Session = Depends(get_db)):
    _found(hierarchy.get_folder(db, folder_id), "Media folder")
    return hierarchy.list_child_folders(db, folder_id)


@router.get("/folders/{folder_id}/media", response_model=list[MediaResponse])
def list_folder_media(folder_id: int, db: Session = Depends(get_db)):
    _found(hierarchy.get_folder(db, folder_id), "Media folder")
    return media.list_media_in_folder(db, folder_id)


@router.patch("/folders/{folder_id}", response_model=MediaFolderResponse)
def update_folder(folder_id: int, data: MediaFolderUpdate, db: Session = Depends(get_db)):
    """Rename and/or move a folder. Moving a folder under itself is rejected."""
    return hierarchy.update_folder(db, folder_id, data.model_dump(exclude_unset=True))


@router.delete("/folders/{folder_id}", status_code=204)
def delete_folder(folder_id: int, db: Session = Depends(get_db)):
    """Delete a folder without subfolders; its media move to the parent folder."""
    hierarchy.delete_folder(db, folder_id)


# ──────────────────────────────────────────────────────────────────────────────
# Media
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/media", response_model=MediaResponse, status_code=201)
def create_media(data: MediaCreate, db: Session = Depends(get_db)):
    return media.create_media(db, data.model_dump())


@router.get("/media", response_model=list[MediaResponse])
def list_media(db: Session = Depends(get_db)):
    return media.list_media(db)


@router.get("/media/root", response_model=list[MediaResponse])
def list_root_media(db: Session = Depends(get_db)):
    """Media that is not inside any folder."""
    return media.list_media_in_folder(db, None)


@router.get("/media/search", response_model=list[MediaResponse])
def search_media(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return media.search_media(db, q)


@router.post("/media/move")
def move_media(data: MediaMove, db: Session = Depends(get_db)):
    moved = media.move_media(db, data.media_ids, data.folder_id)
    return {"moved": moved, "folder_id": data.folder_id}


@router.get("/media/{media_id}", response_model=MediaResponse)
def get_media(media_id: int, db: Session = Depends(get_db)):
    return _found(media.get_media(db, media_id), "Media")


@router.patch("/media/{media_id}", response_model=MediaResponse)
def update_media(media_id: int, data: MediaUpdate, db: Session = Depends(get_db)):
    return media.update_media(db, media_id, data.model_dump(exclude_unset=True))


@router.delete("/media/{media_id}", status_code=204)
def delete_media(media_id: int, db: Session = Depends(get_db)):
    media.delete_media(db, media_id)


# ──────────────────────────────────────────────────────────────────────────────
# Galleries
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/galleries", response_model=ImageGalleryResponse, status_code=201)
def create_gallery(data: ImageGalleryCreate, db: Session = Depends(get_db)):
    return galleries.create_gallery(db, data.model_dump())


@router.get("/galleries", response_model=list[ImageGalleryResponse])
def list_galleries(db: Session = Depends(get_db)):
    return galleries.list_galleries(db)


@router.get("/galleries/slug/{slug}", response_model=ImageGalleryResponse)
def get_gallery_by_slug(slug: str, db: Session = Depends(get_db)):
    return _found(galleries.get_gallery_by_slug(db, slug), "Gallery")


@router.get("/galleries/{gallery_id}", response_model=ImageGalleryResponse)
def get_gallery(gallery_id: int, db: Session = Depends(get_db)):
    return _found(galleries.get_gallery(db, gallery_id), "Gallery")


@router.patch("/galleries/{gallery_id}", response_model=ImageGalleryResponse)
def update_gallery(gallery_id: int, data: ImageGalleryUpdate, db: Session = Depends(get_db)):
    return galleries.update_gallery(db, gallery_id, data.model_dump(exclude_unset=True))


@router.delete("/galleries/{gallery_id}", status_code=204)
def delete_gallery(gallery_id: int, db: Session = Depends(get_db)):
    galleries.delete_gallery(db, gallery_id)


@router.post("/galleries/{gallery_id}/images", response_model=GalleryImageResponse, status_code=201)
def add_gallery_image(gallery_id: int, data: GalleryImageCreate, db: Session = Depends(get_db)):
    return galleries.add_image(db, gallery_id, data.model_dump())


@router.put("/galleries/{gallery_id}/order", status_code=204)
def reorder_gallery_images(gallery_id: int, orders: list[SortOrderItem], db: Session = Depends(get_db)):
    galleries.reorder_images(db, gallery_id, [item.model_dump() for item in orders])


@router.patch("/gallery-images/{gallery_image_id}", response_model=GalleryImageResponse)
def update_gallery_image_caption(
    gallery_image_id: int, data: GalleryImageCaption, db: Session = Depends(get_db)
):
    return galleries.update_caption(db, gallery_image_id, data.caption)


@router.delete("/gallery-images/{gallery_image_id}", status_code=204)
def remove_gallery_image(gallery_image_id: int, db: Session = Depends(get_db)):
    galleries.remove_image(db, gallery_image_id)


# ──────────────────────────────────────────────────────────────────────────────
# Timeline
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/timeline", response_model=TimelineEntryResponse, status_code=201)
def create_timeline_entry(data: TimelineEntryCreate, db: Session = Depends(get_db)):
    return timeline.create_entry(db, data.model_dump())


@router.get("/timeline", response_model=list[TimelineEntryResponse])
def list_timeline_entries(entry_type: Optional[TimelineType] = None, db: Session = Depends(get_db)):
    """Timeline entries, optionally only career or education."""
    return timeline.list_entries(db, entry_type)


@router.put("/timeline/order", status_code=204)
def reorder_timeline(orders: list[SortOrderItem], db: Session = Depends(get_db)):
    timeline.reorder_entries(db, [item.model_dump() for item in orders])


@router.get("/timeline/{entry_id}", response_model=TimelineEntryResponse)
def get_timeline_entry(entry_id: int, db: Session = Depends(get_db)):
    return _found(timeline.get_entry(db, entry_id), "Timeline entry")


@router.patch("/timeline/{entry_id}", response_model=TimelineEntryResponse)
def update_timeline_entry(entry_id: int, data: TimelineEntryUpdate, db: Session = Depends(get_db)):
    return timeline.update_entry(db, entry_id, data.model_dump(exclude_unset=True))


@router.delete("/timeline/{entry_id}", status_code=204)
def delete_timeline_entry(entry_id: int, db: Session = Depends(get_db)):
    timeline.delete_entry(db, entry_id)


# ──────────────────────────────────────────────────────────────────────────────
# SEO metadata
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/seo", response_model=SeoMetadataResponse, status_code=201)
def create_seo_metadata(data: SeoMetadataCreate, db: Session = Depends(get_db)):
    return associations.create_association(db, SeoMetadata, data.model_dump())


@router.get("/seo/{content_type}/{content_id}", response_model=SeoMetadataResponse)
def get_seo_metadata(content_type: ContentType, content_id: int, db: Session = Depends(get_db)):
    record = associations.find_by_owner(db, SeoMetadata, content_type, content_id)
    return _found(record, "SEO metadata")


@router.get("/seo/{content_type}/{content_id}/preview", response_model=SeoPreviewResponse)
def get_seo_preview(content_type: ContentType, content_id: int, db: Session = Depends(get_db)):
    return sharing.generate_seo_preview(db, content_type, content_id)


@router.patch("/seo/{seo_id}", response_model=SeoMetadataResponse)
def update_seo_metadata(seo_id: int, data: SeoMetadataUpdate, db: Session = Depends(get_db)):
    return associations.update_association(db, SeoMetadata, seo_id, data.model_dump(exclude_unset=True))


@router.delete("/seo/{seo_id}", status_code=204)
def delete_seo_metadata(seo_id: int, db: Session = Depends(get_db)):
    associations.delete_association(db, SeoMetadata, seo_id)


# ──────────────────────────────────────────────────────────────────────────────
# Social sharing
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/sharing", response_model=SocialSharingSettingsResponse, status_code=201)
def create_sharing_settings(data: SocialSharingSettingsCreate, db: Session = Depends(get_db)):
    return associations.create_association(db, SocialSharingSettings, data.model_dump())


@router.get("/sharing/{content_type}/{content_id}", response_model=SocialSharingSettingsResponse)
def get_sharing_settings(content_type: ContentType, content_id: int, db: Session = Depends(get_db)):
    record = associations.find_by_owner(db, SocialSharingSettings, content_type, content_id)
    return _found(record, "Social sharing settings")


@router.get("/sharing/{content_type}/{content_id}/urls", response_model=SharingUrlsResponse)
def get_sharing_urls(
    content_type: ContentType,
    content_id: int,
    base_url: str = sharing.SITE_BASE_URL,
    db: Session = Depends(get_db),
):
    return sharing.generate_sharing_urls(db, content_type, content_id, base_url)


@router.patch("/sharing/{settings_id}", response_model=SocialSharingSettingsResponse)
def update_sharing_settings(
    settings_id: int, data: SocialSharingSettingsUpdate, db: Session = Depends(get_db)
):
    return associations.update_association(
        db, SocialSharingSettings, settings_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/sharing/{settings_id}", status_code=204)
def delete_sharing_settings(settings_id: int, db: Session = Depends(get_db)):
    associations.delete_association(db, SocialSharingSettings, settings_id)


app.include_router(router)
