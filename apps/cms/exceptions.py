"""
Content service errors.

Every error is raised before the write it guards, so a rejected request
leaves the database untouched.
"""
from fastapi import status

from apps.shared.errors import ServiceError


class NotFound(ServiceError):
    """The row the operation targets does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    category = "not_found"


class OwnerNotFound(ServiceError):
    """The content item an association points at does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    category = "reference"


class ReferenceNotFound(ServiceError):
    """A referenced row (parent folder, media) does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    category = "reference"


class InvalidContentType(ServiceError):
    category = "validation"


class InvalidHierarchy(ServiceError):
    """Folder move would make a folder its own ancestor."""
    category = "hierarchy"


class NonEmptyHierarchy(ServiceError):
    """Folder still has child folders."""
    status_code = status.HTTP_409_CONFLICT
    category = "hierarchy"


class InvalidDateRange(ServiceError):
    category = "validation"


class CurrentEntryHasEndDate(ServiceError):
    category = "validation"


class DuplicateSlug(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    category = "conflict"


class AssociationExists(ServiceError):
    """The content item already has a row of this association kind."""
    status_code = status.HTTP_409_CONFLICT
    category = "conflict"
