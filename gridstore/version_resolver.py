"""Resolution of a (selector, version) pair to a single file metadata record."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from common.logging_config import get_logger
from common.types import FileMetadata
from gridstore.repositories.document_collection import DocumentCollection

logger = get_logger(__name__)

UPLOAD_DATE_FIELD = "uploadDate"


@dataclass(frozen=True)
class VersionPlan:
    """
    How to query the files collection for one version.

    `sort` is None for version 0, which takes whatever the store returns first.
    """
    sort: Optional[Tuple[Tuple[str, int], ...]]
    skip: int

    @property
    def unordered(self) -> bool:
        return self.sort is None


def plan_version(version: int) -> VersionPlan:
    """
    Translate a version number into a sort order and skip count.

    1 is the oldest upload, 2 the next oldest and so on; -1 is the newest,
    -2 the one before it; 0 means any match, unordered.
    """
    if version > 0:
        return VersionPlan(sort=((UPLOAD_DATE_FIELD, 1),), skip=version - 1)
    if version < 0:
        return VersionPlan(sort=((UPLOAD_DATE_FIELD, -1),), skip=-version - 1)
    return VersionPlan(sort=None, skip=0)


class FileMetadataResolver:
    """
    Finds file metadata records in the files collection.
    """

    def __init__(self, files: DocumentCollection):
        self.files = files

    def resolve(self, query: Optional[Mapping[str, Any]], version: int = -1) -> Optional[FileMetadata]:
        """
        Resolve a predicate and version to one metadata record.

        Args:
            query: Field equality predicate over the files collection
            version: Version selector (see plan_version)

        Returns:
            The matching FileMetadata, or None if nothing sits at that offset
        """
        plan = plan_version(version)

        if plan.unordered:
            document = self.files.find_one(query)
        else:
            document = self.files.find_one(query, sort=plan.sort, skip=plan.skip)

        if document is None:
            logger.debug(f"No file metadata for query={dict(query or {})} version={version}")
            return None

        return FileMetadata.from_document(document)

    def resolve_by_id(self, file_id: str) -> Optional[FileMetadata]:
        return self.resolve({"_id": file_id}, version=0)

    def find_all(self, query: Optional[Mapping[str, Any]] = None, sort=None):
        """
        Lazily iterate over every metadata record matching the predicate.
        """
        for document in self.files.find(query, sort=sort):
            yield FileMetadata.from_document(document)
