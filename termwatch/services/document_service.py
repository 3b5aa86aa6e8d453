"""
Document storage and lookup.

Uploaded binaries go to the local upload directory under a unique storage
name; the Document record keeps the metadata. Deleting a document does not
touch reminders or events that reference it.
"""

import json
import logging
import re
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

from beanie import PydanticObjectId

from termwatch.config import get_settings
from termwatch.errors import UnknownDocumentError
from termwatch.models.common import apply_changes, utcnow
from termwatch.models.document import Document, DocumentCategory, DocumentUpdate, ExtractedDate

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt", ".jpg", ".jpeg", ".png"}
ALLOWED_MIMETYPE_HINTS = ("pdf", "msword", "wordprocessingml", "text/plain", "jpeg", "jpg", "png")


class UploadRejected(ValueError):
    """The upload is not an accepted file type."""


class UploadTooLarge(ValueError):
    """The upload exceeds the configured size limit."""


def is_allowed_upload(filename: str, mimetype: str) -> bool:
    """Both the extension and the declared mimetype must look like an accepted type."""
    ext = Path(filename).suffix.lower()
    mime = (mimetype or "").lower()
    return ext in ALLOWED_EXTENSIONS and any(hint in mime for hint in ALLOWED_MIMETYPE_HINTS)


def parse_tags(raw: Optional[str]) -> List[str]:
    """Tags arrive from forms either as a JSON array or comma-separated text."""
    if not raw:
        return []
    text = raw.strip()
    if text.startswith("["):
        try:
            values = json.loads(text)
        except json.JSONDecodeError:
            values = None
        if isinstance(values, list):
            return [str(v).strip() for v in values if str(v).strip()]
    return [t.strip() for t in text.split(",") if t.strip()]


def build_document_filter(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> dict:
    query: dict = {}
    if category:
        query["category"] = category
    if tag:
        query["tags"] = tag
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"original_name": pattern}, {"description": pattern}]
    return query


async def fetch_documents(ids: Iterable[Optional[PydanticObjectId]]) -> dict:
    """Load referenced documents in one query; ids with no document are simply missing."""
    wanted = list({i for i in ids if i is not None})
    if not wanted:
        return {}
    docs = await Document.find({"_id": {"$in": wanted}}).to_list()
    return {d.id: d for d in docs}


async def require_document(document_id) -> Optional[Document]:
    """Resolve a reference being written; raise if it points nowhere."""
    if document_id is None:
        return None
    doc = await Document.get(PydanticObjectId(document_id))
    if doc is None:
        raise UnknownDocumentError(document_id)
    return doc


async def list_documents(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Document]:
    query = build_document_filter(category, tag, search)
    return await Document.find(query).sort(-Document.upload_date).to_list()


async def get_document(document_id: PydanticObjectId) -> Optional[Document]:
    return await Document.get(document_id)


async def store_upload(
    content: bytes,
    original_name: str,
    mimetype: str,
    description: str = "",
    category: Optional[str] = None,
    tags: Optional[List[str]] = None,
    extracted_dates: Optional[List[ExtractedDate]] = None,
) -> Document:
    """Validate, write the file to disk and create its record."""
    settings = get_settings()
    if not is_allowed_upload(original_name, mimetype):
        raise UploadRejected(
            "Invalid file type. Only PDF, DOC, DOCX, TXT, JPG, JPEG, and PNG files are allowed."
        )
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise UploadTooLarge(f"File size exceeds {settings.max_upload_size_mb} MB")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    # Unique storage name; the user's filename is kept in original_name
    filename = f"{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"
    (upload_dir / filename).write_bytes(content)
    logger.info("Saved upload %s as %s (%d bytes)", original_name, filename, len(content))

    doc = Document(
        filename=filename,
        original_name=original_name,
        description=description or "",
        category=category or DocumentCategory.OTHER,
        tags=tags or [],
        size=len(content),
        mimetype=mimetype,
        extracted_dates=extracted_dates or [],
    )
    await doc.insert()
    return doc


async def update_document(document_id: PydanticObjectId, data: DocumentUpdate) -> Optional[Document]:
    doc = await Document.get(document_id)
    if doc is None:
        return None
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    apply_changes(doc, changes)
    doc.updated_at = utcnow()
    await doc.save_changes()
    return doc


async def delete_document(document_id: PydanticObjectId) -> bool:
    """Remove the record only; references from reminders/events are left as they are."""
    doc = await Document.get(document_id)
    if doc is None:
        return False
    await doc.delete()
    logger.info("Deleted document %s (%s)", document_id, doc.original_name)
    return True


def stored_path(doc: Document) -> Path:
    return Path(get_settings().upload_dir) / doc.filename
