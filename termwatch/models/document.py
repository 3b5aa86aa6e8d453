"""
Document model for uploaded files (contracts, court papers, scans).

A Document is only ever a reference target: reminders and events point at it,
it never points back. Deleting one leaves those references dangling.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

import pymongo
from beanie import Document
from pydantic import BaseModel, Field

from termwatch.models.common import CamelModel, RecordOut, utcnow


class DocumentCategory(str, Enum):
    CONTRACT = "contract"
    LEGAL = "legal"
    ADMINISTRATIVE = "administrative"
    COURT = "court"
    OTHER = "other"


class ExtractedDate(BaseModel):
    """Free-form date annotation attached to a document; not cross-checked against reminders."""

    date: str = ""
    type: str = ""
    context: str = ""


class Document(Document):
    """
    Metadata for a stored upload. filename is the name on disk,
    original_name is what the user uploaded.
    """

    filename: str
    original_name: str
    description: str = ""
    category: DocumentCategory = DocumentCategory.OTHER
    tags: List[str] = Field(default_factory=list)
    size: int
    mimetype: str
    upload_date: datetime = Field(default_factory=utcnow)
    extracted_dates: List[ExtractedDate] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "documents"
        use_state_management = True
        keep_nulls = False
        indexes = [
            "category",
            "tags",
            [("upload_date", pymongo.DESCENDING)],
        ]


class DocumentUpdate(CamelModel):
    """Editable metadata; the stored file itself is immutable."""

    description: Optional[str] = None
    category: Optional[DocumentCategory] = None
    tags: Optional[List[str]] = None
    extracted_dates: Optional[List[ExtractedDate]] = None


class DocumentOut(RecordOut):
    filename: str
    original_name: str
    description: str = ""
    category: DocumentCategory
    tags: List[str] = Field(default_factory=list)
    size: int
    mimetype: str
    upload_date: datetime
    extracted_dates: List[ExtractedDate] = Field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentOut":
        return cls.model_validate(doc.model_dump())
