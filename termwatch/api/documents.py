"""
Document upload and metadata APIs.

POST /documents: multipart upload (file, description, category, tags); stores the file, creates a record.
GET /documents: list with category / tag / search filters, newest upload first.
GET, PUT, DELETE /documents/{id}: read, edit metadata, delete (no cascade to reminders/events).
"""

import logging
from typing import Annotated, Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, Form, HTTPException, UploadFile, status

from termwatch.models.document import DocumentCategory, DocumentOut, DocumentUpdate
from termwatch.services import document_service
from termwatch.services.document_service import UploadRejected, UploadTooLarge, parse_tags

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("", response_model=list, summary="List documents")
async def list_documents(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> list:
    docs = await document_service.list_documents(category=category, tag=tag, search=search)
    return [DocumentOut.from_document(d).to_response() for d in docs]


@router.get("/{document_id}", response_model=dict, summary="Get a document")
async def get_document(document_id: PydanticObjectId) -> dict:
    doc = await document_service.get_document(document_id)
    if not doc:
        raise _not_found()
    return DocumentOut.from_document(doc).to_response()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=dict, summary="Upload a document")
async def upload_document(
    file: Optional[UploadFile] = None,
    description: Annotated[str, Form()] = "",
    category: Annotated[Optional[DocumentCategory], Form()] = None,
    tags: Annotated[Optional[str], Form()] = None,
) -> dict:
    """
    Save the uploaded file under a unique storage name and create its record.
    tags may be a JSON array or comma-separated text.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = await file.read()
    try:
        doc = await document_service.store_upload(
            content,
            original_name=file.filename,
            mimetype=file.content_type or "application/octet-stream",
            description=description,
            category=category,
            tags=parse_tags(tags),
        )
    except UploadRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UploadTooLarge as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))

    return {"message": "Document uploaded successfully", "document": DocumentOut.from_document(doc).to_response()}


@router.put("/{document_id}", response_model=dict, summary="Update document metadata")
async def update_document(document_id: PydanticObjectId, payload: DocumentUpdate) -> dict:
    doc = await document_service.update_document(document_id, payload)
    if not doc:
        raise _not_found()
    return {"message": "Document updated successfully", "document": DocumentOut.from_document(doc).to_response()}


@router.delete("/{document_id}", response_model=dict, summary="Delete a document")
async def delete_document(document_id: PydanticObjectId) -> dict:
    if not await document_service.delete_document(document_id):
        raise _not_found()
    return {"message": "Document deleted successfully"}
