"""
AI assistant APIs (stubbed: no model behind them).

POST /ai/chat {message}             -> {response}
POST /ai/analyze/{document_id}      -> {analysis}
POST /ai/summarize {documentIds}    -> {summary}
"""

import logging
from typing import Annotated, List

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from termwatch.api.dependencies import get_assistant
from termwatch.models.common import CamelModel
from termwatch.services import document_service
from termwatch.services.assistant_service import AssistantService

logger = logging.getLogger(__name__)
router = APIRouter()

Assistant = Annotated[AssistantService, Depends(get_assistant)]


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)


class SummarizeRequest(CamelModel):
    document_ids: List[PydanticObjectId] = Field(default_factory=list)


@router.post("/chat", response_model=dict, summary="Chat with the assistant")
async def chat(payload: ChatRequest, assistant: Assistant) -> dict:
    return {"response": await assistant.chat(payload.message)}


@router.post("/analyze/{document_id}", response_model=dict, summary="Analyze a document")
async def analyze(document_id: PydanticObjectId, assistant: Assistant) -> dict:
    doc = await document_service.get_document(document_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return {"analysis": await assistant.analyze_document(doc)}


@router.post("/summarize", response_model=dict, summary="Summarize documents")
async def summarize(payload: SummarizeRequest, assistant: Assistant) -> dict:
    docs = list((await document_service.fetch_documents(payload.document_ids)).values())
    return {"summary": await assistant.summarize(docs)}
