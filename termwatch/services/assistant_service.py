"""
AI assistant endpoints' backing service - a stub.

No language model is called. Replies are canned and deterministic so the
client's assistant panel has something to show; document analysis only
reports what can be read off the stored file itself.
"""

import asyncio
import logging
from typing import List

from termwatch.models.document import Document
from termwatch.services.document_service import stored_path
from termwatch.services.pdf_service import excerpt, extract_document_text

logger = logging.getLogger(__name__)

STUB_NOTICE = "AI analysis is not enabled on this server; this is a placeholder response."

GREETING = (
    "I'm your terms reminder assistant. I can't analyze contracts yet, but you can "
    "track deadlines and obligations from the Reminders and Calendar sections."
)


class AssistantService:
    """Placeholder for a future LLM-backed assistant."""

    async def chat(self, message: str) -> str:
        logger.debug("Assistant chat stub called (message length=%d)", len(message))
        return f"{GREETING}\n\nYou asked: \"{message.strip()}\"\n\n{STUB_NOTICE}"

    async def analyze_document(self, doc: Document) -> dict:
        """Report basic facts about the stored file; no model-based insight."""
        try:
            text = await asyncio.to_thread(extract_document_text, stored_path(doc), doc.mimetype)
        except FileNotFoundError:
            logger.warning("Stored file missing for document %s (%s)", doc.id, doc.filename)
            text = ""
        return {
            "documentId": str(doc.id),
            "originalName": doc.original_name,
            "category": doc.category.value,
            "characters": len(text),
            "excerpt": excerpt(text),
            "extractedDates": [d.model_dump() for d in doc.extracted_dates],
            "note": STUB_NOTICE,
        }

    async def summarize(self, docs: List[Document]) -> str:
        if not docs:
            return f"No documents selected. {STUB_NOTICE}"
        names = ", ".join(d.original_name for d in docs)
        return f"{len(docs)} document(s) selected: {names}. {STUB_NOTICE}"


assistant_service = AssistantService()
