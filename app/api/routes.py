from typing import Annotated

from fastapi import APIRouter, File, Header, Request, UploadFile

from app.analysis.analyzer import Analyzer
from app.api.schemas import AnalyzeRequest, AnalyzeResponse, ProcessDocumentResponse
from app.documents.models import DocumentHandle, ExtractionCredentials
from app.exceptions import ValidationError
from app.extraction.base import BaseExtractionClient
from app.logging.logger import Log

router = APIRouter(prefix="/api")


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/process-document", response_model=ProcessDocumentResponse)
async def process_document(
    request: Request,
    document: Annotated[UploadFile | None, File()] = None,
    x_azure_endpoint: Annotated[str, Header()] = "",
    x_azure_key: Annotated[str, Header()] = "",
) -> ProcessDocumentResponse:
    """Extract text, tables and key/value pairs from an uploaded document."""
    if document is None:
        raise ValidationError("No document file uploaded")
    handle = DocumentHandle(
        content=await document.read(),
        media_type=document.content_type or "application/octet-stream",
        filename=document.filename or "",
    )
    Log.info(f"Processing upload {handle.filename or '<unnamed>'} ({len(handle.content)} bytes)")

    extraction_client: BaseExtractionClient = request.app.state.extraction_client
    result = await extraction_client.extract(
        handle,
        ExtractionCredentials(endpoint=x_azure_endpoint, key=x_azure_key),
    )
    return ProcessDocumentResponse.from_result(result)


@router.post("/analyze-with-claude", response_model=AnalyzeResponse)
async def analyze_with_claude(
    request: Request,
    body: AnalyzeRequest,
    x_claude_api_key: Annotated[str, Header()] = "",
) -> AnalyzeResponse:
    """Answer a question about already extracted document content."""
    analyzer: Analyzer = request.app.state.analyzer
    answer = await analyzer.answer(body.question, body.to_result(), x_claude_api_key)
    return AnalyzeResponse(analysis=answer)
