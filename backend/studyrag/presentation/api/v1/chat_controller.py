"""Chat API controller — answer questions from the uploaded documents."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from studyrag.application.schemas import ChatQueryRequest, ChatQueryResponse
from studyrag.application.services import AnswerService
from studyrag.domain.exceptions import GenerationError, ValidationError
from studyrag.infrastructure.dependencies import get_answer_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/query", response_model=ChatQueryResponse)
async def query_documents(
    request: ChatQueryRequest,
    service: AnswerService = Depends(get_answer_service),
) -> ChatQueryResponse:
    """Answer a question using only the content of the uploaded documents."""
    try:
        answer = await service.answer(request.question)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The answer model is currently unavailable. Please try again later.",
        )

    return ChatQueryResponse(answer=answer.text, sources=answer.sources)
