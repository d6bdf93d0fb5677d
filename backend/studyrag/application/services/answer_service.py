"""Answer service — retrieval-augmented question answering over uploaded documents.

Two paths, no state between calls:
  1. Nothing relevant retrieved → fixed "no relevant information" answer,
     the generative model is not called.
  2. Otherwise → assemble context, fill the grounding prompt, call the
     model once, and report the filenames of exactly the chunks shown to it.
"""

import logging
import time

from studyrag.application.interfaces.chat_provider import ChatProvider
from studyrag.application.services.context_assembler import assemble_context
from studyrag.application.services.retrieval_service import RetrievalService
from studyrag.domain.entities import Answer, ChatMessage, RetrievalResult
from studyrag.domain.exceptions import GenerationError, ValidationError

logger = logging.getLogger(__name__)

NO_RELEVANT_INFORMATION_MESSAGE = (
    "I couldn't find any relevant information in your uploaded documents to answer "
    "this question. Please try uploading more documents or rephrasing your question."
)

# ── Grounding prompt ────────────────────────────────────────────────

_GROUNDING_PROMPT = """\
You are a helpful study assistant. Answer the question using only the context
provided from the user's study documents.

Context from documents:
{context}

Question: {question}

Instructions:
- Answer only from the context above; do not use outside knowledge
- If the context does not contain enough information, say so explicitly
- Cite the source document for the information you use
- Be concise but thorough

Answer:
"""


def build_grounding_prompt(context: str, question: str) -> str:
    """Fill the grounding template's two slots."""
    return _GROUNDING_PROMPT.format(context=context, question=question)


def distinct_sources(results: RetrievalResult) -> list[str]:
    """Distinct filenames in order of first appearance in the ranked results."""
    return list(dict.fromkeys(r.chunk.filename for r in results))


class AnswerService:
    """Application service orchestrating retrieval, prompt assembly and generation."""

    def __init__(
        self,
        retrieval_service: RetrievalService,
        chat_provider: ChatProvider,
        *,
        model: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self._retrieval_service = retrieval_service
        self._chat_provider = chat_provider
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def answer(self, question: str) -> Answer:
        """Answer a question strictly from the indexed documents.

        Raises:
            ValidationError: If the question is blank.
            GenerationError: If the generative model fails after retrieval succeeded.
        """
        if not question or not question.strip():
            raise ValidationError("Please provide a valid question.")

        logger.info("Answering question: %r", question)
        results = await self._retrieval_service.retrieve(question)

        if not results:
            logger.warning("No relevant chunks found for question: %r", question)
            return Answer(text=NO_RELEVANT_INFORMATION_MESSAGE, sources=[])

        prompt = build_grounding_prompt(assemble_context(results), question)
        text = await self._complete(prompt)

        sources = distinct_sources(results)
        logger.info(
            "Answered question from %d chunks across %d sources", len(results), len(sources)
        )
        return Answer(text=text, sources=sources)

    async def _complete(self, prompt: str) -> str:
        """Single generation call; any failure surfaces as GenerationError."""
        start = time.monotonic()
        try:
            result = await self._chat_provider.complete(
                messages=[ChatMessage(role="user", content=prompt)],
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.error("Answer generation failed: %s", e)
            raise GenerationError(f"Answer generation failed: {e}") from e

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Generated answer (model=%s, tokens=%d) in %dms",
            result.model or self._model,
            result.usage.total_tokens,
            duration_ms,
        )
        return result.content
