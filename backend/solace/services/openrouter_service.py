"""
Solace Backend — OpenRouter Advice Generator
=============================================

What:  Concrete AdviceGenerator calling the OpenRouter chat completions API.
How:   Builds a fixed counselling prompt, POSTs
       {model, messages: [{role, content}]} with the bearer key and the two
       identifying headers OpenRouter requires (HTTP-Referer, X-Title), and
       returns choices[0].message.content.
Who:   Created once in the app lifespan; called by ProblemService.generate_advice().

Error Handling:
    httpx timeout (30s default)        → OperationTimeoutError
    transport error / non-200 / bad JSON → LLMServiceError
    empty choices or empty content     → LLMServiceError("no content produced")
    No retry is performed.
"""

import logging
import time
import uuid
from typing import Optional, Sequence

import httpx

from solace.config import Settings
from solace.exceptions import LLMServiceError, OperationTimeoutError
from solace.services.llm_base import AdviceGenerator

logger = logging.getLogger(__name__)


ADVICE_PROMPT_TEMPLATE = """You are a compassionate Christian counselor providing Biblical guidance.

Problem: {problem}

Relevant Bible verses:
{verses}
Please provide concise, Biblical advice (under 200 words) that:
1. Shows empathy for the person's situation
2. Applies the provided Bible verses directly to their problem
3. Offers practical, Christ-centered guidance
4. Encourages spiritual growth and hope

Focus on hope, love, and God's promises rather than condemnation."""


def build_advice_prompt(problem_description: str, verses: Sequence[str]) -> str:
    """Renders the prompt; verses are numbered 1..N, one per line."""
    verses_text = "".join(f"{i}. {verse}\n" for i, verse in enumerate(verses, start=1))
    return ADVICE_PROMPT_TEMPLATE.format(problem=problem_description, verses=verses_text)


class OpenRouterService(AdviceGenerator):
    """
    OpenRouter implementation of the advice generator.

    The httpx.AsyncClient is injectable so tests can route requests through
    httpx.MockTransport; when none is given the service owns its client and
    closes it in aclose().
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-oss-20b",
        referer: str = "https://solace.app",
        title: str = "Solace",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.model = model
        self.referer = referer
        self.title = title
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

        logger.info("OpenRouterService initialized with model=%s, timeout=%.0fs", model, timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenRouterService":
        return cls(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
            timeout=settings.advice_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }

    async def generate_advice(self, problem_description: str, verses: Sequence[str]) -> str:
        # Per-call ID to correlate the log lines of one upstream request
        call_id = str(uuid.uuid4())[:8]
        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": build_advice_prompt(problem_description, verses)},
            ],
        }

        logger.info("[%s] Requesting advice from %s (%d verses)", call_id, self.model, len(verses))
        start_time = time.perf_counter()

        try:
            response = await self.client.post(
                self.endpoint,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        # TimeoutException subclasses HTTPError but maps to the timeout kind,
        # so it must be caught first
        except httpx.TimeoutException as e:
            logger.warning("[%s] Advice request timed out after %.0fs", call_id, self.timeout)
            raise OperationTimeoutError(
                operation="advice generation",
                timeout=self.timeout,
                context={"call_id": call_id},
            ) from e
        except httpx.HTTPError as e:
            logger.error("[%s] Advice request failed: %s", call_id, str(e))
            raise LLMServiceError(
                message="Could not reach the advice generation service. Please try again later.",
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        # OpenRouter explains quota and model errors in the body; it is logged
        # and the client only sees the generic message
        if response.status_code != httpx.codes.OK:
            logger.error(
                "[%s] Advice request failed with status %d after %.0fms: %s",
                call_id,
                response.status_code,
                duration_ms,
                response.text[:500],
            )
            raise LLMServiceError(
                message="The advice generation service returned an error. Please try again later.",
                status=response.status_code,
                context={"call_id": call_id},
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error("[%s] Advice response is not valid JSON", call_id)
            raise LLMServiceError(
                message="The advice generation service returned an unreadable response.",
                status=response.status_code,
                context={"call_id": call_id},
            ) from e

        # The body is untrusted: every level of choices[0].message.content is
        # shape-checked so a malformed reply stays an LLMServiceError
        choices = body.get("choices") if isinstance(body, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            logger.warning("[%s] Advice response contained no choices", call_id)
            raise LLMServiceError(
                message="The advice generation service produced no content.",
                context={"call_id": call_id},
            )

        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            logger.warning("[%s] Advice response choice had empty content", call_id)
            raise LLMServiceError(
                message="The advice generation service produced no content.",
                context={"call_id": call_id},
            )

        logger.info(
            "[%s] Advice generated in %.0fms, %d chars",
            call_id,
            duration_ms,
            len(content),
        )
        return content
