"""
Translation Batcher
Normalizes non-English display names to English using an OpenAI chat model.
"""
import logging
import re
from typing import Callable, List, Optional

import httpx

from sightline.config import settings
from sightline.enrichment.timeout_guard import TimeoutGuard
from sightline.models.translation import TranslationItem
from sightline.enrichment.transport import Transport

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = "Unnamed"

# Outside ASCII and the Latin-1 letters / Latin Extended-A/B blocks
_NON_LATIN = re.compile(r"[^\x00-\x7F\u00C0-\u024F]")
_LINE_NUMBER = re.compile(r"^\s*\d+[.)]\s*")
_NEWLINES = re.compile(r"\r?\n")


def needs_translation(text: str) -> bool:
    """Cheap script check: does the text contain non-Latin characters?"""
    stripped = text.strip()
    if not stripped or stripped == PLACEHOLDER_NAME:
        return False
    return _NON_LATIN.search(stripped) is not None


class TranslationBatcher:
    """Translate lists of names in fixed-size chunks, falling back to the originals."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        batch_size: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
        detector: Callable[[str], bool] = needs_translation,
    ):
        # No key means passthrough mode
        self.api_key = api_key
        self.api_url = api_url or settings.openai_api_url
        self.model = model or settings.translation_model
        self.batch_size = batch_size or settings.translation_batch_size
        self.timeout = timeout if timeout is not None else settings.translation_timeout
        self.detector = detector
        self.guard = TimeoutGuard(transport)

    async def translate_batch(self, texts: List[str]) -> List[str]:
        """
        Translate texts to English.

        Never raises. The result has the same length and order as ``texts``;
        each entry is either the original text or a non-empty translation.
        """
        if not self.api_key or not texts:
            return texts

        results = list(texts)
        pending = [
            TranslationItem(index=index, text=text)
            for index, text in enumerate(texts)
            if self.detector(text)
        ]
        if not pending:
            return results

        logger.info(f"Translating {len(pending)} of {len(texts)} names")

        for start in range(0, len(pending), self.batch_size):
            chunk = pending[start:start + self.batch_size]
            lines = await self._translate_chunk(chunk)
            if lines is None:
                continue
            for position, item in enumerate(chunk):
                line = lines[position] if position < len(lines) else ""
                results[item.index] = line or item.text

        return results

    def _build_prompt(self, chunk: List[TranslationItem]) -> str:
        numbered_lines = "\n".join(
            f"{number}. {_NEWLINES.sub(' ', item.text)}"
            for number, item in enumerate(chunk, start=1)
        )
        return (
            "Translate each of the following lines to English. Return only the English "
            "translations, one per line, in the same order (1, 2, 3, ...). Do not include "
            "the line numbers. If a line is already in English, return it unchanged. "
            f"Use exactly {len(chunk)} lines in your response.\n\n"
            f"{numbered_lines}"
        )

    def _build_request(self, prompt: str) -> httpx.Request:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt,
                }
            ],
            "temperature": 0,
        }
        return httpx.Request("POST", self.api_url, json=payload, headers=headers)

    async def _translate_chunk(self, chunk: List[TranslationItem]) -> Optional[List[str]]:
        """Return cleaned response lines, or None if the whole chunk should keep its originals."""
        request = self._build_request(self._build_prompt(chunk))

        try:
            response = await self.guard.call(request, self.timeout)
            if not response.is_success:
                logger.warning(f"OpenAI translate error: {response.status_code} {response.text[:200]}")
                return None
            content = _extract_content(response.json())
        except Exception as e:
            logger.warning(f"OpenAI translate request failed for {len(chunk)} names: {e!r}")
            return None

        return [_LINE_NUMBER.sub("", line).strip() for line in content.strip().split("\n")]


def _extract_content(data) -> str:
    choices = data.get("choices") or [{}]
    content = (choices[0].get("message") or {}).get("content")
    return content if isinstance(content, str) else ""


# Global instance
translation_batcher = TranslationBatcher(api_key=settings.openai_api_key)
