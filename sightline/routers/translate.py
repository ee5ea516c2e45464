"""Translate display names to English for export and search."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sightline.enrichment import translation_batcher
from sightline.models.translation import TranslateResponse

router = APIRouter(prefix="/translate", tags=["translate"])
logger = logging.getLogger(__name__)


def _as_text(value) -> str:
    """Stringify a JSON value the way the export client does (null -> "", true -> "true")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@router.post("", response_model=TranslateResponse)
async def translate_names(request: Request):
    """
    Translate a list of names.

    Body: ``{"names": [...]}``. Entries are coerced to strings: ``null``
    becomes ``""``, booleans become ``"true"``/``"false"``. The response
    always has one entry per input name.
    """
    try:
        try:
            body = await request.json()
        except ValueError:
            body = {}

        raw = body.get("names") if isinstance(body, dict) else None
        if not isinstance(raw, list):
            return JSONResponse(
                status_code=400,
                content={"error": "Body must include 'names' array"},
            )
        names = [_as_text(name) for name in raw]

        translated = await translation_batcher.translate_batch(names)
        return TranslateResponse(translated=translated)
    except Exception as e:
        logger.error(f"Translate error: {e}")
        return JSONResponse(status_code=500, content={"error": "Translation failed"})
