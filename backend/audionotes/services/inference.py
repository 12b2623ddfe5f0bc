import logging
import re
from typing import Optional

from openai import AsyncOpenAI

from audionotes.constants import RECORDING_LANGUAGE, TITLE_MAX_TOKENS, TITLE_PROMPT_MAX_CHARS
from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException


logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "Ti si pomočnik, ki ustvarja strukturirane povzetke posnetkov v slovenščini."
)
SUMMARY_USER_PROMPT = (
    "Povzemi naslednji prepis posnetka v slovenščini. Vključi:\n"
    "- Ključne točke (kot seznam)\n"
    "- Odločitve (kot seznam)\n"
    "- Akcijske korake (kot seznam)\n"
    "\n"
    "Prepis:\n"
    "{transcript}"
)

TITLE_SYSTEM_PROMPT = (
    "Ti si pomočnik, ki ustvarja kratke naslove posnetkov v slovenščini (3-5 besed)."
)
TITLE_USER_PROMPT = (
    "Ustvari kratek naslov (3-5 besed) v slovenščini za naslednji prepis posnetka. "
    "Vrni samo naslov brez narekovajev ali dodatnega besedila.\n"
    "\n"
    "Prepis:\n"
    "{transcript}"
)

_SURROUNDING_QUOTES_RE = re.compile(r"^[\"']|[\"']$")


class InferenceClient:
    """
    Speech-to-text and text generation against an OpenAI compatible API (Groq).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key or settings.GROQ_API_KEY,
            base_url=base_url or settings.GROQ_BASE_URL,
            timeout=timeout or settings.DEFAULT_TIMEOUT,
        )
        self.transcription_model = settings.TRANSCRIPTION_MODEL
        self.summary_model = settings.SUMMARY_MODEL
        self.title_model = settings.TITLE_MODEL


    async def transcribe(
        self, audio: bytes, filename: str, content_type: Optional[str] = None
    ) -> str:
        """Transcribe Slovenian speech. Returns "" when nothing was recognised."""
        upload = (filename, audio, content_type) if content_type else (filename, audio)
        try:
            transcription = await self.client.audio.transcriptions.create(
                file=upload,
                model=self.transcription_model,
                language=RECORDING_LANGUAGE,
            )
        except Exception as e:
            logger.error(f"Transcription of {filename} failed: {e}")
            raise AppException(
                ErrorKey.TRANSCRIPTION_FAILED,
                status_code=500,
                error_detail=f"Failed to transcribe audio: {e}",
                error_obj=e,
            )

        return transcription.text or ""


    async def summarize(self, text: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.summary_model,
                messages=[
                    {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                    {"role": "user", "content": SUMMARY_USER_PROMPT.format(transcript=text)},
                ],
                temperature=settings.SUMMARY_TEMPERATURE,
            )
        except Exception as e:
            logger.error(f"Summary generation failed: {e}")
            raise AppException(
                ErrorKey.SUMMARY_FAILED,
                status_code=500,
                error_detail=f"Failed to generate summary: {e}",
                error_obj=e,
            )

        summary = _first_message_content(response)
        if not summary:
            raise AppException(ErrorKey.SUMMARY_NOT_GENERATED, status_code=500)
        return summary


    async def title_from(self, text: str) -> str:
        """Short 3-5 word title built from the start of the transcript."""
        try:
            response = await self.client.chat.completions.create(
                model=self.title_model,
                messages=[
                    {"role": "system", "content": TITLE_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": TITLE_USER_PROMPT.format(
                            transcript=text[:TITLE_PROMPT_MAX_CHARS]
                        ),
                    },
                ],
                temperature=settings.TITLE_TEMPERATURE,
                max_tokens=TITLE_MAX_TOKENS,
            )
        except Exception as e:
            logger.error(f"Title generation failed: {e}")
            raise AppException(
                ErrorKey.TITLE_FAILED,
                status_code=500,
                error_detail=f"Failed to generate title: {e}",
                error_obj=e,
            )

        title = _first_message_content(response)
        title = _SURROUNDING_QUOTES_RE.sub("", title.strip()) if title else ""
        if not title:
            raise AppException(ErrorKey.TITLE_NOT_GENERATED, status_code=500)
        return title


def _first_message_content(response) -> Optional[str]:
    if not response.choices:
        return None
    return response.choices[0].message.content
