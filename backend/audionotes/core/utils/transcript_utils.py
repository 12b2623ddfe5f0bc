import logging
import re
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)

_FIRST_SENTENCE_RE = re.compile(r"^[^.!?]+[.!?]")


@dataclass(frozen=True)
class TranscriptHeader:
    """Result of splitting a transcript into its header metadata and body."""
    header: Optional[str]
    client_company: Optional[str]
    client_person: Optional[str]
    body: str


def _blank_to_none(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def _find_header(transcript: str) -> Optional[str]:
    for line in transcript.splitlines():
        if line.strip():
            return line.strip()

    match = _FIRST_SENTENCE_RE.match(transcript)
    return match.group(0) if match else None


def extract_transcript_header(transcript: str) -> TranscriptHeader:
    """
    Best-effort split of a dictated transcript into a "company, person" header
    and the remaining body.

    The header is the first non-empty line, or the first sentence when the
    transcript has no non-empty line. Text before the first comma is the
    company and everything after it is the person. The body is the transcript
    with the first occurrence of the header removed. When nothing is left
    after removing the header, the full transcript is kept as the body.

    Never raises: on any failure the full transcript is returned as the body.
    """
    try:
        header = _find_header(transcript)
        if not header:
            return TranscriptHeader(None, None, None, transcript)

        company = person = None
        if "," in header:
            head, *rest = header.split(",")
            company = _blank_to_none(head)
            person = _blank_to_none(",".join(rest))

        position = transcript.find(header)
        if position < 0:
            body = transcript
        else:
            body = (transcript[:position] + transcript[position + len(header):]).strip()
            if not body:
                body = transcript

        return TranscriptHeader(header, company, person, body)
    except Exception as error:
        logger.warning(f"Header extraction failed, using the full transcript: {error}")
        return TranscriptHeader(None, None, None, transcript)


def infer_audio_content_type(key: str) -> Optional[str]:
    """Guess the audio MIME type from the storage key extension."""
    lowered = key.lower()
    if lowered.endswith(".mp4"):
        return "audio/mp4"
    if lowered.endswith(".webm"):
        return "audio/webm"
    return None


def audio_extension_for(content_type: Optional[str], filename: Optional[str]) -> str:
    """Pick the stored file extension from the upload's MIME type or filename."""
    hint = f"{content_type or ''} {filename or ''}".lower()
    if "webm" in hint:
        return ".webm"
    if "mp4" in hint:
        return ".mp4"
    return ".dat"


def filename_from_key(key: str) -> str:
    return key.rsplit("/", 1)[-1] or "audio"
