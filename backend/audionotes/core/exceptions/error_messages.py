import logging
from enum import Enum
from typing import Sequence
from fastapi import Request

from audionotes.core.config.settings import settings


logger = logging.getLogger(__name__)


class ErrorKey(Enum):
    INTERNAL_ERROR = "error_500"
    BAD_REQUEST = "BAD_REQUEST"

    # Auth
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    COULD_NOT_VALIDATE_CREDENTIALS = "COULD_NOT_VALIDATE_CREDENTIALS"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"

    # Recordings
    RECORDING_NOT_FOUND = "recording_not_found"
    FORMDATA_PARSE_FAILED = "FORMDATA_PARSE_FAILED"
    MISSING_AUDIO_FIELD = "MISSING_AUDIO_FIELD"
    EMPTY_AUDIO_FILE = "EMPTY_AUDIO_FILE"
    FILE_SIZE_TOO_LARGE = "FILE_SIZE_TOO_LARGE"
    INVALID_TITLE = "INVALID_TITLE"
    RECORDING_SAVE_FAILED = "RECORDING_SAVE_FAILED"

    # Object storage
    STORAGE_UPLOAD_FAILED = "STORAGE_UPLOAD_FAILED"
    STORAGE_DELETE_FAILED = "STORAGE_DELETE_FAILED"
    STORAGE_SIGN_FAILED = "STORAGE_SIGN_FAILED"
    AUDIO_FETCH_FAILED = "AUDIO_FETCH_FAILED"

    # Inference
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
    SUMMARY_FAILED = "SUMMARY_FAILED"
    SUMMARY_NOT_GENERATED = "SUMMARY_NOT_GENERATED"
    TITLE_FAILED = "TITLE_FAILED"
    TITLE_NOT_GENERATED = "TITLE_NOT_GENERATED"


ERROR_MESSAGES = {
    "en": {
        ErrorKey.INTERNAL_ERROR: "An internal server error occurred. Please try again later.",
        ErrorKey.BAD_REQUEST: "The request is not valid.",
        ErrorKey.NOT_AUTHENTICATED: "Not authenticated.",
        ErrorKey.COULD_NOT_VALIDATE_CREDENTIALS: "Could not validate credentials.",
        ErrorKey.EXPIRED_TOKEN: "The access token has expired.",
        ErrorKey.RECORDING_NOT_FOUND: "Recording not found.",
        ErrorKey.FORMDATA_PARSE_FAILED: "Could not read the uploaded form data.",
        ErrorKey.MISSING_AUDIO_FIELD: "The 'audio' field is missing.",
        ErrorKey.EMPTY_AUDIO_FILE: "The uploaded audio file is empty.",
        ErrorKey.FILE_SIZE_TOO_LARGE: "The uploaded file is too large.",
        ErrorKey.INVALID_TITLE: "Title must be a non-empty string.",
        ErrorKey.RECORDING_SAVE_FAILED: "Failed to save the recording.",
        ErrorKey.STORAGE_UPLOAD_FAILED: "Failed to store the audio file.",
        ErrorKey.STORAGE_DELETE_FAILED: "Failed to delete the audio file.",
        ErrorKey.STORAGE_SIGN_FAILED: "Failed to create an audio link.",
        ErrorKey.AUDIO_FETCH_FAILED: "Failed to fetch the audio file.",
        ErrorKey.TRANSCRIPTION_FAILED: "Failed to transcribe audio.",
        ErrorKey.SUMMARY_FAILED: "Failed to generate summary.",
        ErrorKey.SUMMARY_NOT_GENERATED: "No summary generated.",
        ErrorKey.TITLE_FAILED: "Failed to generate title.",
        ErrorKey.TITLE_NOT_GENERATED: "No title generated.",
    },
    "sl": {
        ErrorKey.INTERNAL_ERROR: "Prišlo je do notranje napake strežnika. Poskusite znova kasneje.",
        ErrorKey.BAD_REQUEST: "Zahteva ni veljavna.",
        ErrorKey.NOT_AUTHENTICATED: "Niste prijavljeni.",
        ErrorKey.COULD_NOT_VALIDATE_CREDENTIALS: "Poverilnic ni bilo mogoče preveriti.",
        ErrorKey.EXPIRED_TOKEN: "Dostopni žeton je potekel.",
        ErrorKey.RECORDING_NOT_FOUND: "Posnetek ne obstaja.",
        ErrorKey.FORMDATA_PARSE_FAILED: "Podatkov obrazca ni bilo mogoče prebrati.",
        ErrorKey.MISSING_AUDIO_FIELD: "Polje 'audio' manjka.",
        ErrorKey.EMPTY_AUDIO_FILE: "Naložena zvočna datoteka je prazna.",
        ErrorKey.FILE_SIZE_TOO_LARGE: "Naložena datoteka je prevelika.",
        ErrorKey.INVALID_TITLE: "Naslov ne sme biti prazen.",
        ErrorKey.RECORDING_SAVE_FAILED: "Posnetka ni bilo mogoče shraniti.",
        ErrorKey.STORAGE_UPLOAD_FAILED: "Zvočne datoteke ni bilo mogoče shraniti.",
        ErrorKey.STORAGE_DELETE_FAILED: "Zvočne datoteke ni bilo mogoče izbrisati.",
        ErrorKey.STORAGE_SIGN_FAILED: "Povezave do posnetka ni bilo mogoče ustvariti.",
        ErrorKey.AUDIO_FETCH_FAILED: "Zvočne datoteke ni bilo mogoče prenesti.",
        ErrorKey.TRANSCRIPTION_FAILED: "Prepis posnetka ni uspel.",
        ErrorKey.SUMMARY_FAILED: "Povzetka ni bilo mogoče ustvariti.",
        ErrorKey.SUMMARY_NOT_GENERATED: "Povzetek ni bil ustvarjen.",
        ErrorKey.TITLE_FAILED: "Naslova ni bilo mogoče ustvariti.",
        ErrorKey.TITLE_NOT_GENERATED: "Naslov ni bil ustvarjen.",
    },
}


def _request_language(request: Request) -> str | None:
    lang = request.query_params.get("lang") or request.headers.get("Accept-Language")
    if not lang:
        return None
    # "sl-SI,sl;q=0.9,en;q=0.8" -> "sl"
    return lang.split(",")[0].split(";")[0].split("-")[0].strip().lower()


def get_error_message(
    error_key: ErrorKey,
    request: Request = None,
    lang: str = "en",
    error_variables: Sequence[str] = (),
):
    """
    Retrieves an error message dynamically based on the user's language preference.
    Falls back to DEFAULT_LANGUAGE if no valid language is found.
    """
    if not isinstance(error_key, ErrorKey):
        raise ValueError(f"Invalid error key: {error_key}")

    user_lang = _request_language(request) if request else lang

    lang = (
        user_lang
        if user_lang in settings.SUPPORTED_LANGUAGES and user_lang in ERROR_MESSAGES
        else settings.DEFAULT_LANGUAGE
    )

    return (
        ERROR_MESSAGES.get(lang, ERROR_MESSAGES["en"]).get(error_key, error_key.value)
    ).format(*error_variables)


def validate_error_messages():
    """Logs a warning if a language is missing keys instead of failing."""
    base_keys = set(ErrorKey)

    for lang, messages in ERROR_MESSAGES.items():
        missing_keys = base_keys - set(messages.keys())
        if missing_keys:
            logger.warning(f"Warning: Missing keys in '{lang}': {missing_keys}")
