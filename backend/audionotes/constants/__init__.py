"""
Fixed values shared by the recording upload and processing flows.

These are not configurable: stored rows and the browser client both
depend on them.
"""

# Language tag written to every recording row and sent to transcription.
RECORDING_LANGUAGE = "sl"

# Title given to a new recording until processing generates a better one.
DEFAULT_RECORDING_TITLE = "Posnetek"

TITLE_MAX_LENGTH = 60
TITLE_PROMPT_MAX_CHARS = 1000
TITLE_MAX_TOKENS = 20

# Signed URL lifetimes, in seconds
SIGNED_URL_TTL_PROCESSING = 300
SIGNED_URL_TTL_PLAYBACK = 3600

RECORDINGS_KEY_PREFIX = "recordings"

__all__ = [
    "RECORDING_LANGUAGE",
    "DEFAULT_RECORDING_TITLE",
    "TITLE_MAX_LENGTH",
    "TITLE_PROMPT_MAX_CHARS",
    "TITLE_MAX_TOKENS",
    "SIGNED_URL_TTL_PROCESSING",
    "SIGNED_URL_TTL_PLAYBACK",
    "RECORDINGS_KEY_PREFIX",
]
