import pytest
from unittest.mock import MagicMock

from audionotes.core.exceptions.error_messages import ERROR_MESSAGES, ErrorKey, get_error_message


def _request(query=None, headers=None):
    request = MagicMock()
    request.query_params = query or {}
    request.headers = headers or {}
    return request


def test_every_key_has_a_message_in_every_language():
    for lang, messages in ERROR_MESSAGES.items():
        assert set(messages) == set(ErrorKey), lang


def test_default_language_without_request():
    assert get_error_message(ErrorKey.RECORDING_NOT_FOUND) == "Recording not found."


@pytest.mark.parametrize(
    "request_obj",
    [
        _request(query={"lang": "sl"}),
        _request(headers={"Accept-Language": "sl-SI,sl;q=0.9,en;q=0.8"}),
    ],
)
def test_language_from_request(request_obj):
    assert get_error_message(ErrorKey.RECORDING_NOT_FOUND, request=request_obj) == "Posnetek ne obstaja."


def test_unsupported_language_falls_back():
    message = get_error_message(ErrorKey.RECORDING_NOT_FOUND, request=_request(query={"lang": "de"}))

    assert message == "Recording not found."


def test_rejects_non_enum_keys():
    with pytest.raises(ValueError):
        get_error_message("recording_not_found")
