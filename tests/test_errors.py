import pytest

from pin_intent.common.errors import (
    ErrorCode,
    ErrorResponse,
    IntentError,
    NetworkError,
    ProcessingError,
    SecurityError,
    ValidationError,
    get_error_code,
    is_intent_error,
    wrap_error,
)


def test_default_message_for_known_code():
    err = IntentError(ErrorCode.INTENT_NOT_FOUND)
    assert err.message == "Intent not found"
    assert str(err) == "[INTENT_NOT_FOUND] Intent not found"


def test_message_with_details():
    err = IntentError(ErrorCode.INVALID_CONFIGURATION, "MaxPeers must be positive", "cfg")
    assert str(err) == "[INVALID_CONFIGURATION] MaxPeers must be positive: cfg"


def test_string_code_is_normalised():
    err = IntentError("RATE_LIMIT_EXCEEDED")
    assert err.code is ErrorCode.RATE_LIMIT_EXCEEDED
    assert err.message == "Rate limit exceeded"


def test_unknown_code_kept_as_text():
    err = IntentError("CUSTOM", "custom failure")
    assert err.code == "CUSTOM"
    assert str(err) == "[CUSTOM] custom failure"


def test_intent_error_can_be_raised_and_caught():
    err = IntentError(ErrorCode.INTENT_EXPIRED)
    assert err.message == "Intent has expired"
    with pytest.raises(IntentError) as info:
        raise err
    assert info.value.code == ErrorCode.INTENT_EXPIRED
    assert str(info.value) == "[INTENT_EXPIRED] Intent has expired"


def test_validation_error_details():
    err = ValidationError("tag_fee", "abc", "Tag fee must be a valid integer")
    assert err.code == ErrorCode.VALIDATION_ERROR
    assert err.details == "field: tag_fee, value: abc"
    assert err.field == "tag_fee"
    assert err.value == "abc"
    assert str(err) == (
        "[VALIDATION_ERROR] Tag fee must be a valid integer: field: tag_fee, value: abc"
    )


def test_security_error_details():
    err = SecurityError("bad key", "denied")
    assert err.code == ErrorCode.SECURITY_ERROR
    assert err.details == "bad key"
    assert err.reason == "bad key"


def test_network_error_details():
    err = NetworkError("peer1", "intent.broadcast", "publish failed")
    assert err.code == ErrorCode.NETWORK_ERROR
    assert err.details == "peer: peer1, topic: intent.broadcast"
    assert err.to_dict()["peer_id"] == "peer1"


def test_processing_error_details():
    err = ProcessingError("validation", "intent_1", "stage failed")
    assert err.code == ErrorCode.PROCESSING_ERROR
    assert err.details == "stage: validation, intent: intent_1"
    assert err.intent_id == "intent_1"


@pytest.mark.parametrize(
    "err",
    [
        IntentError(ErrorCode.MATCHING_FAILED),
        ValidationError("f", "v", "m"),
        SecurityError("r", "m"),
        NetworkError("p", "t", "m"),
        ProcessingError("s", "i", "m"),
    ],
)
def test_is_intent_error_true_for_family(err):
    assert is_intent_error(err) is True
    assert get_error_code(err) == str(err.code)


def test_non_intent_error():
    err = ValueError("boom")
    assert is_intent_error(err) is False
    assert get_error_code(err) == "UNKNOWN_ERROR"


def test_wrap_error_keeps_original():
    original = RuntimeError("disk full")
    wrapped = wrap_error(original, ErrorCode.STORAGE_UNAVAILABLE, "Storage is unavailable")
    assert wrapped.details == "disk full"
    assert wrapped.__cause__ is original
    assert get_error_code(wrapped) == "STORAGE_UNAVAILABLE"
    assert str(wrapped) == "[STORAGE_UNAVAILABLE] Storage is unavailable: disk full"


def test_to_dict_omits_empty_details():
    err = IntentError(ErrorCode.BROADCAST_FAILED)
    assert err.to_dict() == {
        "code": "BROADCAST_FAILED",
        "message": "Failed to broadcast intent",
    }


def test_error_response_to_dict():
    err = IntentError(ErrorCode.PERMISSION_DENIED)
    response = ErrorResponse(err, "req-1", 42)
    data = response.to_dict()
    assert data["error"] == err.to_dict()
    assert data["request_id"] == "req-1"
    assert data["timestamp"] == 42


def test_error_response_omits_empty_request_id():
    response = ErrorResponse(IntentError(ErrorCode.PERMISSION_DENIED), timestamp=7)
    assert "request_id" not in response.to_dict()
    assert response.to_dict()["timestamp"] == 7