from core.errors import (
    HTTP_STATUS,
    USER_MESSAGES,
    AuthenticationError,
    ErrorCode,
    InvalidInputError,
    NotFoundError,
    ParseError,
    StorageUnavailableError,
    TripkeeperError,
)


def test_all_error_codes_have_user_message():
    for code in ErrorCode:
        assert code in USER_MESSAGES


def test_all_error_codes_have_http_status():
    for code in ErrorCode:
        assert code in HTTP_STATUS


def test_user_message_lookup():
    err = TripkeeperError("scan timed out", code=ErrorCode.STORAGE_UNAVAILABLE)
    assert err.user_message == "Storage is temporarily unavailable. Please try again later."


def test_subclasses_carry_default_codes():
    assert NotFoundError("gone").code == ErrorCode.NOT_FOUND
    assert InvalidInputError("bad").code == ErrorCode.INVALID_INPUT
    assert StorageUnavailableError("down").code == ErrorCode.STORAGE_UNAVAILABLE
    assert ParseError("junk").code == ErrorCode.PARSE_ERROR
    assert AuthenticationError("who").code == ErrorCode.AUTH_FAILED
    assert TripkeeperError("boom").code == ErrorCode.INTERNAL_ERROR


def test_status_codes_at_api_boundary():
    assert NotFoundError("gone").status_code == 404
    assert InvalidInputError("bad").status_code == 400
    assert StorageUnavailableError("down").status_code == 503
    assert ParseError("junk").status_code == 500
    assert AuthenticationError("who").status_code == 401
    assert TripkeeperError("boom").status_code == 500


def test_explicit_code_overrides_default():
    err = NotFoundError("gone", code=ErrorCode.INTERNAL_ERROR)
    assert err.code == ErrorCode.INTERNAL_ERROR


def test_user_message_never_exposes_internal_message():
    internal = "trip:u1:secret-id has malformed JSON"
    err = ParseError(internal)
    assert internal not in err.user_message
