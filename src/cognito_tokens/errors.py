from enum import IntEnum


class ErrorCode(IntEnum):
    JWKS_FETCH_FAILED = 1001
    JWKS_INVALID_FORMAT = 1002
    NO_KID_IN_TOKEN = 1003
    NO_JWK_FOR_KID = 1004
    SIGNATURE_VERIFICATION_FAILED = 1005
    TOKEN_PAYLOAD_DECODING_FAILED = 1006
    INVALID_TOKEN = 1007
    INVALID_ISSUER = 1008
    TOKEN_EXPIRED = 1009
    INVALID_AUDIENCE = 1010
    MISSING_SUBJECT = 1011
    INVALID_CLIENT_ID_ACCESS = 1012


class AuthError(Exception):
    """Raised for every token verification or key set failure.

    Callers catch this one type and branch on ``code``.
    """

    def __init__(self, message: str, code: ErrorCode):
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)

    def __repr__(self) -> str:
        return f"AuthError({self.message!r}, {self.code.name})"
