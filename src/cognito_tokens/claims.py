"""Claim rules shared by Cognito id and access tokens, plus the kind-specific ones."""
from typing import Any, Dict

from .errors import AuthError, ErrorCode


def validate_common_claims(payload: Dict[str, Any], issuer: str, now: float) -> Dict[str, Any]:
    if payload.get("iss") != issuer:
        raise AuthError("Invalid issuer in token.", ErrorCode.INVALID_ISSUER)

    # a token without exp is accepted
    exp = payload.get("exp")
    if exp is not None and now > exp:
        raise AuthError("Token is expired.", ErrorCode.TOKEN_EXPIRED)

    return payload


def validate_id_token_claims(payload: Dict[str, Any], client_id: str) -> None:
    if payload.get("aud") != client_id:
        raise AuthError("Invalid audience in id_token.", ErrorCode.INVALID_AUDIENCE)
    if payload.get("sub") is None:
        raise AuthError("Invalid id_token: Missing subject (sub) claim.", ErrorCode.MISSING_SUBJECT)


def validate_access_token_claims(payload: Dict[str, Any], client_id: str) -> None:
    token_client_id = payload.get("client_id")
    if token_client_id is not None and token_client_id != client_id:
        raise AuthError("Invalid access token: client_id mismatch.", ErrorCode.INVALID_CLIENT_ID_ACCESS)
