import logging
import threading
from typing import Any, Dict

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .errors import AuthError, ErrorCode
from .schemas import AccessTokenData, TokenData
from .verifier import CognitoTokenVerifier

logger = logging.getLogger(__name__)

app = FastAPI(title="Cognito token verification")

bearer = HTTPBearer()


_verifier = None
_verifier_lock = threading.Lock()


def _build_verifier() -> CognitoTokenVerifier:
    global _verifier
    with _verifier_lock:
        if _verifier is None:
            _verifier = CognitoTokenVerifier.from_settings(settings)
        return _verifier


def get_verifier() -> CognitoTokenVerifier:
    """Build the verifier on first use; the JWKS download happens here."""
    if settings is None:
        logger.error("Cognito settings are not configured")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="authentication unavailable")
    try:
        return _build_verifier()
    except AuthError as exc:
        logger.error("Could not initialise token verifier: %s (code %d)", exc.message, exc.code)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="authentication unavailable")


def _unauthorized(exc: AuthError) -> HTTPException:
    detail = "token expired" if exc.code == ErrorCode.TOKEN_EXPIRED else "invalid authentication token"
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_id_claims(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    verifier: CognitoTokenVerifier = Depends(get_verifier),
) -> Dict[str, Any]:
    try:
        return verifier.verify_id_token(credentials.credentials)
    except AuthError as exc:
        raise _unauthorized(exc)


def get_access_claims(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    verifier: CognitoTokenVerifier = Depends(get_verifier),
) -> Dict[str, Any]:
    try:
        return verifier.verify_access_token(credentials.credentials)
    except AuthError as exc:
        raise _unauthorized(exc)


def get_current_user(claims: Dict[str, Any] = Depends(get_id_claims)) -> TokenData:
    username = claims.get("cognito:username") or claims.get("username")
    return TokenData(sub=str(claims["sub"]), username=username)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/protected")
def protected(user: TokenData = Depends(get_current_user)) -> dict:
    return {"message": f"Hello, {user.username or user.sub}"}


@app.get("/protected/access", response_model=AccessTokenData)
def protected_access(claims: Dict[str, Any] = Depends(get_access_claims)) -> AccessTokenData:
    return AccessTokenData(sub=claims.get("sub"), client_id=claims.get("client_id"), scope=claims.get("scope"))
