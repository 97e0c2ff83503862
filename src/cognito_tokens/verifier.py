"""Cognito token verifier.

Fetches the user pool's JWKS once at construction (through the given key
cache), then checks each token's RS256 signature against the key named by its
``kid`` and validates the issuer and expiry. ``verify_id_token`` and
``verify_access_token`` add the checks specific to each token kind.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from .cache import KeyCache, NoCache
from .claims import validate_access_token_claims, validate_common_claims, validate_id_token_claims
from .errors import AuthError, ErrorCode
from .jwks import JWKSFetcher, KeySet, cache_key_for, issuer_url
from . import signature

logger = logging.getLogger(__name__)


class CognitoTokenVerifier:
    def __init__(
        self,
        region: str,
        user_pool_id: str,
        client_id: str,
        cache: Optional[KeyCache] = None,
        *,
        timeout: float = 5.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.region = region
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        self.issuer = issuer_url(region, user_pool_id)
        self.cache_key = cache_key_for(user_pool_id)
        self.cache = cache if cache is not None else NoCache()
        self._clock = clock or time.time

        # raises AuthError when the key set cannot be obtained
        self.jwks: KeySet = JWKSFetcher(self.cache, timeout=timeout).fetch_key_set(self.issuer, self.cache_key)

    @classmethod
    def from_settings(cls, settings_obj, cache: Optional[KeyCache] = None) -> "CognitoTokenVerifier":
        return cls(
            settings_obj.region,
            settings_obj.user_pool_id,
            settings_obj.app_client_id,
            cache,
            timeout=getattr(settings_obj, "jwks_timeout", 5.0),
        )

    def _find_key(self, kid: str) -> Optional[Dict[str, Any]]:
        for key in self.jwks.get("keys", []):
            if key.get("kid") == kid:
                return key
        return None

    def _log_error(self, exc: AuthError) -> None:
        logger.warning("Token verification failed: %s (code %d)", exc.message, exc.code)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify the signature, issuer and expiry of ``token`` and return its claims.

        Raises AuthError. Unexpected parsing or crypto errors are reported as
        ``ErrorCode.INVALID_TOKEN``.
        """
        try:
            parsed = signature.parse_token(token)
            kid = parsed.header.get("kid")
            if not kid:
                raise AuthError("No 'kid' found in JWT header.", ErrorCode.NO_KID_IN_TOKEN)

            key_data = self._find_key(kid)
            if key_data is None:
                raise AuthError(f"No matching JWK found for kid: {kid}", ErrorCode.NO_JWK_FOR_KID)

            if not signature.verify(parsed, key_data):
                raise AuthError("JWT signature verification failed.", ErrorCode.SIGNATURE_VERIFICATION_FAILED)

            try:
                payload = json.loads(parsed.payload) if parsed.payload else None
            except ValueError:
                payload = None
            if not payload or not isinstance(payload, dict):
                raise AuthError("Failed to decode JWT payload.", ErrorCode.TOKEN_PAYLOAD_DECODING_FAILED)

            return validate_common_claims(payload, self.issuer, self._clock())
        except AuthError as exc:
            self._log_error(exc)
            raise
        except Exception as exc:
            error = AuthError("Invalid token.", ErrorCode.INVALID_TOKEN)
            self._log_error(error)
            raise error from exc

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        payload = self.verify_token(token)
        try:
            validate_id_token_claims(payload, self.client_id)
        except AuthError as exc:
            self._log_error(exc)
            raise
        return payload

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        payload = self.verify_token(token)
        try:
            validate_access_token_claims(payload, self.client_id)
        except AuthError as exc:
            self._log_error(exc)
            raise
        return payload
