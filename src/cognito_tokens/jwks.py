"""Fetching of the Cognito user pool JSON Web Key Set."""
import logging
from typing import Any, Dict

import requests

from .cache import KeyCache
from .errors import AuthError, ErrorCode

logger = logging.getLogger(__name__)

KeySet = Dict[str, Any]

JWKS_CACHE_MINUTES = 60


def issuer_url(region: str, user_pool_id: str) -> str:
    return f"https://cognito-idp.{region}.amazonaws.com/{user_pool_id}"


def jwks_url(issuer: str) -> str:
    return f"{issuer}/.well-known/jwks.json"


def cache_key_for(user_pool_id: str) -> str:
    return f"cognito_jwks_{user_pool_id}"


class JWKSFetcher:
    def __init__(self, cache: KeyCache, timeout: float = 5.0):
        self.cache = cache
        self.timeout = timeout

    def fetch_key_set(self, issuer: str, cache_key: str) -> KeySet:
        """Return the key set for ``issuer``, from the cache when possible.

        A cached value is returned as-is. On a miss the set is downloaded,
        checked for a ``keys`` list and stored for an hour.
        """
        cached = self.cache.get(cache_key)
        if cached:
            logger.debug("JWKS cache hit key=%s", cache_key)
            return cached

        url = jwks_url(issuer)
        logger.info("Fetching JWKS from %s", url)
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("JWKS fetch failed url=%s error=%s", url, exc)
            raise AuthError(f"Could not fetch JWKS from {url}", ErrorCode.JWKS_FETCH_FAILED) from exc
        if not resp.content:
            logger.error("JWKS fetch returned an empty body url=%s", url)
            raise AuthError(f"Could not fetch JWKS from {url}", ErrorCode.JWKS_FETCH_FAILED)

        try:
            key_set = resp.json()
        except ValueError:
            key_set = None
        if not isinstance(key_set, dict) or not isinstance(key_set.get("keys"), list):
            logger.error("JWKS response from %s has no 'keys' list", url)
            raise AuthError("Invalid JWKS format - 'keys' not found.", ErrorCode.JWKS_INVALID_FORMAT)

        self.cache.put(cache_key, key_set, JWKS_CACHE_MINUTES)
        return key_set
