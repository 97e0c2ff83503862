"""RS256 signature checks over compact-serialized tokens."""
from typing import Any, Dict, NamedTuple

from jose import jwk, jws
from jose.constants import ALGORITHMS
from jose.exceptions import JWSError
from jose.utils import base64url_decode

SUPPORTED_ALGORITHMS = (ALGORITHMS.RS256,)


class ParsedToken(NamedTuple):
    header: Dict[str, Any]
    payload: bytes
    signing_input: bytes
    signature: bytes


def parse_token(token: str) -> ParsedToken:
    """Split a compact token into its decoded parts.

    Raises ``JWSError`` when the string is not a well-formed compact JWS.
    """
    header = jws.get_unverified_header(token)
    message, encoded_sig = token.rsplit(".", 1)
    encoded_payload = message.split(".", 1)[1]
    return ParsedToken(
        header=header,
        payload=base64url_decode(encoded_payload.encode("utf-8")),
        signing_input=message.encode("utf-8"),
        signature=base64url_decode(encoded_sig.encode("utf-8")),
    )


def verify(parsed: ParsedToken, key_data: Dict[str, Any]) -> bool:
    # the signature covers the header.payload bytes exactly as received
    alg = parsed.header.get("alg")
    if alg not in SUPPORTED_ALGORITHMS:
        raise JWSError(f"Algorithm not supported: {alg}")
    public_key = jwk.construct(key_data, algorithm=ALGORITHMS.RS256)
    return public_key.verify(parsed.signing_input, parsed.signature)
