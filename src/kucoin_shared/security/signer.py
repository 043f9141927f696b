# src/kucoin_shared/security/signer.py

# --- Built Ins  ---
import base64
import hashlib
import hmac
from typing import Optional, Union

# --- Installed  ---
from pydantic import SecretStr

# --- Local Application Imports ---
from ..core.enums import ApiGeneration, SignatureEncoding
from ..core.exceptions import ConfigurationError

_ENCODING_BY_GENERATION = {
    ApiGeneration.LEGACY: SignatureEncoding.HEX_OF_BASE64_MESSAGE,
    ApiGeneration.CURRENT: SignatureEncoding.BASE64_DIGEST,
}


def encoding_for(generation: ApiGeneration) -> SignatureEncoding:
    return _ENCODING_BY_GENERATION[generation]


def sign(
    secret: Optional[Union[str, SecretStr]],
    canonical_string: str,
    encoding: SignatureEncoding,
) -> str:
    """
    Computes the HMAC-SHA256 signature of a canonical string.

    Args:
        secret: The API secret. Empty or missing secrets are refused.
        canonical_string: Output of the canonicalizer for the same generation.
        encoding: BASE64_DIGEST for the current API, HEX_OF_BASE64_MESSAGE for legacy.

    Returns:
        The signature as it goes into the auth header.
    """
    raw_secret = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
    if not raw_secret:
        raise ConfigurationError("API secret is not configured; cannot sign request.")

    key = raw_secret.encode("utf-8")
    message = canonical_string.encode("utf-8")

    match encoding:
        case SignatureEncoding.BASE64_DIGEST:
            digest = hmac.new(key, message, hashlib.sha256).digest()
            return base64.b64encode(digest).decode("ascii")
        case SignatureEncoding.HEX_OF_BASE64_MESSAGE:
            # The legacy API signs the base64 text of the message, not the message itself.
            return hmac.new(key, base64.b64encode(message), hashlib.sha256).hexdigest()
    raise ValueError(f"Unsupported signature encoding: {encoding}")
