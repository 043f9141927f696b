# src/kucoin_shared/clients/dispatcher.py

# --- Built Ins ---
from typing import Any, Dict, Optional

# --- Installed ---
import orjson
from loguru import logger as log

# --- Local Application Imports ---
from .transport import BaseTransport, RawResponse
from ..config.models import Credentials, ExchangeSettings
from ..core.enums import ApiGeneration, EnvelopeShape
from ..core.exceptions import (
    ConfigurationError,
    ExchangeBusinessError,
    MalformedResponseError,
    TransportError,
)
from ..exchanges.constants import CURRENT_SUCCESS_CODE, Headers
from ..security.canonical import CanonicalRequest, ParamsInput, flatten_payload, serialize_body
from ..security.clock import ClockSource
from ..security.signer import encoding_for, sign

_DEFAULT_ENVELOPE = {
    ApiGeneration.LEGACY: EnvelopeShape.LEGACY,
    ApiGeneration.CURRENT: EnvelopeShape.CURRENT,
}


class RequestDispatcher:
    """
    Turns one logical call into one HTTP exchange: signs it when asked,
    sends it through the transport and unwraps the response envelope.

    Holds no mutable state of its own; credentials and the clock source are
    read-only from here.
    """

    def __init__(
        self,
        settings: ExchangeSettings,
        credentials: Credentials,
        transport: BaseTransport,
        clock: Optional[ClockSource] = None,
    ):
        self.generation = settings.generation
        self._base_url = settings.base_url
        self._user_agent = settings.user_agent
        self._credentials = credentials
        self._transport = transport
        self.clock = clock

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_configured_for(self.generation)

    def _encode_body(self, body: Any) -> tuple[Optional[str], Optional[str]]:
        """Returns the wire body and its content type. Bytes sent equal bytes signed."""
        if body is None:
            return None, None
        if self.generation is ApiGeneration.LEGACY:
            return flatten_payload(body) or None, "application/x-www-form-urlencoded"
        return serialize_body(body) or None, "application/json"

    def _auth_headers(self, request: CanonicalRequest) -> Dict[str, str]:
        secret = self._credentials.secret
        signature = sign(secret, request.to_string(), encoding_for(self.generation))
        nonce = str(request.nonce)

        match self.generation:
            case ApiGeneration.CURRENT:
                return {
                    Headers.API_KEY: self._credentials.key,
                    Headers.SIGN: signature,
                    Headers.TIMESTAMP: nonce,
                    Headers.PASSPHRASE: self._credentials.passphrase.get_secret_value(),
                }
            case ApiGeneration.LEGACY:
                return {
                    Headers.API_KEY: self._credentials.key,
                    Headers.NONCE: nonce,
                    Headers.SIGNATURE: signature,
                }
        raise ValueError(f"Unsupported API generation: {self.generation}")

    async def dispatch(
        self,
        method: str,
        path: str,
        params: ParamsInput = None,
        body: Any = None,
        signed: bool = False,
        envelope: Optional[EnvelopeShape] = None,
    ) -> Any:
        """
        Executes a single request and returns the envelope's payload.

        Raises:
            ConfigurationError: signed call without complete credentials (before any I/O).
            TransportError: no usable response (MalformedResponseError for bad bodies).
            ExchangeBusinessError: the exchange answered with a failure envelope.
        """
        method = method.upper()
        shape = envelope or _DEFAULT_ENVELOPE[self.generation]

        if signed:
            if not self.is_configured:
                required = "key, secret and passphrase" if self.generation is ApiGeneration.CURRENT else "key and secret"
                raise ConfigurationError(f"Signed {method} {path} requires API {required}.")
            if self.clock is None:
                raise ConfigurationError("No clock source attached; cannot timestamp signed request.")
            nonce = await self.clock.get_timestamp()
        else:
            nonce = 0

        request = CanonicalRequest.build(self.generation, method, path, nonce, params=params, body=body)
        headers = {"User-Agent": self._user_agent}
        if signed:
            headers.update(self._auth_headers(request))

        wire_body, content_type = self._encode_body(body)
        if content_type and wire_body:
            headers["Content-Type"] = content_type

        url = f"{self._base_url}{request.path_with_query}"
        log.debug(f"[API CALL] {method} {request.path_with_query} (signed={signed})")

        raw = await self._transport.request(method, url, headers, wire_body)
        return self.unwrap(raw, shape, f"{method} {path}")

    def unwrap(self, raw: RawResponse, shape: EnvelopeShape, context: str = "") -> Any:
        """Normalizes the three envelope shapes into a payload or a typed failure."""
        ok_status = 200 <= raw.status < 300
        try:
            document = orjson.loads(raw.body)
        except orjson.JSONDecodeError as e:
            if not ok_status:
                raise TransportError(f"{context}: HTTP {raw.status} with non-JSON body", raw.status) from e
            raise MalformedResponseError(f"{context}: response body is not JSON", raw.status) from e

        match shape:
            case EnvelopeShape.LEGACY:
                if isinstance(document, dict) and isinstance(document.get("success"), bool):
                    if document["success"]:
                        return document.get("data")
                    self._raise_business(document.get("code"), document.get("msg"), raw.status, context)
            case EnvelopeShape.CURRENT:
                if isinstance(document, dict) and "code" in document:
                    code = str(document["code"])
                    if code == CURRENT_SUCCESS_CODE:
                        return document.get("data")
                    self._raise_business(code, document.get("msg"), raw.status, context)
            case EnvelopeShape.BARE:
                if ok_status:
                    return document

        if not ok_status:
            raise TransportError(f"{context}: HTTP {raw.status} without a {shape.name} envelope", raw.status)
        raise MalformedResponseError(f"{context}: response does not match the {shape.name} envelope", raw.status)

    @staticmethod
    def _raise_business(code: Any, message: Any, status: int, context: str):
        code_text = None if code is None else str(code)
        log.error(f"[API RESPONSE] {context} rejected by KuCoin. Code: {code_text}, message: {message}")
        raise ExchangeBusinessError(code_text, message, status)
