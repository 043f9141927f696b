# src/kucoin_shared/security/canonical.py

"""
Builds the exact string that is signed for a request.

Two rules exist and must never be mixed:

    legacy:  "{path}/{nonce}/{sorted query tokens | flattened payload}"
    current: "{nonce}{VERB}{path?query}{compact key-sorted JSON body | ''}"

The exchange recomputes the same string server-side, so any byte of
divergence rejects the request. Everything here is a pure function.
"""

# --- Built Ins  ---
import dataclasses
from collections.abc import Iterable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import quote

# --- Installed  ---
import orjson
from pydantic import BaseModel, ConfigDict

# --- Local Application Imports ---
from ..core.enums import ApiGeneration
from ..utils.formatter import format_invariant

ParamsInput = Union[Mapping[str, Any], Iterable[tuple[str, Any]], None]


class CanonicalRequest(BaseModel):
    """The identifying data of one request, frozen for the lifetime of a signature."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    generation: ApiGeneration
    method: str
    path: str
    sorted_parameters: tuple[tuple[str, str], ...] = ()
    body: Any = None
    nonce: int

    @classmethod
    def build(
        cls,
        generation: ApiGeneration,
        method: str,
        path: str,
        nonce: int,
        params: ParamsInput = None,
        body: Any = None,
    ) -> "CanonicalRequest":
        return cls(
            generation=generation,
            method=method.upper(),
            path=path,
            sorted_parameters=sort_parameters(params),
            body=body,
            nonce=nonce,
        )

    @property
    def query_string(self) -> str:
        return _encode_pairs(self.sorted_parameters)

    @property
    def path_with_query(self) -> str:
        query = self.query_string
        return f"{self.path}?{query}" if query else self.path

    def to_string(self) -> str:
        match self.generation:
            case ApiGeneration.LEGACY:
                if self.sorted_parameters:
                    signed_tail = "&".join(f"{k}={v}" for k, v in self.sorted_parameters)
                elif self.body is not None:
                    signed_tail = flatten_payload(self.body)
                else:
                    signed_tail = ""
                return f"{self.path}/{self.nonce}/{signed_tail}"
            case ApiGeneration.CURRENT:
                return f"{self.nonce}{self.method}{self.path_with_query}{serialize_body(self.body)}"
        raise ValueError(f"Unsupported API generation: {self.generation}")


def collapse_parameters(params: ParamsInput) -> dict[str, str]:
    """
    Formats parameter values and drops `None`. A key supplied more than once
    keeps its last value (last write wins), matching the exchange's own
    recomputation for the legacy API.
    """
    if not params:
        return {}
    items = params.items() if isinstance(params, Mapping) else params
    collapsed: dict[str, str] = {}
    for key, value in items:
        if value is None:
            continue
        collapsed[str(key)] = format_invariant(value)
    return collapsed


def sort_parameters(params: ParamsInput) -> tuple[tuple[str, str], ...]:
    # Ordinal (code point) order of the "key=value" tokens, on a copy.
    collapsed = collapse_parameters(params)
    return tuple(sorted(collapsed.items(), key=lambda kv: f"{kv[0]}={kv[1]}"))


def build_query_string(params: ParamsInput) -> str:
    """The percent-encoded query string, in the same order the signature uses."""
    return _encode_pairs(sort_parameters(params))


def _encode_pairs(pairs: Iterable[tuple[str, str]]) -> str:
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)


def _public_fields(payload: Any) -> list[tuple[str, Any]]:
    if isinstance(payload, BaseModel):
        return [
            (field.alias or name, getattr(payload, name))
            for name, field in type(payload).model_fields.items()
        ]
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return [(f.name, getattr(payload, f.name)) for f in dataclasses.fields(payload)]
    if isinstance(payload, Mapping):
        return list(payload.items())
    return [(k, v) for k, v in vars(payload).items() if not k.startswith("_")]


def flatten_payload(payload: Any) -> str:
    """
    Legacy rule for bodies: 'name=value' pairs of the payload's public fields,
    in declaration order, '&'-joined.
    """
    return "&".join(f"{name}={format_invariant(value)}" for name, value in _public_fields(payload) if value is not None)


def _to_json_ready(value: Any) -> Any:
    # Non-integral numbers travel as invariant strings so no serializer can pick an exponent form.
    if isinstance(value, BaseModel):
        return _to_json_ready(value.model_dump(by_alias=True, exclude_none=True))
    if isinstance(value, Mapping):
        return {str(k): _to_json_ready(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_to_json_ready(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (float, Decimal)):
        return format_invariant(value)
    return value


def serialize_body(body: Any) -> str:
    """Compact, key-sorted JSON; the empty string when there is no body."""
    if body is None:
        return ""
    ready = _to_json_ready(body)
    if not ready:
        return ""
    return orjson.dumps(ready, option=orjson.OPT_SORT_KEYS).decode()


def canonicalize(
    generation: ApiGeneration,
    method: str,
    path: str,
    nonce: int,
    params: ParamsInput = None,
    body: Optional[Any] = None,
) -> str:
    return CanonicalRequest.build(generation, method, path, nonce, params=params, body=body).to_string()
