from __future__ import annotations

import base64
import binascii
import json
import logging
import struct
import zlib
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from ulta_delta.errors import DecodeError, DecompressionError, ParseError, UltaError
from ulta_delta.vpn_config import VpnConfig


logger = logging.getLogger(__name__)

TOKEN_PREFIX = "vpn://"
HEADER_SIZE = 4

_RAW_WBITS = -zlib.MAX_WBITS
_GZIP_WBITS = 16 + zlib.MAX_WBITS


@dataclass(frozen=True)
class Strategy:
    name: str
    offset: int
    decompress: Callable[[bytes], bytes]

    def apply(self, raw: bytes) -> bytes:
        return self.decompress(raw[self.offset :])


def _inflate_zlib(data: bytes) -> bytes:
    return zlib.decompress(data)


def _inflate_raw(data: bytes) -> bytes:
    return zlib.decompress(data, _RAW_WBITS)


def _gunzip(data: bytes) -> bytes:
    return zlib.decompress(data, _GZIP_WBITS)


# Producers may prepend a 4-byte header (length or checksum) whose meaning is
# unknown. It is skipped, never read. Order decides which strategy wins.
DECOMPRESSION_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("offset-zlib", HEADER_SIZE, _inflate_zlib),
    Strategy("offset-raw", HEADER_SIZE, _inflate_raw),
    Strategy("offset-gzip", HEADER_SIZE, _gunzip),
    Strategy("zlib", 0, _inflate_zlib),
    Strategy("raw", 0, _inflate_raw),
    Strategy("gzip", 0, _gunzip),
)


def normalize_token(token: str) -> str:
    normalized = token.strip()
    if normalized.startswith(TOKEN_PREFIX):
        normalized = normalized[len(TOKEN_PREFIX) :]
    remainder = len(normalized) % 4
    if remainder:
        normalized += "=" * (4 - remainder)
    return normalized


def decode_payload(normalized: str) -> bytes:
    try:
        raw = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 payload: {exc}") from exc
    if not raw:
        raise DecodeError("VPN link payload is empty")
    return raw


def decompress_payload(raw: bytes, strategies: Sequence[Strategy] = DECOMPRESSION_STRATEGIES) -> bytes:
    for strategy in strategies:
        try:
            return strategy.apply(raw)
        except zlib.error as exc:
            logger.debug("Strategy %s failed: %s", strategy.name, exc)
    raise DecompressionError("Could not decompress data with any known method")


def parse_config(payload: bytes) -> dict[str, Any]:
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Payload is not valid UTF-8: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"Payload must be a JSON object, got {type(data).__name__}")
    return data


def decode_vpn_link(token: str) -> VpnConfig:
    """Decode a share link into its config.

    Runs normalize -> base64 -> decompress -> JSON. Every stage failure is
    re-raised as the same error type with a `Failed to decode VPN link:`
    prefix.
    """
    try:
        raw = decode_payload(normalize_token(token))
        payload = decompress_payload(raw)
        return VpnConfig(parse_config(payload))
    except UltaError as exc:
        raise type(exc)(f"Failed to decode VPN link: {exc}") from exc


def _compress(payload: bytes, framing: str) -> bytes:
    if framing == "zlib":
        return zlib.compress(payload, 6)
    if framing in ("raw", "gzip"):
        wbits = _RAW_WBITS if framing == "raw" else _GZIP_WBITS
        compressor = zlib.compressobj(6, zlib.DEFLATED, wbits)
        return compressor.compress(payload) + compressor.flush()
    raise ValueError(f"Unknown framing '{framing}', expected zlib, raw or gzip")


def encode_vpn_link(config: Mapping[str, Any], *, framing: str = "zlib", length_prefix: bool = True) -> str:
    payload = json.dumps(dict(config), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    blob = _compress(payload, framing)
    if length_prefix:
        if len(payload) > 0xFFFFFFFF:
            raise ValueError("Payload too large for a 4-byte length prefix")
        blob = struct.pack(">I", len(payload)) + blob
    encoded = base64.b64encode(blob).decode("ascii").rstrip("=")
    return f"{TOKEN_PREFIX}{encoded}"
