from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from ulta_delta.errors import MissingApiKeyError


@dataclass(frozen=True)
class VpnConfig:
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def require_api_key(self) -> str:
        value = self.data.get("api_key")
        if value is None:
            raise MissingApiKeyError("API key is required: decoded link has no 'api_key' field")
        if not isinstance(value, str):
            raise MissingApiKeyError(f"API key must be a string, got {type(value).__name__}")
        if not value:
            raise MissingApiKeyError("API key is required: 'api_key' is empty")
        return value

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(dict(self.data), indent=indent, ensure_ascii=False)
