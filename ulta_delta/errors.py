from __future__ import annotations

from typing import Optional


class UltaError(RuntimeError):
    """Base class for failures the CLI reports as `[!] Error: ...`."""


class DecodeError(UltaError):
    pass


class DecompressionError(UltaError):
    pass


class ParseError(UltaError):
    pass


class MissingApiKeyError(UltaError):
    pass


class RemoteError(UltaError):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FilesystemError(UltaError):
    pass
