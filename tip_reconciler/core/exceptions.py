"""
Application-level exceptions.

TransportFailure, MalformedPayload and MemoDecodeFailure are per-signature
and are caught at the component that raised them. SignatureFileMalformed is
caught by the signature loader. RequiredFileMissing aborts a run.
"""

from __future__ import annotations

from pathlib import Path


class ReconcilerError(Exception):
    """Base class for all tip_reconciler errors."""


class TransportFailure(ReconcilerError):
    """Network/API error or an upstream response that could not be decoded."""


class MalformedPayload(ReconcilerError):
    """A required field is missing from an otherwise successful response."""


class MemoDecodeFailure(ReconcilerError):
    """Memo instruction data is not base58 or not valid UTF-8."""


class SignatureFileMalformed(ReconcilerError):
    """Signature file is neither a brace list nor a JSON array of strings."""


class RequiredFileMissing(ReconcilerError):
    """An input file the pipeline cannot run without does not exist."""

    def __init__(self, path: Path | str, role: str = "input") -> None:
        self.path = Path(path)
        self.role = role
        super().__init__(f"{role} file not found: {self.path}")
