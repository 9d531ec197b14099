"""
Signature list loader.

Two formats are accepted:
  - a JSON array of strings: ["sig1", "sig2"]
  - a lenient brace list, as pasted from bot configs or explorers:
        {
          "sig1",
          "sig2",  // failed retry
        }
    Line comments, trailing commas and unquoted tokens are tolerated.

Order is preserved and duplicates are kept. A malformed file logs the
cause and yields an empty list; callers treat that as "nothing to reconcile".
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from tip_reconciler.core.exceptions import SignatureFileMalformed
from tip_reconciler.recon_logging import get_logger

logger = get_logger(__name__)

LINE_COMMENT_RE = re.compile(r"//[^\n]*")
QUOTE_CHARS = "\"'"


def _parse_brace_list(content: str) -> list[str]:
    body = content.replace("{", "").replace("}", "")
    out: list[str] = []
    for piece in body.split(","):
        sig = piece.strip().strip(QUOTE_CHARS).strip()
        if sig:
            out.append(sig)
    return out


def _parse_json_array(content: str) -> list[str]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SignatureFileMalformed(f"not a brace list or JSON array: {e}") from e
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise SignatureFileMalformed("JSON content must be an array of strings")
    return data


def parse_signatures(content: str) -> list[str]:
    """
    Parse signature file contents. Raises SignatureFileMalformed.
    """
    stripped = LINE_COMMENT_RE.sub("", content).strip()
    if stripped.startswith("{"):
        return _parse_brace_list(stripped)
    return _parse_json_array(stripped)


def load_signatures_text(content: str) -> list[str]:
    """Parse contents; on failure log and return []."""
    try:
        return parse_signatures(content)
    except SignatureFileMalformed as e:
        logger.error("signature_file_malformed", error=str(e))
        return []


def _read_signature_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SignatureFileMalformed(f"not UTF-8 text: {e}") from e


def load_signatures(path: Path | str) -> list[str]:
    """Read and parse a signature file; undecodable or malformed content yields []."""
    path = Path(path)
    try:
        signatures = parse_signatures(_read_signature_file(path))
    except SignatureFileMalformed as e:
        logger.error("signature_file_malformed", path=str(path), error=str(e))
        signatures = []
    logger.info("signatures_loaded", path=str(path), count=len(signatures))
    return signatures
