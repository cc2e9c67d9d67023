"""Best-effort decoding of raw file bytes into text."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Tried in order; the first codec that accepts the bytes wins.
# "utf-8-sig" reads plain UTF-8 and drops a leading byte order mark.
# "utf-16" honours a BOM and otherwise uses the platform's native byte order.
CANDIDATE_ENCODINGS = (
    "utf-8-sig",
    "utf-16",
    "utf-16-le",
    "utf-16-be",
    "ascii",
)

FALLBACK_ENCODING = "utf-8"


@dataclass(frozen=True)
class DecodeResult:
    """Result of decoding a byte sequence.

    Attributes:
        text: The decoded text.
        encoding: Codec that produced the text.
        used_fallback: True when no candidate matched and invalid sequences
            were replaced with U+FFFD.
    """

    text: str
    encoding: str
    used_fallback: bool = False


def decode(data: bytes) -> DecodeResult:
    """Decode bytes by trying each candidate encoding in priority order.

    A candidate "succeeds" when its codec raises no error. That does not
    guarantee the text is what the author wrote: a mismatched codec may
    accept the bytes and produce garbled text, which is not detected here.

    Args:
        data: Raw file content.

    Returns:
        DecodeResult. Never raises; empty input gives empty text.
    """
    if not data:
        return DecodeResult(text="", encoding=FALLBACK_ENCODING)

    for encoding in CANDIDATE_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeError:
            continue
        logger.debug("Decoded %d bytes with %s, length: %d", len(data), encoding, len(text))
        return DecodeResult(text=text, encoding=encoding)

    text = data.decode(FALLBACK_ENCODING, errors="replace")
    logger.warning(
        "No candidate encoding matched %d bytes; using %s with replacement characters",
        len(data),
        FALLBACK_ENCODING,
    )
    return DecodeResult(text=text, encoding=FALLBACK_ENCODING, used_fallback=True)


def decode_bytes(data: bytes) -> str:
    """Decode bytes to text, see :func:`decode`."""
    return decode(data).text
