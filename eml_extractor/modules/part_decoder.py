"""
Part Body Decoder
Turns the raw bytes of a MIME leaf into normalized text, and undoes
Content-Transfer-Encoding for attachment payloads.

Both decoders are best-effort: a failure is reported through the result's
``failure`` tag together with a usable fallback value, so one broken part
never aborts the whole extraction.
"""

import base64
import binascii
import codecs
import logging
import quopri
from dataclasses import dataclass
from typing import Optional

from .html_converter import html_to_text
from ..utils.sanitization import sanitize_for_logging


logger = logging.getLogger(__name__)

# Spellings that are taken as "already UTF-8" without a codec lookup
UTF8_SPELLINGS = ("", "utf-8", "UTF-8")

BASE64 = "base64"
QUOTED_PRINTABLE = "quoted-printable"

UNKNOWN_CHARSET = "unknown-charset"
CHARSET_DECODE_ERROR = "charset-decode-error"
TRANSFER_DECODE_ERROR = "transfer-decode-error"


@dataclass(frozen=True)
class CharsetResult:
    """Decoded text; ``failure`` names what went wrong when the fallback was used"""
    text: str
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class TransferResult:
    """Decoded payload; on failure ``data`` holds the original encoded bytes"""
    data: bytes
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def decode_charset(data: bytes, charset: Optional[str]) -> CharsetResult:
    """
    Transcode bytes in a declared charset to text

    The charset label is resolved through the codec registry. An unknown
    label falls back to reading the original bytes as UTF-8.

    Args:
        data: Raw part bytes
        charset: Declared charset parameter (may be empty or None)

    Returns:
        CharsetResult with the decoded text
    """
    charset = charset or ""
    if charset in UTF8_SPELLINGS:
        return CharsetResult(_as_text(data))

    try:
        codec = codecs.lookup(charset)
    except LookupError:
        return CharsetResult(_as_text(data), UNKNOWN_CHARSET)

    try:
        return CharsetResult(data.decode(codec.name, errors="replace"))
    except (LookupError, UnicodeDecodeError, TypeError) as e:
        # Some codecs (e.g. rot13, hex) are registered but are not text encodings
        logger.debug("Codec %s rejected payload: %s", codec.name, e)
        return CharsetResult(_as_text(data), CHARSET_DECODE_ERROR)


def decode_part_body(data: bytes, charset: Optional[str], media_type: str) -> str:
    """
    Produce normalized text for one body part

    Args:
        data: Part bytes with transfer encoding already removed
        charset: Declared charset parameter
        media_type: Lower-cased media type of the part

    Returns:
        Text, converted from HTML when the part is text/html, stripped at both ends
    """
    result = decode_charset(data, charset)
    if not result.ok:
        logger.warning(
            "Could not decode charset '%s' (%s); using raw bytes as text",
            sanitize_for_logging(charset or ""), result.failure
        )

    text = result.text
    if media_type == "text/html":
        text = html_to_text(text)

    return text.strip()


def decode_transfer_encoding(data: bytes, encoding: Optional[str]) -> TransferResult:
    """
    Undo a Content-Transfer-Encoding

    Only the exact values ``base64`` and ``quoted-printable`` are decoded;
    anything else (including no header) passes the bytes through.
    """
    try:
        if encoding == BASE64:
            return TransferResult(base64.b64decode(data))
        if encoding == QUOTED_PRINTABLE:
            return TransferResult(quopri.decodestring(data))
    except (binascii.Error, ValueError) as e:
        logger.debug("Transfer decoding (%s) failed: %s", encoding, e)
        return TransferResult(data, TRANSFER_DECODE_ERROR)

    return TransferResult(data)


def _as_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")
