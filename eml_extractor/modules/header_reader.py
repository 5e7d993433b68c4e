"""
Header Metadata Reader
Extracts and normalizes the identity and thread headers of the top-level
message (From, To, Cc, Subject, Date, Message-ID, In-Reply-To, References).
"""

import logging
import re
from email.header import Header, decode_header, make_header
from email.message import Message
from email.utils import getaddresses, parsedate_to_datetime
from typing import List, Optional, Tuple

from .email_data import EmailMetadata


logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN_SENDER = "Unknown"

# CRLF followed by whitespace is a folded header continuation
FOLDING_PATTERN = re.compile(r"\r?\n(?=[ \t])")


def read_metadata(msg: Message) -> EmailMetadata:
    """
    Build the EmailMetadata snapshot for a parsed message

    Args:
        msg: Top-level message

    Returns:
        EmailMetadata with decoded, human-readable values
    """
    return EmailMetadata(
        from_address=format_address(header_text(msg.get("From"))),
        to=tuple(format_address_list(header_text(msg.get("To")))),
        cc=tuple(format_address_list(header_text(msg.get("Cc")))),
        subject=decode_header_value(msg.get("Subject")),
        date=format_date(header_text(msg.get("Date"))),
        message_id=_raw_header(msg, "Message-ID"),
        in_reply_to=_raw_header(msg, "In-Reply-To"),
        references=_raw_header(msg, "References"),
    )


def header_text(value) -> str:
    """
    Return a header value as text, reading raw 8-bit bytes as UTF-8

    The compat32 parser hands back headers that contain raw 8-bit bytes
    (RFC 6532) as ``Header`` objects whose ``str()`` replaces every such
    byte. decode_header() on that object returns the original bytes.
    """
    if value is None:
        return ""
    if isinstance(value, Header):
        return "".join(
            chunk.decode("utf-8", errors="replace") if isinstance(chunk, bytes) else chunk
            for chunk, _charset in decode_header(value)
        )
    # Surrogate-escaped bytes (e.g. from get_param) back to UTF-8
    return str(value).encode("utf-8", "surrogateescape").decode("utf-8", errors="replace")


def decode_header_value(value) -> str:
    """
    Decode an RFC 2047 encoded header value

    Falls back to the undecoded text when the encoded-words are broken.

    Example:
        >>> decode_header_value("=?UTF-8?B?SGVsbG8=?=")
        'Hello'
    """
    text = unfold(header_text(value))
    if not text:
        return ""
    try:
        chunks = []
        for chunk, charset in decode_header(text):
            if charset is None and isinstance(chunk, bytes) and not chunk.isascii():
                # Raw UTF-8 text next to encoded-words; undo decode_header's escaping
                chunk, charset = chunk.decode("raw-unicode-escape"), "utf-8"
            chunks.append((chunk, charset))
        return str(make_header(chunks))
    except (UnicodeDecodeError, LookupError, ValueError) as e:
        logger.debug("Could not decode header value: %s", e)
        return text


def format_address(header_value: Optional[str]) -> str:
    """
    Format the first address of an address header

    Example:
        >>> format_address('"John Doe" <john@example.com>')
        'John Doe <john@example.com>'
    """
    if not header_value:
        return UNKNOWN_SENDER

    addresses = _parse_addresses(header_value)
    if not addresses:
        return str(header_value)

    return _format_pair(*addresses[0])


def format_address_list(header_value: Optional[str]) -> List[str]:
    """
    Format every address of an address-list header

    When the list cannot be parsed the raw value is split on commas instead.
    """
    if not header_value:
        return []

    addresses = _parse_addresses(header_value)
    if not addresses:
        return [part.strip() for part in str(header_value).split(",") if part.strip()]

    return [_format_pair(name, address) for name, address in addresses]


def format_date(value: Optional[str]) -> str:
    """Reformat a Date header to ``YYYY-MM-DD HH:MM:SS``, or return it verbatim"""
    if not value:
        return ""
    try:
        parsed = parsedate_to_datetime(unfold(value))
    except (TypeError, ValueError, IndexError):
        return str(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(DATE_FORMAT)


def _parse_addresses(header_value: str) -> List[Tuple[str, str]]:
    """Return (decoded name, address) pairs, or an empty list when unparseable"""
    pairs = []
    for name, address in getaddresses([unfold(header_value)]):
        if not address:
            # getaddresses signals a failed parse with ('', '')
            return []
        pairs.append((decode_header_value(name), address))
    return pairs


def _format_pair(name: str, address: str) -> str:
    if name:
        return f"{name} <{address}>"
    return address


def _raw_header(msg: Message, name: str) -> str:
    return unfold(header_text(msg.get(name))).strip()


def unfold(value) -> str:
    """Join folded header lines back into one line"""
    return FOLDING_PATTERN.sub("", str(value))
