"""
MIME part iteration shared by the body and attachment walkers.

Parts are visited strictly forward, in stream order, and never revisited.
"""

from email.message import Message
from typing import Iterator, Optional

from .content_type import MalformedContentType, is_multipart, resolve_content_type
from .email_data import ContentTypeInfo


# Nested multipart containers deeper than this are not descended (MIME bombs)
MAX_MIME_DEPTH = 50

ATTACHMENT_DISPOSITION = "attachment"


def iter_parts(container: Message) -> Iterator[Message]:
    """
    Yield the child parts of a multipart container in stream order

    A container whose body could not be split on its boundary yields nothing.
    """
    payload = container.get_payload()
    if isinstance(payload, list):
        yield from payload


def part_content_type(part: Message) -> ContentTypeInfo:
    """Resolve the part's own Content-Type header (raises MalformedContentType)"""
    return resolve_content_type(part.get("Content-Type"))


def try_part_content_type(part: Message) -> Optional[ContentTypeInfo]:
    """Like part_content_type, but None when the header is malformed"""
    try:
        return part_content_type(part)
    except MalformedContentType:
        return None


def is_walkable(info: Optional[ContentTypeInfo]) -> bool:
    """True for a multipart type that names a boundary to split on"""
    return info is not None and is_multipart(info) and bool(info.boundary)


def is_attachment(part: Message) -> bool:
    return ATTACHMENT_DISPOSITION in str(part.get("Content-Disposition", ""))


def raw_body(part: Message) -> bytes:
    """
    Return the part body exactly as it appears in the message

    Transfer encoding is left in place. An embedded message/rfc822 part is
    re-serialized.
    """
    payload = part.get_payload()
    if isinstance(payload, list):
        return b"".join(sub.as_bytes() for sub in payload)
    if payload is None:
        return b""
    # message_from_bytes keeps undecodable bytes as surrogates
    try:
        return payload.encode("ascii", "surrogateescape")
    except UnicodeEncodeError:
        return payload.encode("utf-8", "surrogateescape")
