"""
Multipart Body Walker
Recursively walks a (possibly nested) multipart structure and selects one
best-effort plain-text body.

Selection rules, applied per nesting level in stream order:
- parts whose Content-Disposition mentions "attachment" carry no body text
- the first non-empty text/plain and the first non-empty text/html win;
  later siblings never overwrite an already-captured candidate
- a nested multipart counts as one body at the parent's level: it becomes
  the HTML candidate when its type contains "alternative" and no HTML
  candidate exists yet, otherwise the plain candidate if none exists yet
- plain text outranks HTML; HTML is reduced to text; otherwise a sentinel,
  which a parent level captures like any other nested body
"""

import logging
from email.message import Message

from .content_type import MalformedContentType, is_multipart, resolve_content_type
from .email_data import ContentTypeInfo
from .html_converter import html_to_text
from .mime_parts import (
    MAX_MIME_DEPTH,
    is_attachment,
    iter_parts,
    part_content_type,
    raw_body,
)
from .part_decoder import decode_charset, decode_part_body, decode_transfer_encoding
from ..utils.sanitization import sanitize_for_logging


logger = logging.getLogger(__name__)

NO_READABLE_CONTENT = "[No readable content found]"

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"


class BodyWalker:
    """
    Selects the body text of a multipart message

    Candidates live in local variables of each recursion level, so one
    walker can be reused across messages.
    """

    def __init__(self, max_depth: int = MAX_MIME_DEPTH):
        self.max_depth = max_depth

    def walk(self, container: Message) -> str:
        """
        Walk a multipart container and return its body text

        Args:
            container: Message or part whose Content-Type is multipart

        Returns:
            Plain-text body, or NO_READABLE_CONTENT
        """
        return self._walk(container, depth=0)

    def _walk(self, container: Message, depth: int) -> str:
        plain_text = ""
        html_text = ""

        for part in iter_parts(container):
            try:
                info = part_content_type(part)
            except MalformedContentType as e:
                logger.warning("Skipping body part: %s", sanitize_for_logging(str(e)))
                continue

            if is_attachment(part):
                continue

            if is_multipart(info):
                if not info.boundary:
                    continue
                if depth + 1 > self.max_depth:
                    logger.warning(
                        "MIME nesting exceeds %d levels; skipping nested %s",
                        self.max_depth, info.media_type
                    )
                    continue

                # A nested walk always yields text, the sentinel included
                body = self._walk(part, depth + 1)
                if "alternative" in info.media_type and not html_text:
                    html_text = body
                elif not plain_text:
                    plain_text = body
                continue

            if info.media_type not in (TEXT_PLAIN, TEXT_HTML):
                continue

            body = decode_leaf(part, info)
            if not body:
                continue

            if info.media_type == TEXT_PLAIN and not plain_text:
                plain_text = body
            elif info.media_type == TEXT_HTML and not html_text:
                html_text = body

        if plain_text:
            return plain_text
        if html_text:
            return html_to_text(html_text)
        return NO_READABLE_CONTENT


def decode_leaf(part: Message, info: ContentTypeInfo) -> str:
    """Undo transfer encoding and charset of a leaf part and normalize its text"""
    encoding = part.get("Content-Transfer-Encoding")
    transfer = decode_transfer_encoding(raw_body(part), _clean(encoding))
    if not transfer.ok:
        logger.warning(
            "Could not decode %s body; using it undecoded",
            sanitize_for_logging(_clean(encoding))
        )
    return decode_part_body(transfer.data, info.charset, info.media_type)


def extract_body(msg: Message) -> str:
    """
    Extract the body text of a top-level message

    - no Content-Type header: the raw body, as is
    - multipart without boundary: NO_READABLE_CONTENT
    - multipart: BodyWalker
    - anything else: the decoded single part
    """
    raw_content_type = msg.get("Content-Type")
    if raw_content_type is None:
        return decode_charset(raw_body(msg), None).text

    try:
        info = resolve_content_type(raw_content_type)
    except MalformedContentType as e:
        logger.warning(
            "Top-level Content-Type is malformed (%s); reading body as plain text",
            sanitize_for_logging(str(e))
        )
        return decode_charset(raw_body(msg), None).text

    if is_multipart(info):
        if not info.boundary:
            return NO_READABLE_CONTENT
        return BodyWalker().walk(msg)

    return decode_leaf(msg, info)


def _clean(header_value) -> str:
    return str(header_value).strip() if header_value else ""
