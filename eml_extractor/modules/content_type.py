"""
Content-Type Resolver
Parses raw Content-Type / Content-Disposition values into a media type and
a parameter map. Used at every level of the MIME walk to decide between
single-part and multipart handling.
"""

import re
from email.message import Message
from email.utils import collapse_rfc2231_value
from typing import Dict

from .email_data import ContentTypeInfo
from .header_reader import header_text


DEFAULT_MEDIA_TYPE = "text/plain"

# RFC 2045 token characters on both sides of the slash
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
MEDIA_TYPE_PATTERN = re.compile(rf"^{_TOKEN}/{_TOKEN}$")


class MalformedContentType(ValueError):
    """Raised when a Content-Type value does not follow the type/subtype grammar"""


def resolve_content_type(raw) -> ContentTypeInfo:
    """
    Resolve a raw Content-Type header value

    An absent or blank header resolves to the default single-part case
    (text/plain, no charset); it is not an error.

    Args:
        raw: Header value as found in the message (str or Header), or None

    Returns:
        ContentTypeInfo with a lower-cased media type

    Raises:
        MalformedContentType: If the media type is not ``token/token``
    """
    raw = header_text(raw)
    if not raw.strip():
        return ContentTypeInfo(DEFAULT_MEDIA_TYPE, {})

    media_type = raw.split(";", 1)[0].strip()
    if not MEDIA_TYPE_PATTERN.match(media_type):
        raise MalformedContentType(f"Invalid media type: {media_type!r}")

    return ContentTypeInfo(media_type.lower(), _parse_params(raw, "content-type"))


def parse_disposition_params(raw) -> Dict[str, str]:
    """Return the parameters of a Content-Disposition value (empty when absent)"""
    raw = header_text(raw)
    if not raw:
        return {}
    return _parse_params(raw, "content-disposition")


def is_multipart(info: ContentTypeInfo) -> bool:
    return info.media_type.startswith("multipart/")


def _parse_params(raw: str, header: str) -> Dict[str, str]:
    # Message handles quoting and RFC 2231 continuations for us
    holder = Message()
    holder[header] = raw

    params: Dict[str, str] = {}
    for name, value in (holder.get_params(header=header) or [])[1:]:
        if not name:
            continue
        if not isinstance(value, str):
            value = collapse_rfc2231_value(value)
        params[name] = value
    return params
