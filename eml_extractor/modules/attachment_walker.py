"""
Multipart Attachment Walker
Recursively walks a multipart structure, persisting every leaf part whose
Content-Disposition marks it as an attachment.

SECURITY STORY: Attachment names are attacker-controlled. They are sanitized
before they touch the filesystem; path separators become underscores, and
names made only of dots are dropped.
Existing files are never overwritten; a numeric suffix is added instead, so
re-running into the same folder accumulates ``_1``, ``_2`` copies.
"""

import logging
import os
from email.message import Message
from pathlib import Path
from typing import List, Optional

from .content_type import is_multipart, parse_disposition_params
from .email_data import Attachment
from .header_reader import decode_header_value
from .mime_parts import (
    MAX_MIME_DEPTH,
    is_attachment,
    is_walkable,
    iter_parts,
    raw_body,
    try_part_content_type,
)
from .part_decoder import decode_transfer_encoding
from ..utils.sanitization import sanitize_filename, sanitize_for_logging, uniquify


logger = logging.getLogger(__name__)

ATTACHMENTS_DIR = "attachments"


class ExistingFiles:
    """Membership test against the files currently in a directory"""

    def __init__(self, directory: Path):
        self.directory = directory

    def __contains__(self, name: str) -> bool:
        return (self.directory / name).exists()


class AttachmentWalker:
    """
    Saves the attachments of a multipart message into one directory

    The directory is created on the first attachment that needs it.
    """

    def __init__(self, attachments_dir: Path, max_depth: int = MAX_MIME_DEPTH):
        self.attachments_dir = Path(attachments_dir)
        self.max_depth = max_depth

    def walk(self, container: Message) -> List[Attachment]:
        """
        Persist every attachment below *container*

        Returns:
            Attachment records in stream order, nested ones spliced in depth-first

        Raises:
            OSError: If the attachments directory cannot be created
        """
        attachments: List[Attachment] = []
        self._walk(container, attachments, depth=0)
        return attachments

    def _walk(self, container: Message, attachments: List[Attachment], depth: int) -> None:
        for part in iter_parts(container):
            info = try_part_content_type(part)

            # Attachments may be nested regardless of the outer disposition
            if info is not None and is_multipart(info):
                if not is_walkable(info):
                    continue
                if depth + 1 > self.max_depth:
                    logger.warning(
                        "MIME nesting exceeds %d levels; skipping nested %s",
                        self.max_depth, info.media_type
                    )
                    continue
                self._walk(part, attachments, depth + 1)
                continue

            if not is_attachment(part):
                continue

            attachment = self.save_attachment(part)
            if attachment is not None:
                attachments.append(attachment)

    def save_attachment(self, part: Message) -> Optional[Attachment]:
        """
        Decode and write one attachment part

        Returns:
            The Attachment record, or None when the part has no usable name
            or could not be written
        """
        filename = attachment_filename(part)
        if not filename:
            logger.debug("Skipping attachment without a filename")
            return None

        self.attachments_dir.mkdir(parents=True, exist_ok=True)
        filename = uniquify(filename, ExistingFiles(self.attachments_dir))
        safe_filename = sanitize_for_logging(filename)

        encoding = part.get("Content-Transfer-Encoding")
        encoding = str(encoding).strip() if encoding else ""
        transfer = decode_transfer_encoding(raw_body(part), encoding)
        if not transfer.ok:
            logger.warning(
                "Could not decode %s attachment %s; saving it undecoded",
                sanitize_for_logging(encoding), safe_filename
            )

        try:
            size = (self.attachments_dir / filename).write_bytes(transfer.data)
        except OSError as e:
            logger.warning("Failed to save attachment %s: %s", safe_filename, e)
            return None

        logger.info("Extracted attachment: %s (%d bytes)", safe_filename, size)
        return Attachment(
            filename=filename,
            path=os.path.join(ATTACHMENTS_DIR, filename),
            size=size,
        )


def attachment_filename(part: Message) -> str:
    """
    Determine the sanitized filename of an attachment part

    The ``filename`` parameter of Content-Disposition wins; otherwise the
    ``name`` parameter of Content-Type is used. Raw 8-bit names are read as
    UTF-8. Returns an empty string when there is no usable name.
    """
    name = parse_disposition_params(part.get("Content-Disposition")).get("filename", "")
    if not name:
        info = try_part_content_type(part)
        name = info.params.get("name", "") if info is not None else ""
    if not name:
        return ""

    name = sanitize_filename(decode_header_value(name))

    if not name.strip("."):
        return ""
    return name


def extract_attachments(msg: Message, output_dir: Path) -> List[Attachment]:
    """
    Save the attachments of a top-level message under ``<output_dir>/attachments``

    Single-part messages and multiparts without a boundary have none.
    """
    if not is_walkable(try_part_content_type(msg)):
        return []

    walker = AttachmentWalker(Path(output_dir) / ATTACHMENTS_DIR)
    return walker.walk(msg)
