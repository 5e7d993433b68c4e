"""
Email Extractor Module
Runs one extraction: .eml file in, folder with email.md and attachments out.

PATTERN RECOGNITION: Parsing, body selection and attachment saving live in
their own modules; this class only sequences them and owns the fatal error
surface. Everything recoverable is logged and absorbed further down.
"""

import email
import logging
import os
from email.message import Message
from pathlib import Path
from typing import List, Optional, Union

from .attachment_walker import extract_attachments
from .body_walker import extract_body
from .email_data import Attachment, ExtractionResult
from .header_reader import decode_header_value, read_metadata
from .markdown_writer import EMAIL_FILENAME, create_email_markdown
from ..utils.sanitization import make_folder_name, sanitize_for_logging


logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class ExtractionError(RuntimeError):
    """A fatal extraction failure; the run cannot produce its output"""


def expand_path(path: PathLike) -> Path:
    """Expand ``~`` and make the path absolute"""
    return Path(path).expanduser().absolute()


class EmailExtractor:
    """
    Extracts a single .eml file

    MAINTENANCE WISDOM: The extractor holds no per-message state, so one
    instance can be reused for any number of files.
    """

    def __init__(self, output_base: Optional[PathLike] = None):
        """
        Args:
            output_base: Parent directory for extraction folders. Defaults to
                the directory of each .eml file.
        """
        self.output_base = output_base

    def extract(self, eml_path: PathLike) -> ExtractionResult:
        """
        Extract content and attachments of one message

        Args:
            eml_path: Path to the .eml file

        Returns:
            ExtractionResult describing what was written

        Raises:
            ExtractionError: Input missing or unparseable, or output not writable
        """
        eml_path = expand_path(eml_path)
        if not eml_path.is_file():
            raise ExtractionError(f"email file not found: {eml_path}")

        logger.info("Extracting: %s", eml_path)
        msg = self.parse_message(eml_path)

        subject = decode_header_value(msg.get("Subject", ""))
        folder_name = make_folder_name(subject, eml_path.name)
        output_dir = self.resolve_output_dir(eml_path, folder_name)

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractionError(f"failed to create output directory: {e}") from e
        logger.info("Output to: %s", output_dir)

        metadata = read_metadata(msg)
        body = extract_body(msg)
        attachments = self.extract_attachments(msg, output_dir)

        markdown = create_email_markdown(metadata, body, attachments)
        markdown_path = output_dir / EMAIL_FILENAME
        try:
            markdown_path.write_text(markdown, encoding="utf-8")
        except OSError as e:
            raise ExtractionError(f"failed to write markdown file: {e}") from e

        logger.info(
            "Extraction complete: %s (%d attachments)",
            sanitize_for_logging(metadata.subject), len(attachments)
        )

        return ExtractionResult(
            metadata=metadata,
            attachments=attachments,
            markdown=markdown,
            markdown_file=str(markdown_path),
            output_dir=str(output_dir),
            email_name=folder_name,
        )

    @staticmethod
    def parse_message(eml_path: Path) -> Message:
        """
        Read and parse the message file

        Raises:
            ExtractionError: If the file cannot be read or has no headers
        """
        try:
            raw = eml_path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"failed to open email file: {e}") from e

        msg = email.message_from_bytes(raw)
        if not msg.keys():
            raise ExtractionError("failed to parse email: no headers found")
        return msg

    def resolve_output_dir(self, eml_path: Path, folder_name: str) -> Path:
        """Place the folder next to the .eml file, or under the configured base"""
        if not self.output_base:
            return eml_path.parent / folder_name

        base = expand_path(self.output_base)
        if str(base).endswith(folder_name):
            return base
        return base / folder_name

    @staticmethod
    def extract_attachments(msg: Message, output_dir: Path) -> List[Attachment]:
        """Save attachments; a failure of the whole walk leaves the list empty"""
        logger.info("Extracting attachments...")
        try:
            return extract_attachments(msg, output_dir)
        except OSError as e:
            logger.warning("Error extracting attachments: %s", e)
            return []
