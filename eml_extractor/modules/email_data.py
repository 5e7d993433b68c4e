"""
Email Data Model
Contains the dataclasses produced by a single extraction run
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class ContentTypeInfo:
    """Resolved Content-Type header: lower-cased media type plus parameters"""
    media_type: str
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def charset(self) -> str:
        return self.params.get("charset", "")

    @property
    def boundary(self) -> str:
        return self.params.get("boundary", "")


@dataclass(frozen=True)
class EmailMetadata:
    """
    Normalized snapshot of the identity and thread headers

    Addresses are decoded, human-readable strings. The date is reformatted
    to ``YYYY-MM-DD HH:MM:SS`` when it parses, otherwise kept verbatim.
    """
    from_address: str
    to: Tuple[str, ...]
    cc: Tuple[str, ...]
    subject: str
    date: str
    message_id: str
    in_reply_to: str
    references: str

    @property
    def has_thread_info(self) -> bool:
        return bool(self.in_reply_to or self.references)


@dataclass(frozen=True)
class Attachment:
    """A persisted attachment: unique filename, path relative to the output folder, bytes written"""
    filename: str
    path: str
    size: int


@dataclass
class ExtractionResult:
    """
    Container for everything one extraction run produced

    The markdown is kept in memory so the CLI can echo it after the files
    have been written.
    """
    metadata: EmailMetadata
    attachments: List[Attachment]
    markdown: str
    markdown_file: str
    output_dir: str
    email_name: str
