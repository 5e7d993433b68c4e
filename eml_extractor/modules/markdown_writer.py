"""
Markdown composition for email.md
"""

from typing import List

from .email_data import Attachment, EmailMetadata
from ..utils.formatting import format_file_size


EMAIL_FILENAME = "email.md"


def create_email_markdown(metadata: EmailMetadata, body: str, attachments: List[Attachment]) -> str:
    """
    Render the extraction as a markdown document

    Section order: title, Metadata, Attachments (only when present), a rule,
    Message, a closing rule, then Thread Information when the message is a
    reply or carries References.
    """
    lines = [
        f"# Email: {metadata.subject}",
        "",
        "## Metadata",
        "",
        f"- **From:** {metadata.from_address}",
    ]
    if metadata.to:
        lines.append(f"- **To:** {', '.join(metadata.to)}")
    if metadata.cc:
        lines.append(f"- **Cc:** {', '.join(metadata.cc)}")
    lines.append(f"- **Date:** {metadata.date}")
    lines.append(f"- **Subject:** {metadata.subject}")
    lines.append("")

    if attachments:
        lines.append("## Attachments")
        lines.append("")
        for attachment in attachments:
            size = format_file_size(attachment.size)
            lines.append(f"- **{attachment.filename}** ({size}) - `{attachment.path}`")
        lines.append("")

    lines.extend(["---", "", "## Message", "", body, "", "---"])

    if metadata.has_thread_info:
        lines.extend(["", "## Thread Information", ""])
        if metadata.message_id:
            lines.append(f"- **Message ID:** `{metadata.message_id}`")
        if metadata.in_reply_to:
            lines.append(f"- **In Reply To:** `{metadata.in_reply_to}`")
        if metadata.references:
            lines.append(f"- **References:** `{metadata.references}`")

    return "\n".join(lines) + "\n"
