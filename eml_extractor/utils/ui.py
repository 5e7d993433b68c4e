"""
UI utilities for the CLI.
Status output goes to stderr so stdout carries only the extracted markdown.
"""

import sys
from typing import Optional, TextIO

from .colors import Colors
from .formatting import format_file_size

RULE_WIDTH = 80


def print_banner(stream: Optional[TextIO] = None) -> None:
    """Print the application startup banner"""
    stream = stream or sys.stderr
    print(Colors.colorize("=" * RULE_WIDTH, Colors.CYAN), file=stream)
    print(Colors.colorize("EML Extractor", Colors.BOLD + Colors.CYAN), file=stream)
    print(Colors.colorize("Email content and attachments to markdown", Colors.GREY), file=stream)
    print(Colors.colorize("=" * RULE_WIDTH, Colors.CYAN), file=stream)


def print_extraction_summary(result, stream: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
    """
    Print what an extraction produced, then the markdown itself

    Args:
        result: ExtractionResult of the run
        stream: Destination for the summary
        out: Destination for the markdown
    """
    stream = stream or sys.stderr
    out = out or sys.stdout
    print(file=stream)
    print(f"📧 Email: {result.metadata.subject}", file=stream)
    print(f"📁 Output directory: {result.output_dir}", file=stream)
    print(f"📝 Markdown file: {result.markdown_file}", file=stream)
    print(f"📎 Attachments extracted: {len(result.attachments)}", file=stream)
    if result.attachments:
        print("   Attachment files:", file=stream)
        for attachment in result.attachments:
            size = format_file_size(attachment.size)
            print(f"   - {attachment.filename} ({size})", file=stream)

    rule = Colors.colorize("=" * RULE_WIDTH, Colors.GREY)
    print(f"\n{rule}", file=stream)
    print(Colors.header("EXTRACTED CONTENT:"), file=stream)
    print(rule, file=stream)
    stream.flush()
    print(result.markdown, file=out)
    out.flush()
    print(rule, file=stream)


def print_cleanup_tip(output_dir: str, stream: Optional[TextIO] = None) -> None:
    """Explain how to remove the extraction folder when --cleanup was not used"""
    stream = stream or sys.stderr
    print(
        "\n💡 Tip: Use --cleanup flag to automatically remove extraction directory after reading",
        file=stream,
    )
    print(f"   Or manually clean up: rm -rf \"{output_dir}\"", file=stream)


def print_cleanup_result(output_dir: str, error: Optional[Exception] = None, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stderr
    if error is not None:
        print(Colors.warning(f"\n⚠️  Warning: Failed to clean up: {error}"), file=stream)
    else:
        print(Colors.success(f"\n🧹 Cleaned up: {output_dir}"), file=stream)
