import argparse
import logging
import shutil
import signal
import sys
from typing import List, NoReturn, Optional

from eml_extractor.modules.email_extractor import EmailExtractor, ExtractionError
from eml_extractor.utils.colors import Colors
from eml_extractor.utils.config import Config
from eml_extractor.utils import ui


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

EPILOG = """\
Examples:
  eml-extract message.eml
  eml-extract ~/Downloads/email.eml ~/Documents/extracted
  eml-extract --cleanup message.eml
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eml-extract",
        description="Extract content and attachments from .eml files to markdown format.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("eml_file", help="Path to the .eml file to extract")
    parser.add_argument(
        "output_directory",
        nargs="?",
        default=None,
        help="Base directory for extraction (default: same directory as the .eml file)",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        default=None,
        help="Clean up extraction directory after reading",
    )
    parser.add_argument("--config", default=".env", help="Environment file to load (default: .env)")
    parser.add_argument("--log-level", default=None, help="Log level (overrides LOG_LEVEL)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


class AppRunner:
    """Encapsulates argument handling, the extraction run, and console reporting."""

    def __init__(self, args: Optional[List[str]] = None) -> None:
        """
        Initialize the runner with CLI arguments.

        Args:
            args: Command line arguments without the program name (defaults to sys.argv[1:])
        """
        self.args = build_parser().parse_args(args if args is not None else sys.argv[1:])
        self.config = Config(self.args.config)
        self.logger = logging.getLogger("EmlExtractor")

    @property
    def cleanup(self) -> bool:
        if self.args.cleanup is not None:
            return self.args.cleanup
        return self.config.extraction.cleanup

    @property
    def output_directory(self) -> Optional[str]:
        return self.args.output_directory or self.config.extraction.output_dir

    def run(self) -> int:
        """Execute the extraction and return the process exit code."""
        from eml_extractor.main import setup_logging

        try:
            self.config.validate()
        except ValueError as e:
            print(Colors.error(f"❌ Configuration error: {e}"), file=sys.stderr)
            return EXIT_FAILURE

        if self.args.no_color or self.config.system.no_color or not sys.stderr.isatty():
            Colors.disable()

        setup_logging(
            self.config.system,
            level=self.args.log_level,
            json_logs=self.args.json_logs,
        )
        self.setup_signal_handlers()
        ui.print_banner()

        try:
            result = EmailExtractor(self.output_directory).extract(self.args.eml_file)
        except ExtractionError as e:
            self.logger.debug("Extraction failed", exc_info=True)
            print(Colors.error(f"❌ Error extracting email: {e}"), file=sys.stderr)
            return EXIT_FAILURE
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            return EXIT_INTERRUPTED

        ui.print_extraction_summary(result)

        if self.cleanup:
            self.cleanup_extraction(result.output_dir)
        else:
            ui.print_cleanup_tip(result.output_dir)

        return EXIT_OK

    @staticmethod
    def cleanup_extraction(output_dir: str) -> None:
        """Remove the extraction folder; failure is reported, not fatal."""
        try:
            shutil.rmtree(output_dir)
        except OSError as e:
            ui.print_cleanup_result(output_dir, error=e)
            return
        ui.print_cleanup_result(output_dir)

    def setup_signal_handlers(self) -> None:
        """Turn SIGTERM into KeyboardInterrupt so partial runs stop the same way."""
        signal.signal(signal.SIGTERM, self._signal_handler)

    @staticmethod
    def _signal_handler(signum, frame) -> NoReturn:
        """Handle shutdown signals."""
        raise KeyboardInterrupt
