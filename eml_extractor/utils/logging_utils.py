import logging
import copy
from eml_extractor.utils.colors import Colors


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter to add colors to log levels and specific messages.
    Highlights the extraction milestones and dims per-step chatter.
    """

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __init__(self, fmt: str = DEFAULT_FORMAT, datefmt: str = "%Y-%m-%d %H:%M:%S"):
        super().__init__(fmt, datefmt=datefmt)

    @staticmethod
    def level_colors():
        # Looked up per call so Colors.disable() takes effect
        return {
            logging.DEBUG: Colors.GREY,
            logging.INFO: Colors.BLUE,
            logging.WARNING: Colors.YELLOW,
            logging.ERROR: Colors.RED,
            logging.CRITICAL: Colors.BOLD + Colors.RED
        }

    def format(self, record):
        # Copy so other handlers (e.g. the log file) never see ANSI codes
        record = copy.copy(record)

        color = self.level_colors().get(record.levelno, Colors.RESET)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"

        if isinstance(record.msg, str):
            if record.msg.startswith("Extracting:"):
                record.msg = f"{Colors.MAGENTA}{Colors.BOLD}{record.msg}{Colors.RESET}"
            elif record.msg == "Extracting attachments...":
                record.msg = f"{Colors.GREY}{record.msg}{Colors.RESET}"
            elif record.msg.startswith("Extraction complete"):
                record.msg = f"{Colors.GREEN}{record.msg}{Colors.RESET}"
            elif record.levelno >= logging.ERROR:
                record.msg = f"{Colors.RED}{record.msg}{Colors.RESET}"

        return super().format(record)
