import datetime
import logging

logger = logging.getLogger(__name__)


class Analytics:
    """Appends one timestamped line per user action to a plain text log."""

    def __init__(self, log_file=None):
        self.log_file = log_file

    def log(self, action: str):
        if not self.log_file:
            return
        time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"{time} - {action}\n")
        except OSError as exc:
            logger.warning("Could not write analytics entry to %s: %s", self.log_file, exc)
