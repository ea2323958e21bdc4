import sys
from datetime import datetime

DISPLAY_DATE_FORMAT = "%d %b %Y %H:%M"


def dump_message_to_stdout(message, stream=None):
    """Print a message prefixed with the current time, e.g. '[18 Oct 2026 14:02] done'."""
    stream = stream or sys.stdout
    stream.write(f"[{datetime.now().strftime(DISPLAY_DATE_FORMAT)}] {message}\n")
    stream.flush()
