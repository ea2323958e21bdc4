import io
import logging
import sys
import threading

logger = logging.getLogger(__name__)

REDACTED = "****"


class StreamRedirector(threading.Thread):
    """
    Drains a stream (typically a child process pipe) on a background thread so
    long running processes never block on a full buffer.

    Every line is echoed to stdout with the `do_not_print` strings masked, and
    copied unmodified to `redirect` when one is given.
    """

    def __init__(self, source, redirect=None, do_not_print=None, stdout=None, encoding='utf-8'):
        super().__init__(daemon=True)
        self.source = source
        self.redirect = redirect
        self.do_not_print = list(do_not_print or [])
        self.stdout = stdout
        self.encoding = encoding

    def sanitize(self, line):
        for secret in self.do_not_print:
            if secret:
                line = line.replace(secret, REDACTED)
        return line

    def run(self):
        stdout = self.stdout or sys.stdout
        try:
            for raw in self.source:
                if isinstance(raw, bytes):
                    raw = raw.decode(self.encoding, errors='replace')
                line = raw.rstrip('\r\n')

                stdout.write(self.sanitize(line) + "\n")
                if self.redirect is not None:
                    self._write_redirect(line + "\n")

            if self.redirect is not None:
                self.redirect.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Unable to read from input stream: {e}")

    def _write_redirect(self, text):
        if isinstance(self.redirect, (io.RawIOBase, io.BufferedIOBase)):
            self.redirect.write(text.encode(self.encoding))
        else:
            self.redirect.write(text)
