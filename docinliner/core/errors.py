import traceback


class InlineError(Exception):
    """Base class for failures raised while inlining a document."""


class DocumentParseError(InlineError):
    """The input text could not be turned into a document tree."""


class ResourceReadError(InlineError):
    """A referenced file exists but could not be read or decoded."""

    def __init__(self, path, reason):
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class ImportCycleError(InlineError):
    """A CSS import re-enters a file on the current chain or nests too deep."""

    def __init__(self, path, chain):
        super().__init__(f"Refusing to import {path}; import chain: {' -> '.join(chain)}")
        self.path = path
        self.chain = list(chain)


def get_stack_trace(ex):
    """Return the formatted traceback of a caught exception."""
    return "".join(traceback.format_exception(type(ex), ex, ex.__traceback__))
