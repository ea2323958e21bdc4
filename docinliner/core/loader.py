import logging
import os

from docinliner.core.errors import ResourceReadError

logger = logging.getLogger(__name__)


def compose_path(base_path, reference):
    """Join a reference onto a base path as `base + "/" + reference`.

    An empty base means the current directory, so the reference is returned as is.
    """
    if not base_path:
        return reference
    return base_path + "/" + reference


def directory_of(reference):
    """Portion of a reference before its last separator, '' if there is none."""
    end = reference.rfind('/')
    if end == -1:
        end = reference.rfind('\\')
    if end == -1:
        return ""
    return reference[:end]


class ResourceLoader:
    """Reads local files referenced by a document."""

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def exists(self, base_path, reference):
        # os.path.exists swallows ENAMETOOLONG, which data URIs trigger
        return os.path.exists(compose_path(base_path, reference))

    def read_bytes(self, base_path, reference) -> bytes:
        path = compose_path(base_path, reference)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ResourceReadError(path, e) from e
        if not data:
            raise ResourceReadError(path, "file is empty")
        return data

    def read_text(self, base_path, reference) -> str:
        path = compose_path(base_path, reference)
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceReadError(path, e) from e
