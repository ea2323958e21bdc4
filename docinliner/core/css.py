import logging
import os
import re

from bs4 import BeautifulSoup

from docinliner.core.errors import ImportCycleError, ResourceReadError
from docinliner.core.loader import ResourceLoader, compose_path, directory_of

logger = logging.getLogger(__name__)

# Literal markers of an import statement. Anything else (comments, escapes,
# @import "x.css" without url()) is not recognised.
CSS_IMPORT_START = '@import url("'
CSS_IMPORT_END = '");'

# An end tag inside HTML <style> text would close the element early
STYLE_END_TAG = re.compile(r"</(style)", re.IGNORECASE)


def nested_base_path(base_path, reference):
    """Base path for references found inside the file `reference` points at."""
    directory = directory_of(reference)
    if not directory:
        return base_path
    return compose_path(base_path, directory)


def escape_style_end_tags(css):
    """Write `</style` as `<\\/style`; CSS reads the escaped slash as a plain '/'."""
    return STYLE_END_TAG.sub(r"<\\/\1", css)


def _rel_value(link):
    rel = link.get('rel')
    # Soups built with the default multi-valued attribute handling give a list
    if isinstance(rel, list):
        return " ".join(rel)
    return rel


class CssInliner:
    """
    Replaces <link rel="stylesheet"> elements with <style> elements holding
    the stylesheet text, with @import url("...") statements spliced in.
    """

    def __init__(self, loader=None, max_import_depth=32, guard_import_cycles=True):
        self.loader = loader or ResourceLoader()
        self.max_import_depth = max_import_depth
        self.guard_import_cycles = guard_import_cycles

    def inline(self, soup: BeautifulSoup, base_path="") -> int:
        """Inline every stylesheet link in the soup. Returns the number replaced."""
        count = 0
        for link in soup.find_all('link'):
            if _rel_value(link) != 'stylesheet' or link.get('href') is None:
                continue
            if self.inline_link(soup, link, base_path):
                count += 1
        return count

    def inline_link(self, soup, link, base_path="") -> bool:
        href = link['href']
        if not self.loader.exists(base_path, href):
            return False

        try:
            css = self.loader.read_text(base_path, href)
        except ResourceReadError as e:
            logger.debug(f"Skipping stylesheet: {e}")
            return False

        chain = (self._chain_key(base_path, href),)
        css = self.resolve_imports(css, nested_base_path(base_path, href), chain)

        style = soup.new_tag('style', attrs={'type': 'text/css'})
        media = link.get('media')
        if media is not None:
            style['media'] = media
        if not soup.is_xml:
            css = escape_style_end_tags(css)
        style.string = css

        link.replace_with(style)
        logger.debug(f"Inlined stylesheet {href} ({len(css)} chars)")
        return True

    def resolve_imports(self, css: str, base_path="", _chain=()) -> str:
        """
        Splice the contents of every @import url("...") statement into the CSS.

        Imported files are resolved recursively, each against its own directory.
        Statements whose file is missing or unreadable are left untouched.
        """
        result = css
        position = 0
        while True:
            start = result.find(CSS_IMPORT_START, position)
            if start == -1:
                break
            end = result.find(CSS_IMPORT_END, start)
            if end == -1:
                logger.debug(f"Unterminated import statement at offset {start}")
                break

            import_path = result[start + len(CSS_IMPORT_START):end]
            statement_end = end + len(CSS_IMPORT_END)

            try:
                replacement = self._load_import(import_path, base_path, _chain)
            except ImportCycleError as e:
                logger.warning(f"Dropping CSS import: {e}")
                replacement = ""

            if replacement is None:
                position = statement_end
                continue

            result = result[:start] + replacement + result[statement_end:]
            position = start + len(replacement)

        return result

    def _load_import(self, import_path, base_path, chain):
        if not self.loader.exists(base_path, import_path):
            return None

        key = self._chain_key(base_path, import_path)
        if self.guard_import_cycles and key in chain:
            raise ImportCycleError(key, chain + (key,))
        if len(chain) >= self.max_import_depth:
            raise ImportCycleError(key, chain + (key,))

        try:
            text = self.loader.read_text(base_path, import_path)
        except ResourceReadError as e:
            logger.debug(f"Leaving CSS import in place: {e}")
            return None

        return self.resolve_imports(text, nested_base_path(base_path, import_path), chain + (key,))

    @staticmethod
    def _chain_key(base_path, reference):
        return os.path.normpath(os.path.abspath(compose_path(base_path, reference)))
