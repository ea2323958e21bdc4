import logging

from bs4 import BeautifulSoup

from docinliner.core.css import CssInliner
from docinliner.core.errors import DocumentParseError, get_stack_trace
from docinliner.core.images import ImageInliner
from docinliner.core.loader import ResourceLoader
from docinliner.core.settings import Settings
from docinliner.core.svg import SvgInliner, root_element

logger = logging.getLogger(__name__)


class DocumentInliner:
    """
    Turns a generated XHTML page into a stand-alone document by embedding its
    images, stylesheets (including nested @imports) and SVG objects.
    """

    def __init__(self, settings=None):
        self.settings = settings or Settings.get_instance()
        loader = ResourceLoader(encoding=self.settings.encoding)
        self.images = ImageInliner(loader)
        self.stylesheets = CssInliner(
            loader,
            max_import_depth=self.settings.max_import_depth,
            guard_import_cycles=self.settings.guard_import_cycles,
        )
        self.svg_objects = SvgInliner(loader, parser=self.settings.svg_parser)

    def parse(self, html: str) -> BeautifulSoup:
        try:
            # Keep every attribute a plain string so rel="stylesheet" compares directly
            soup = BeautifulSoup(html, self.settings.parser, multi_valued_attributes=None)
        except Exception as e:
            raise DocumentParseError(f"Failed to parse document: {e}") from e

        if root_element(soup) is None:
            raise DocumentParseError("Document has no root element")
        return soup

    def inline_soup(self, soup: BeautifulSoup, base_path=None) -> BeautifulSoup:
        """Inline all resources of an already parsed soup in place."""
        base_path = base_path or ""

        # Order is fixed so repeated runs serialize identically
        images = self.images.inline(soup, base_path)
        stylesheets = self.stylesheets.inline(soup, base_path)
        svgs = self.svg_objects.inline(soup, base_path)

        logger.info(f"Inlined {images} images, {stylesheets} stylesheets, {svgs} SVG objects")
        return soup

    def inline(self, html: str, base_path=None) -> str:
        """
        Returns a single, stand-alone version of the page.

        Args:
            html: The original XHTML code.
            base_path: Directory in which the referenced resources can be found.

        Returns:
            str: The inlined document, or the original text if it could not be parsed.
        """
        try:
            soup = self.parse(html)
        except DocumentParseError as e:
            logger.error(f"Failed to convert the HTML into a document tree: {e}")
            logger.error(get_stack_trace(e))
            return html

        self.inline_soup(soup, base_path)
        return str(soup)


def inline_html_page(html: str, base_path=None, settings=None) -> str:
    return DocumentInliner(settings).inline(html, base_path)
