import logging

from bs4 import BeautifulSoup, Tag
from lxml import etree

from docinliner.core.errors import DocumentParseError, ResourceReadError
from docinliner.core.loader import ResourceLoader

logger = logging.getLogger(__name__)

SVG_MIME_TYPE = "image/svg+xml"


def root_element(soup):
    """First element at the top level of a parsed document, or None."""
    for child in soup.contents:
        if isinstance(child, Tag):
            return child
    return None


class SvgInliner:
    """
    Replaces <object type="image/svg+xml" data="..."> with the <svg> root of
    the referenced file.
    """

    def __init__(self, loader=None, parser="xml"):
        self.loader = loader or ResourceLoader()
        self.parser = parser

    def inline(self, soup: BeautifulSoup, base_path="") -> int:
        count = 0
        for obj in soup.find_all('object'):
            if obj.get('type') != SVG_MIME_TYPE or obj.get('data') is None:
                continue
            if self.inline_object(obj, base_path):
                count += 1
        return count

    def inline_object(self, obj, base_path="") -> bool:
        data = obj['data']
        if not self.loader.exists(base_path, data):
            return False

        try:
            svg_root = self.load_svg_root(base_path, data)
        except (ResourceReadError, DocumentParseError) as e:
            logger.warning(f"Unable to inline SVG object {data}: {e}")
            return False

        # Qualified name must be exactly "svg"; prefixed roots such as svg:svg are left alone
        if svg_root.name != 'svg' or svg_root.prefix:
            logger.debug(f"Skipping {data}: root element is <{svg_root.name}>, not <svg>")
            return False

        # Detach from the throwaway SVG document so the host tree owns it
        obj.replace_with(svg_root.extract())
        logger.debug(f"Inlined SVG object {data}")
        return True

    def load_svg_root(self, base_path, data) -> Tag:
        text = self.loader.read_text(base_path, data)
        self.check_well_formed(text, data)
        try:
            svg_doc = BeautifulSoup(text, self.parser)
        except Exception as e:
            raise DocumentParseError(f"{data}: {e}") from e

        root = root_element(svg_doc)
        if root is None:
            raise DocumentParseError(f"{data}: no root element")
        return root

    def check_well_formed(self, text, data):
        """Reject files the recovering soup builder would silently repair."""
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            etree.fromstring(text.encode(self.loader.encoding), parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise DocumentParseError(f"{data}: {e}") from e
