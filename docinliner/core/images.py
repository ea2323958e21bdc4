import base64
import logging

from bs4 import BeautifulSoup

from docinliner.core.errors import ResourceReadError
from docinliner.core.loader import ResourceLoader

logger = logging.getLogger(__name__)


def image_extension(src):
    """Text after the last '.' of src, or None when there is nothing usable."""
    location = src.rfind('.')
    if location == -1 or location == len(src) - 1:
        return None
    return src[location + 1:]


def build_data_uri(extension, data: bytes) -> str:
    # The extension is used verbatim as the MIME subtype (.jpg -> image/jpg)
    encoded = base64.b64encode(data).decode('ascii')
    return f"data:image/{extension};base64,{encoded}"


class ImageInliner:
    """Replaces <img src="..."> with an <img> carrying a base64 data URI."""

    def __init__(self, loader=None):
        self.loader = loader or ResourceLoader()

    def inline(self, soup: BeautifulSoup, base_path="") -> int:
        count = 0
        for img in soup.find_all('img'):
            if img.get('src') is None:
                continue
            if self.inline_image(soup, img, base_path):
                count += 1
        return count

    def inline_image(self, soup, img, base_path="") -> bool:
        src = img['src']
        if not self.loader.exists(base_path, src):
            # Remote and already-embedded sources end up here
            return False

        try:
            data = self.loader.read_bytes(base_path, src)
        except ResourceReadError as e:
            logger.debug(f"Skipping image: {e}")
            return False

        extension = image_extension(src)
        if extension is None:
            logger.debug(f"Skipping image without extension: {src}")
            return False

        # Only src survives; alt, width etc. are dropped
        new_img = soup.new_tag('img', attrs={'src': build_data_uri(extension, data)})
        img.replace_with(new_img)
        logger.debug(f"Inlined image {src} ({len(data)} bytes)")
        return True
