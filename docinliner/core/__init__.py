from docinliner.core.inliner import DocumentInliner, inline_html_page
from docinliner.core.settings import Settings

__all__ = ["DocumentInliner", "inline_html_page", "Settings"]
