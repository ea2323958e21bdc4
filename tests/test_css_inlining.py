import tempfile
import unittest

from bs4 import BeautifulSoup

from docinliner.core.css import CssInliner, nested_base_path
from docinliner.core.inliner import DocumentInliner
from docinliner.core.settings import Settings
from tests.config import page, write_file


class TestNestedBasePath(unittest.TestCase):

    def test_forward_slash(self):
        self.assertEqual(nested_base_path("/docs", "css/main.css"), "/docs/css")

    def test_backslash(self):
        self.assertEqual(nested_base_path("/docs", "css\\main.css"), "/docs/css")

    def test_no_directory(self):
        self.assertEqual(nested_base_path("/docs", "main.css"), "/docs")


class TestImportResolution(unittest.TestCase):
    """Verify the textual @import url("..."); substitution."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.base = self._tmp.name
        self.css = CssInliner()

    def tearDown(self):
        self._tmp.cleanup()

    def test_single_import(self):
        write_file(self.base, "reset.css", "* { margin: 0; }")
        resolved = self.css.resolve_imports('@import url("reset.css");\nbody { color: red; }', self.base)
        self.assertEqual(resolved, "* { margin: 0; }\nbody { color: red; }")

    def test_chain_resolves_against_each_files_directory(self):
        a_css = write_file(self.base, "css/a.css", '@import url("lib/b.css");\na {}')
        write_file(self.base, "css/lib/b.css", '@import url("c.css");\nb {}')
        write_file(self.base, "css/lib/c.css", "c {}")

        resolved = self.css.resolve_imports(a_css.read_text(encoding="utf-8"), f"{self.base}/css")

        self.assertEqual(resolved, "c {}\nb {}\na {}")

    def test_repeated_import_is_inlined_each_time(self):
        write_file(self.base, "x.css", "x {}")
        resolved = self.css.resolve_imports('@import url("x.css");@import url("x.css");', self.base)
        self.assertEqual(resolved, "x {}x {}")

    def test_missing_import_is_left_in_place(self):
        css = '@import url("missing.css");\nbody {}'
        self.assertEqual(self.css.resolve_imports(css, self.base), css)

    def test_other_import_syntax_is_not_recognised(self):
        write_file(self.base, "x.css", "x {}")
        css = "@import \"x.css\";\n@import url('x.css');\n@import url(x.css);"
        self.assertEqual(self.css.resolve_imports(css, self.base), css)

    def test_unterminated_import_stops_scanning(self):
        write_file(self.base, "x.css", "x {}")
        css = '@import url("x.css")\nbody {}'
        self.assertEqual(self.css.resolve_imports(css, self.base), css)

    def test_self_import_is_dropped(self):
        write_file(self.base, "loop.css", '@import url("loop.css");\nloop {}')
        link_soup = BeautifulSoup(page('', '<link rel="stylesheet" href="loop.css"/>'), 'html.parser')

        self.css.inline(link_soup, self.base)

        self.assertEqual(link_soup.find('style').string, "\nloop {}")

    def test_import_cycle_is_dropped(self):
        write_file(self.base, "a.css", '@import url("b.css");a {}')
        write_file(self.base, "b.css", '@import url("a.css");b {}')
        soup = BeautifulSoup(page('', '<link rel="stylesheet" href="a.css"/>'), 'html.parser')

        self.css.inline(soup, self.base)

        self.assertEqual(soup.find('style').string, "b {}a {}")

    def test_depth_limit_applies_without_cycle_guard(self):
        write_file(self.base, "a.css", '@import url("a.css");x')
        css = CssInliner(max_import_depth=3, guard_import_cycles=False)
        soup = BeautifulSoup(page('', '<link rel="stylesheet" href="a.css"/>'), 'html.parser')

        css.inline(soup, self.base)

        self.assertEqual(soup.find('style').string, "xxx")

    def test_shared_import_is_not_a_cycle(self):
        write_file(self.base, "main.css", '@import url("one.css");@import url("two.css");')
        write_file(self.base, "one.css", '@import url("shared.css");one {}')
        write_file(self.base, "two.css", '@import url("shared.css");two {}')
        write_file(self.base, "shared.css", "shared {}")
        soup = BeautifulSoup(page('', '<link rel="stylesheet" href="main.css"/>'), 'html.parser')

        self.css.inline(soup, self.base)

        self.assertEqual(soup.find('style').string, "shared {}one {}shared {}two {}")


class TestStylesheetInlining(unittest.TestCase):
    """Verify <link rel="stylesheet"> becomes <style type="text/css">."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.base = self._tmp.name
        self.inliner = DocumentInliner(Settings())

    def tearDown(self):
        self._tmp.cleanup()

    def test_link_becomes_style(self):
        write_file(self.base, "css/main.css", "body { color: red; }\n")
        html = page('<p>x</p>', '<link rel="stylesheet" href="css/main.css"/>')

        soup = BeautifulSoup(self.inliner.inline(html, self.base), 'html.parser')

        self.assertIsNone(soup.find('link'))
        style = soup.head.find('style')
        self.assertEqual(style['type'], "text/css")
        self.assertNotIn('media', style.attrs)
        self.assertEqual(style.string, "body { color: red; }\n")

    def test_media_is_carried_over(self):
        write_file(self.base, "print.css", "body { margin: 0; }")
        html = page('', '<link rel="stylesheet" href="print.css" media="print"/>')

        style = BeautifulSoup(self.inliner.inline(html, self.base), 'html.parser').find('style')

        self.assertEqual(style['media'], "print")

    def test_stylesheet_imports_resolve_from_its_directory(self):
        write_file(self.base, "css/main.css", '@import url("common.css");\nh1 {}')
        write_file(self.base, "css/common.css", "p {}")
        html = page('', '<link rel="stylesheet" href="css/main.css"/>')

        style = BeautifulSoup(self.inliner.inline(html, self.base), 'html.parser').find('style')

        self.assertEqual(style.string, "p {}\nh1 {}")

    def test_css_text_is_not_entity_escaped(self):
        write_file(self.base, "main.css", "ul > li { content: \"&\"; }")
        html = page('', '<link rel="stylesheet" href="main.css"/>')

        result = self.inliner.inline(html, self.base)

        self.assertIn('ul > li { content: "&"; }', result)

    def test_style_end_tag_in_css_does_not_close_element(self):
        write_file(self.base, "main.css", 'p::after { content: "</STYLE>"; }')
        html = page('<p>after</p>', '<link rel="stylesheet" href="main.css"/>')

        soup = BeautifulSoup(self.inliner.inline(html, self.base), 'html.parser')

        self.assertEqual(soup.find('style').string, 'p::after { content: "<\\/STYLE>"; }')
        self.assertEqual(soup.body.find('p').string, "after")

    def test_style_end_tag_kept_verbatim_for_xml_host(self):
        write_file(self.base, "main.css", 'p::after { content: "</style>"; }')
        inliner = DocumentInliner(Settings(parser="xml"))
        html = page('', '<link rel="stylesheet" href="main.css"/>')

        soup = BeautifulSoup(inliner.inline(html, self.base), 'xml')

        self.assertEqual(soup.find('style').string, 'p::after { content: "</style>"; }')

    def test_other_rel_is_ignored(self):
        write_file(self.base, "favicon.ico", b"\x00\x00\x01\x00")
        html = page('', '<link rel="icon" href="favicon.ico"/>')
        self.assertEqual(self.inliner.inline(html, self.base), str(self.inliner.parse(html)))

    def test_missing_stylesheet_is_left_alone(self):
        html = page('', '<link rel="stylesheet" href="missing.css"/>')
        self.assertEqual(self.inliner.inline(html, self.base), str(self.inliner.parse(html)))

    def test_link_without_href_is_ignored(self):
        html = page('', '<link rel="stylesheet"/>')
        self.assertEqual(self.inliner.inline(html, self.base), str(self.inliner.parse(html)))

    def test_multi_valued_rel_from_default_soup(self):
        write_file(self.base, "main.css", "body {}")
        soup = BeautifulSoup(page('', '<link rel="stylesheet" href="main.css"/>'), 'html.parser')

        self.assertEqual(CssInliner().inline(soup, self.base), 1)
        self.assertEqual(soup.find('style').string, "body {}")
