import argparse
import logging
import os
import sys

from docinliner import __version__
from docinliner.core.inliner import DocumentInliner
from docinliner.core.notify import dump_message_to_stdout
from docinliner.core.settings import Settings

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="docinliner",
        description="Inline images, stylesheets and SVG objects into a single stand-alone XHTML file."
    )
    parser.add_argument("input", help="Input XHTML file")
    parser.add_argument("output", help="Output stand-alone file ('-' for stdout)")
    parser.add_argument("-b", "--base-path", help="Directory the resources are resolved against (default: directory of input)")
    parser.add_argument("-c", "--config", help="JSON settings file")
    parser.add_argument("--parser", help="BeautifulSoup parser for the document (e.g. html.parser, xml)")
    parser.add_argument("--encoding", help="Encoding of the input, stylesheets and SVG files")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("-v", "--version", action="version", version=f"docinliner {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format='%(levelname)s: %(message)s', stream=sys.stderr)

    config_path = args.config
    if config_path is None:
        default_path = Settings.default_config_path()
        config_path = default_path if default_path.exists() else None

    # A private instance, so command line overrides never leak into get_instance()
    settings = Settings(config_path, parser=args.parser, encoding=args.encoding)

    base_path = args.base_path
    if base_path is None:
        base_path = os.path.dirname(args.input)

    try:
        with open(args.input, "r", encoding=settings.encoding) as f:
            html = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1

    result = DocumentInliner(settings).inline(html, base_path)

    if args.output == "-":
        sys.stdout.write(result)
        return 0

    try:
        with open(args.output, "w", encoding=settings.encoding) as f:
            f.write(result)
    except OSError as e:
        logger.error(f"Could not write {args.output}: {e}")
        return 1

    dump_message_to_stdout(f"Stand-alone document created: {args.output}")
    return 0
