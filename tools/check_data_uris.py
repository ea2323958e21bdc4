import base64
import binascii
import sys

from bs4 import BeautifulSoup

DATA_URI_ATTRIBUTES = ("src", "href", "data")


def iter_data_uris(html):
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup.find_all(True):
        for attr in DATA_URI_ATTRIBUTES:
            value = tag.get(attr)
            if isinstance(value, str) and value.startswith("data:"):
                yield tag.name, value


def check_data_uri(uri):
    """Return an error message for a broken base64 data URI, or None if it decodes."""
    header, sep, payload = uri.partition(',')
    if not sep:
        return "missing ',' separator"
    if not header.endswith(';base64'):
        return None
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        return str(e)
    return None


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: check_data_uris.py FILE")
        return 2

    with open(argv[0], 'r', encoding='utf-8') as f:
        html = f.read()

    failures = 0
    total = 0
    for tag_name, uri in iter_data_uris(html):
        total += 1
        error = check_data_uri(uri)
        header = uri.split(',', 1)[0]
        if error:
            failures += 1
            print(f"FAILURE: <{tag_name}> {header}: {error}")
        else:
            print(f"OK: <{tag_name}> {header} ({len(uri)} chars)")

    print(f"Checked {total} data URIs, {failures} invalid")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
