import html
import re
from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")
_PERCENT_OCTET_RE = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)


def strip_all_tags(text: str, remove_breaks: bool = False) -> str:
    """
    Remove markup from text, dropping script and style contents entirely.

    HTML entities are decoded once, so the result is plain text.
    """
    if not text:
        return ""

    soup = BeautifulSoup(text, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    plain = soup.get_text()
    if remove_breaks:
        plain = _WHITESPACE_RE.sub(" ", plain)

    return plain.strip()


def trim_words(text: str, num_words: int = 40, more: str = "...") -> str:
    """
    First ``num_words`` words of the markup-stripped text, with ``more``
    appended when anything was cut off.
    """
    words = [w for w in _WHITESPACE_RE.split(strip_all_tags(text)) if w]

    if len(words) > num_words:
        return " ".join(words[:num_words]) + more
    return " ".join(words)


def sanitize_text_field(value) -> str:
    """
    Reduce untrusted input to a single line of plain text.

    Tags are stripped, line breaks, tabs and runs of spaces collapse into one
    space, percent-encoded octets are dropped and the result is trimmed.
    """
    if value is None:
        return ""

    filtered = str(value)
    if "<" in filtered:
        filtered = strip_all_tags(filtered)

    filtered = _WHITESPACE_RE.sub(" ", filtered)

    # Removing one octet can expose another ("%%4141")
    while True:
        stripped = _PERCENT_OCTET_RE.sub("", filtered)
        if stripped == filtered:
            break
        filtered = stripped

    return filtered.strip()


def decode_entities(text: str) -> str:
    """Decode HTML entities (``&amp;``, ``&#8217;``) into plain characters"""
    return html.unescape(text or "")
