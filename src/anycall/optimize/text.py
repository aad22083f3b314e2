"""HTML to plain text flattening on BeautifulSoup."""

from __future__ import annotations

import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, NavigableString

from anycall.foundation.errors import ConfigurationError

_BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt", "fieldset", "figcaption",
    "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main",
    "nav", "ol", "p", "pre", "section", "table", "tr", "ul",
)
_NOISE_TAGS = ("script", "style", "noscript", "template")
_WHITESPACE = re.compile(r"\s+")


def html_to_text(html: str, skip: Iterable[str] = (), *, item_index: int | None = None) -> str:
    """Flatten ``html`` to text, one line per block element.

    Whitespace inside text runs collapses to single spaces, so only ``br``
    and block boundaries start new lines. Subtrees matching any selector in
    ``skip`` are dropped, as are script and style content.

    Raises:
        ConfigurationError: A skip selector is not valid CSS.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(list(_NOISE_TAGS)):
        tag.decompose()
    for selector in skip:
        if not selector:
            continue
        try:
            matches = soup.select(selector)
        except Exception as e:
            raise ConfigurationError(
                f"Invalid selector in elements to omit '{selector}': {e}", item_index=item_index
            ) from e
        for tag in matches:
            tag.extract()

    # Comments and CDATA are NavigableString subclasses; leave them alone
    for text in soup.find_all(string=True):
        if type(text) is NavigableString:
            text.replace_with(_WHITESPACE.sub(" ", str(text)))

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(list(_BLOCK_TAGS)):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines = (line.strip() for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)
