"""Link extraction from markdown and HTML documents.

Both extractors return links in document order together with the 1-based
line they were found on.
"""

from pathlib import Path
from typing import List, Union

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from linkcheck.core.models import ExtractedLink

MARKDOWN_EXTENSIONS = (".md", ".markdown")
HTML_EXTENSIONS = (".html", ".htm")

LINE_BREAKS = ("softbreak", "hardbreak")


def _keep_destination(url: str) -> str:
    return url


def _markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    # Report destinations as written instead of percent-encoded.
    md.normalizeLink = _keep_destination
    return md


def extract_markdown_links(text: str) -> List[ExtractedLink]:
    """Collect ``[text](dest)`` and reference link destinations.

    Autolinks, images and anything inside code are not links.
    """
    links = []
    for block in _markdown_parser().parse(text):
        if block.type != "inline" or not block.children:
            continue
        line = block.map[0] + 1 if block.map else None
        for token in block.children:
            if token.type in LINE_BREAKS and line is not None:
                line += 1
            elif token.type == "link_open" and token.markup != "autolink":
                links.append(ExtractedLink(target=token.attrGet("href") or "", line=line))
    return links


def extract_html_links(content: Union[str, bytes]) -> List[ExtractedLink]:
    soup = BeautifulSoup(content, "html.parser")
    return [
        ExtractedLink(target=link["href"].strip(), line=link.sourceline)
        for link in soup.find_all("a", href=True)
    ]


def is_markdown_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in MARKDOWN_EXTENSIONS


def is_html_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in HTML_EXTENSIONS


def extract_links_from_file(path: Union[str, Path]) -> List[ExtractedLink]:
    """Read a markdown or HTML file and extract its links."""
    path = Path(path)
    if is_html_file(path):
        return extract_html_links(path.read_bytes())
    return extract_markdown_links(path.read_text(encoding="utf-8", errors="replace"))
