"""
Link extraction and scope filtering for the SiteAudit crawler.

Addresses are compared as exact strings after resolution: no trailing-slash,
port or query normalization happens here.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_audit.utils import remove_duplicates


def extract_links(page_url: str, html: str) -> List[str]:
    """
    Return every <a href> of *html* resolved against *page_url*, in document order.

    Relative references resolve against the document's own address, not the seed.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        try:
            links.append(urljoin(page_url, href_val.strip()))
        except ValueError:
            # malformed href (e.g. broken IPv6 literal)
            continue
    return links


def in_scope(url: str, seed: str) -> bool:
    """A link is in scope when its text starts with the seed's text."""
    return url.startswith(seed)


def scoped_links(page_url: str, html: str, seed: str) -> List[str]:
    """In-scope outbound links of a page, deduplicated in first-seen order."""
    return remove_duplicates([u for u in extract_links(page_url, html) if in_scope(u, seed)])
