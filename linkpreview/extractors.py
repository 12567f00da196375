"""
Preview extractors: turn a FetchedPage into a PreviewRecord.

Pipeline position: Stage 2 (Fetcher → extractor → cache → renderer).

Two strategies, picked by select_extraction():
  - OpenGraphExtractor: page declares <meta property=...> tags.
  - FallbackExtractor: page declares none; use <title> and the first
    non-blank paragraph instead.

Only the Open Graph strategy fills `image`. Downstream code relies on that
to choose the rendering variant, including for records read back from cache.
"""

from typing import Optional, Union
from urllib.parse import urljoin

from .fetcher import FetchedPage
from .schemas import PreviewRecord
from .logger import get_module_logger

logger = get_module_logger("extractors")

DESCRIPTION_LIMIT = 180
ELLIPSIS = "..."
PARAGRAPH_XPATH = "//p[normalize-space()]"


def to_absolute_url(url: Optional[str], root_url: str) -> Optional[str]:
    """Resolve a root-relative URL ("/img/a.png") against the page origin; pass anything else through."""
    if url is None:
        return None
    if url.startswith("/"):
        return urljoin(root_url, url)
    return url


class OpenGraphExtractor:
    """Reads og:title, og:image, og:url and og:description."""

    def extract(self, page: FetchedPage) -> PreviewRecord:
        properties = page.og_properties
        return PreviewRecord(
            title=self._first(properties, "og:title"),
            url=self._first(properties, "og:url"),
            image=to_absolute_url(self._first(properties, "og:image"), page.root_url),
            description=self._first(properties, "og:description"),
            domain=page.host,
        )

    @staticmethod
    def _first(properties: dict[str, list[str]], key: str) -> Optional[str]:
        values = properties.get(key)
        if not values:
            return None
        return values[0]


class FallbackExtractor:
    """Heuristic extraction for pages without Open Graph tags."""

    def extract(self, page: FetchedPage) -> PreviewRecord:
        return PreviewRecord(
            title=page.title,
            url=page.url,
            description=self._description(page),
            domain=page.root_url,
        )

    def _description(self, page: FetchedPage) -> str:
        # Character slice, not word-aware; the ellipsis is appended even to short text
        paragraphs = page.xpath(PARAGRAPH_XPATH)
        if not paragraphs:
            return ELLIPSIS
        text = "".join(paragraphs[0].itertext())
        return text[:DESCRIPTION_LIMIT] + ELLIPSIS


# --- Strategy selection ---

class OpenGraphExtraction:
    """Record produced by OpenGraphExtractor."""
    strategy = "open_graph"

    def __init__(self, record: PreviewRecord):
        self.record = record


class FallbackExtraction:
    """Record produced by FallbackExtractor."""
    strategy = "fallback"

    def __init__(self, record: PreviewRecord):
        self.record = record


Extraction = Union[OpenGraphExtraction, FallbackExtraction]

_og_extractor = OpenGraphExtractor()
_fallback_extractor = FallbackExtractor()


def has_og_properties(page: FetchedPage) -> bool:
    """True when the page declares any <meta property=...> tag, Open Graph or not."""
    return bool(page.og_properties)


def select_extraction(page: FetchedPage) -> Extraction:
    """Run exactly one extractor on the page, chosen by has_og_properties()."""
    if has_og_properties(page):
        logger.debug(f"Using Open Graph properties for {page.url}")
        return OpenGraphExtraction(_og_extractor.extract(page))
    logger.debug(f"No Open Graph properties on {page.url}, using fallback extraction")
    return FallbackExtraction(_fallback_extractor.extract(page))
