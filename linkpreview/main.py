"""
Main orchestrator for linkpreview.

Wires the stages together: cache lookup, fetch and extract on a miss,
cache write, then template rendering. Each resolve() call runs the chain
once; nothing is retried and no state is kept beyond the cache files.
"""

from typing import Optional

from .config import LinkPreviewConfig
from .fetcher import Fetcher
from .extractors import select_extraction
from .metadata_cache import MetadataCache, get_default_cache
from .templates import TemplateRenderer, template_fields
from .schemas import PreviewRecord, PreviewVariant
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")


class LinkPreviewResolver:
    """
    Resolves a URL to a rendered link preview.

    1. MetadataCache: return the stored record if there is one
    2. Fetcher + extractor: build a record from the live page
    3. MetadataCache: persist it (skipped with a warning if the cache
       directory is missing)
    4. TemplateRenderer: render the image or no-image variant
    """

    def __init__(
        self,
        config: Optional[LinkPreviewConfig] = None,
        cache: Optional[MetadataCache] = None,
        fetcher: Optional[Fetcher] = None,
        renderer: Optional[TemplateRenderer] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        if cache is None:
            # Without an explicit config, share the process-wide cache built from LINKPREVIEW_* settings
            cache = MetadataCache(config.cache_dir) if config is not None else get_default_cache()
        self.config = config or LinkPreviewConfig.from_env()
        self.cache = cache
        self.fetcher = fetcher or Fetcher(timeout=self.config.timeout, user_agent=self.config.user_agent)
        self.renderer = renderer or TemplateRenderer.from_includes_dir(self.config.includes_dir)

    def get_properties(self, url: str) -> PreviewRecord:
        """
        Return the preview record for a URL, fetching only on a cache miss.

        Raises:
            FetchError: if the page has to be fetched and cannot be
        """
        cached = self.cache.lookup(url)
        if cached is not None:
            return cached

        page = self.fetcher.fetch(url)
        extraction = select_extraction(page)
        logger.info(f"Extracted {url} with {extraction.strategy} strategy")

        self.cache.store(url, extraction.record)
        return extraction.record

    @staticmethod
    def variant_for(record: PreviewRecord) -> PreviewVariant:
        return PreviewVariant.WITH_IMAGE if record.image else PreviewVariant.WITHOUT_IMAGE

    def resolve(self, url: str, payload: Optional[dict] = None) -> str:
        """
        Render the link preview HTML for a URL.

        Args:
            url: Page to preview
            payload: Ambient values for custom Liquid templates

        Returns:
            HTML fragment
        """
        record = self.get_properties(url)
        variant = self.variant_for(record)

        # The requested URL, not og:url, is what the preview links to
        fields = template_fields(
            variant,
            url=url,
            title=record.title,
            image=record.image,
            description=record.description,
            domain=record.domain,
        )
        return self.renderer.render(variant, fields, payload)


def render_link_preview(
    url: str,
    payload: Optional[dict] = None,
    config: Optional[LinkPreviewConfig] = None
) -> str:
    """Convenience function to render one preview with environment-derived settings."""
    return LinkPreviewResolver(config=config).resolve(url, payload)
