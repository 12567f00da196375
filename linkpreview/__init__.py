"""
linkpreview

Renders link preview HTML fragments for URLs.
- Fetcher: downloads and parses the target page
- Extractors: Open Graph tags first, page title and first paragraph otherwise
- MetadataCache: one JSON file per URL, write-once
- TemplateRenderer: custom Liquid templates or built-in fragments

Public API surface:
  Orchestrator  : LinkPreviewResolver, render_link_preview
  Pipeline parts: Fetcher, FetchedPage, OpenGraphExtractor, FallbackExtractor,
                  select_extraction, TemplateRenderer, FileTemplateSource,
                  DefaultTemplateSource
  Data models   : PreviewRecord, PreviewVariant
  Configuration : LinkPreviewConfig
  Error types   : LinkPreviewError, FetchError (fatal), CacheError (treated as miss)
  Caching       : MetadataCache, get_default_cache
"""

from .main import LinkPreviewResolver, render_link_preview

from .fetcher import Fetcher, FetchedPage
from .extractors import (
    OpenGraphExtractor,
    FallbackExtractor,
    OpenGraphExtraction,
    FallbackExtraction,
    select_extraction,
)
from .templates import TemplateRenderer, TemplateSource, FileTemplateSource, DefaultTemplateSource

from .schemas import PreviewRecord, PreviewVariant
from .config import LinkPreviewConfig

from .exceptions import LinkPreviewError, FetchError, CacheError

from .metadata_cache import MetadataCache, get_default_cache

__version__ = "0.1.0"
__all__ = [
    "LinkPreviewResolver",
    "render_link_preview",
    "Fetcher",
    "FetchedPage",
    "OpenGraphExtractor",
    "FallbackExtractor",
    "OpenGraphExtraction",
    "FallbackExtraction",
    "select_extraction",
    "TemplateRenderer",
    "TemplateSource",
    "FileTemplateSource",
    "DefaultTemplateSource",
    "PreviewRecord",
    "PreviewVariant",
    "LinkPreviewConfig",
    "LinkPreviewError",
    "FetchError",
    "CacheError",
    "MetadataCache",
    "get_default_cache",
]
