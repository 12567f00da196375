"""
Pydantic schemas shared by the pipeline stages.

PreviewRecord: produced by an extractor, persisted by the cache, consumed by
the renderer.

Data flow:
  Fetcher → FetchedPage → extractor → PreviewRecord → MetadataCache
  PreviewRecord → PreviewVariant + fields → TemplateRenderer → HTML
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class PreviewVariant(Enum):
    """Rendering path, picked by whether the record carries an image."""
    WITH_IMAGE = "with_image"
    WITHOUT_IMAGE = "without_image"


class PreviewRecord(BaseModel):
    """
    Metadata extracted for one URL.

    Only the Open Graph extractor sets `image`, so its presence is what
    tells the renderer which variant to use. Absent fields are None and are
    written to the cache as explicit JSON nulls.
    """
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None        # Always absolute once set
    description: Optional[str] = None
    domain: Optional[str] = None       # Host (Open Graph) or root URL (fallback)
