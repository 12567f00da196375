"""
Runtime configuration for linkpreview.

Values are passed into the resolver and its components when they are built.
`from_env()` reads LINKPREVIEW_* environment variables; command-line entry
points call `load_dotenv()` first so a local .env file can supply them.
"""

import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel


DEFAULT_CACHE_DIR = "_cache"
DEFAULT_INCLUDES_DIR = "_includes"
DEFAULT_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; linkpreview; +https://ogp.me/)"


class LinkPreviewConfig(BaseModel):
    """Locations and fetch settings used by LinkPreviewResolver."""
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    # None disables custom template lookup; only the built-in fragments are used
    includes_dir: Optional[Path] = Path(DEFAULT_INCLUDES_DIR)
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "LinkPreviewConfig":
        """Build a config from LINKPREVIEW_* environment variables, falling back to defaults."""
        return cls(
            cache_dir=os.getenv("LINKPREVIEW_CACHE_DIR", DEFAULT_CACHE_DIR),
            includes_dir=os.getenv("LINKPREVIEW_INCLUDES_DIR", DEFAULT_INCLUDES_DIR),
            timeout=float(os.getenv("LINKPREVIEW_TIMEOUT", DEFAULT_TIMEOUT)),
            user_agent=os.getenv("LINKPREVIEW_USER_AGENT", DEFAULT_USER_AGENT),
        )
