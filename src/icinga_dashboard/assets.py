"""
Static assets served under ``/static/``.

The files ship inside the package and are read once when the registry is
built; the registry is immutable afterwards.
"""

import logging
import os
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple

# Module logger
logger = logging.getLogger(__name__)

# Logical name -> content type of every asset the dashboard serves
ASSET_CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "script.js": "text/javascript",
        "script.ts": "application/typescript",
        "script.js.map": "application/json",
    }
)


class StaticAsset(NamedTuple):
    """An embedded file together with the content type it is served with."""

    content_type: str
    body: bytes


def load_assets() -> Mapping[str, StaticAsset]:
    """
    Read all static assets from the package.

    Returns:
        Mapping[str, StaticAsset]: Read-only mapping from logical name to asset.

    Raises:
        OSError: If an asset is missing from the installation.
    """
    static_dir = os.path.join(os.path.dirname(__file__), "static")
    assets: Dict[str, StaticAsset] = {}
    for name, content_type in ASSET_CONTENT_TYPES.items():
        with open(os.path.join(static_dir, name), "rb") as f:
            assets[name] = StaticAsset(content_type=content_type, body=f.read())
    logger.debug(f"Loaded {len(assets)} static assets.")
    return MappingProxyType(assets)
