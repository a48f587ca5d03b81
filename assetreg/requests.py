# assetreg/requests.py
"""
Load requests and per-kind request builders.

A builder turns an Asset into the request value the loader understands,
or None when the asset has nothing to fetch. Builders are registered by
asset kind and looked up during load dispatch; kinds without a builder
of their own fall back to a plain file request.

Builders never do I/O and never touch the registry.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .asset import Asset, AssetKind, kind_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelRequest:
    """Fetch a model; mapping renames the model's internal references."""
    url: str
    mapping: Any = field(default_factory=list)


@dataclass(frozen=True)
class TextureRequest:
    """Fetch a texture, writing into texture if the caller provided one."""
    url: str
    texture: Any = None


@dataclass(frozen=True)
class FileRequest:
    """Fetch file content for any other asset kind."""
    url: str
    kind: str


# Builder signature: (asset, container) -> request or None
RequestBuilder = Callable[[Asset, Any], Optional[Any]]

# Global builder registry
_BUILDERS: Dict[AssetKind | str, RequestBuilder] = {}


def register_request_builder(kind: AssetKind | str) -> Callable:
    """
    Decorator to register a request builder for an asset kind.

    Usage:
        @register_request_builder(AssetKind.MODEL)
        def build_model(asset, container):
            ...
    """
    def decorator(fn: RequestBuilder) -> RequestBuilder:
        key = AssetKind.coerce(kind)
        if key in _BUILDERS:
            logger.warning(f"Overwriting request builder for {kind_name(key)}")
        _BUILDERS[key] = fn
        return fn
    return decorator


def get_request_builder(kind: AssetKind | str) -> RequestBuilder:
    """Get the builder for a kind, falling back to the file request builder."""
    return _BUILDERS.get(AssetKind.coerce(kind), _build_file)


def list_request_builders() -> Dict[str, RequestBuilder]:
    """List all registered request builders."""
    return {kind_name(k): v for k, v in _BUILDERS.items()}


def clear_request_builders():
    """Clear all registered builders (for testing)."""
    _BUILDERS.clear()


def register_default_builders():
    """Register the built-in model and texture builders."""
    register_request_builder(AssetKind.MODEL)(_build_model)
    register_request_builder(AssetKind.TEXTURE)(_build_texture)


def create_model_request(asset: Asset) -> Optional[ModelRequest]:
    """Model request with the asset's name mapping (empty if it has none)."""
    url = asset.get_file_url()
    if not url:
        return None
    mapping = asset.data.get("mapping") if asset.data else None
    return ModelRequest(url=url, mapping=mapping or [])


def create_texture_request(asset: Asset, texture: Any = None) -> Optional[TextureRequest]:
    """Texture request, optionally loading into a caller-owned texture."""
    url = asset.get_file_url()
    if not url:
        return None
    return TextureRequest(url=url, texture=texture)


def create_file_request(asset: Asset) -> Optional[FileRequest]:
    """Generic request; None if the asset has no file (e.g. materials)."""
    url = asset.get_file_url()
    if not url:
        return None
    return FileRequest(url=url, kind=kind_name(asset.kind))


def _build_model(asset: Asset, container: Any = None) -> Optional[ModelRequest]:
    return create_model_request(asset)


def _build_texture(asset: Asset, container: Any = None) -> Optional[TextureRequest]:
    return create_texture_request(asset, container)


def _build_file(asset: Asset, container: Any = None) -> Optional[FileRequest]:
    return create_file_request(asset)


register_default_builders()


def build_requests(assets: List[Asset], containers: Optional[List[Any]] = None) -> List[Optional[Any]]:
    """
    Build one request per asset, in order.

    Entries are None for assets with nothing to fetch. containers[i], if
    present, is handed to the builder for assets[i].
    """
    containers = containers or []
    requests = []
    for index, asset in enumerate(assets):
        container = containers[index] if index < len(containers) else None
        builder = get_request_builder(asset.kind)
        requests.append(builder(asset, container))
    return requests
