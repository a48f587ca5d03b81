# assetreg - In-memory asset registry for runtime resource loading
#
# Keeps a catalog of named, typed assets reconciled from a server manifest
# and loads their resources through a batched loader.
#
# Core concepts:
# - Asset: A named, typed resource descriptor, optionally backed by a file
# - Manifest: The server's table of contents, merged into the registry
# - Request builders: Turn an asset into the loader request for its kind
# - Loader: Fetches a batch of requests and returns one resource per request
# - AssetRegistry: The catalog, indexed by id and by name, plus load dispatch

from .asset import Asset, AssetKind, AssetUpdate, FileRef
from .manifest import Manifest
from .requests import (
    FileRequest,
    ModelRequest,
    TextureRequest,
    create_file_request,
    create_model_request,
    create_texture_request,
    get_request_builder,
    register_request_builder,
)
from .loader import Loader, LoadError, ResourceLoader
from .registry import AssetRegistry, LoadEntry, LoadOptions, LoadResult, UpdateStats

__all__ = [
    # Assets
    "Asset",
    "AssetKind",
    "AssetUpdate",
    "FileRef",
    "Manifest",
    # Requests
    "FileRequest",
    "ModelRequest",
    "TextureRequest",
    "create_file_request",
    "create_model_request",
    "create_texture_request",
    "get_request_builder",
    "register_request_builder",
    # Loading
    "Loader",
    "LoadError",
    "ResourceLoader",
    # Registry
    "AssetRegistry",
    "LoadEntry",
    "LoadOptions",
    "LoadResult",
    "UpdateStats",
]

__version__ = "0.1.0"
