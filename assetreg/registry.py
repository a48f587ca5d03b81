# assetreg/registry.py
"""
Asset registry.

The registry is the runtime's catalog of assets, indexed by id and by
name. It is populated from the server manifest and loads assets through
a Loader:

    registry = AssetRegistry(loader, prefix="/api/files/")
    registry.update(manifest)

    result = await registry.load(registry.get_asset("Tree"))
    if result.success:
        model = result.entries[0].resource

The catalog lives in memory only and is rebuilt from the manifest each
session. All operations except load() are synchronous; load() suspends
only while the loader works on the batch.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence

from .asset import Asset, AssetKind, AssetUpdate, kind_name
from .loader import Loader, LoadError
from .manifest import Manifest
from .requests import build_requests

logger = logging.getLogger(__name__)

# Error hook type: (error, assets in the failed load)
ErrorCallback = Callable[[BaseException, List[Asset]], None]

LOADED = "loaded"
SKIPPED = "skipped"


@dataclass
class LoadOptions:
    """
    Per-call load options.

    Attributes:
        result_containers: Caller-owned containers, by input position.
            Only texture assets use theirs; the loader writes into it.
        loader_options: Passed through to the loader untouched
    """
    result_containers: Optional[Sequence[Any]] = None
    loader_options: Optional[Dict[str, Any]] = None


@dataclass
class LoadEntry:
    """Outcome for one input asset."""
    asset: Asset
    status: str  # "loaded" or "skipped"
    resource: Any = None

    @property
    def loaded(self) -> bool:
        return self.status == LOADED


@dataclass
class LoadResult:
    """
    Result of loading a list of assets.

    entries lines up with the input list. resources is the loader's own
    sequence, one per fetched asset, so skipped assets leave no gap there.
    """
    success: bool
    entries: List[LoadEntry] = field(default_factory=list)
    resources: List[Any] = field(default_factory=list)
    error: Optional[BaseException] = None

    def raise_for_error(self):
        """Re-raise the load failure, if any."""
        if self.error is not None:
            raise self.error


@dataclass
class UpdateStats:
    """Summary of a manifest merge."""
    created: int = 0
    updated: int = 0


class AssetRegistry:
    """
    Container for all assets available to the application.

    Args:
        loader: Loader used to fetch asset files
        prefix: Prepended to file URLs of assets created from the manifest
        on_error: Called with (error, assets) whenever a load fails
    """

    def __init__(self, loader: Loader, prefix: str = "", on_error: Optional[ErrorCallback] = None):
        if not loader:
            raise ValueError("Must provide a Loader instance for AssetRegistry")

        self.loader = loader
        self.prefix = prefix or ""
        self.on_error = on_error
        self._cache: Dict[str, Asset] = {}
        self._names: Dict[str, str] = {}

    def update(self, manifest: Manifest | Dict[str, Any]) -> UpdateStats:
        """
        Merge a manifest into the catalog.

        Unknown ids become new assets (and their file hashes are registered
        with the loader). Known ids have the manifest fields applied in
        place. Nothing is ever removed.

        Every entry is parsed before the catalog is touched, so a malformed
        entry leaves the catalog unchanged.
        """
        if not isinstance(manifest, Manifest):
            manifest = Manifest.from_dict(manifest)

        parsed = []
        for asset_id, fields in manifest.assets.items():
            asset = self.get_by_id(asset_id)
            if asset is None:
                parsed.append((asset_id, None, Asset.from_dict(fields, prefix=self.prefix)))
            else:
                parsed.append((asset_id, asset, AssetUpdate.from_dict(fields)))

        stats = UpdateStats()
        for asset_id, asset, change in parsed:
            if asset is None:
                asset = change
                asset.asset_id = asset_id  # manifest id wins
                self.add(asset)

                if asset.file and asset.file.hash:
                    self.loader.register_hash(asset.file.hash, asset.get_file_url())
                stats.created += 1
            else:
                old_name = asset.name
                old_kind = asset.kind
                changed = change.apply(asset)
                if not changed:
                    continue

                if "name" in changed:
                    if self._names.get(old_name) == asset_id:
                        del self._names[old_name]
                    self._names[asset.name] = asset_id
                if "kind" in changed:
                    logger.info(
                        f"Asset {asset_id} retyped: {kind_name(old_kind)} -> {kind_name(asset.kind)}"
                    )
                stats.updated += 1

        logger.info(f"Manifest merged: {stats.created} created, {stats.updated} updated")
        return stats

    def add(self, asset: Asset):
        """Add an asset, replacing any asset with the same id and taking over its name."""
        self._cache[asset.asset_id] = asset
        self._names[asset.name] = asset.asset_id

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        """Get an asset by id."""
        return self._cache.get(asset_id)

    def get_by_name(self, name: str) -> Optional[Asset]:
        """Get an asset by name."""
        asset_id = self._names.get(name)
        if asset_id is None:
            return None
        return self._cache.get(asset_id)

    get_asset = get_by_name
    get_asset_by_resource_id = get_by_id

    def all(self) -> List[Asset]:
        """List all assets."""
        return list(self._cache.values())

    def find_by_kind(self, kind: AssetKind | str) -> List[Asset]:
        """Find assets of a specific kind."""
        kind = AssetKind.coerce(kind)
        return [a for a in self._cache.values() if a.kind == kind]

    def find_by_hash(self, content_hash: str) -> Optional[Asset]:
        """Find an asset by file content hash."""
        for asset in self._cache.values():
            if asset.file and asset.file.hash == content_hash:
                return asset
        return None

    def load(self, assets: Asset | Sequence[Asset], options: Optional[LoadOptions] = None) -> Awaitable[LoadResult]:
        """
        Load the resources for a list of assets as one loader batch.

        Assets not yet in the registry are added to it and requests are
        built before this returns; only the loader batch is awaited. Assets
        with nothing to fetch (no file) are skipped: they get a "skipped"
        entry, their resource is cleared, and they contribute nothing to
        the loader batch.

        Args:
            assets: One asset or a list of assets
            options: Result containers and loader options

        Returns:
            Awaitable LoadResult; on failure, success is False and error is set
        """
        if isinstance(assets, Asset):
            assets = [assets]
        else:
            assets = list(assets)
        options = options or LoadOptions()

        for asset in assets:
            if asset.asset_id not in self._cache:
                logger.debug(f"Registering asset on load: {asset.name} ({asset.asset_id})")
                self.add(asset)

        requests = build_requests(assets, list(options.result_containers or []))
        batch = [r for r in requests if r is not None]
        return self._submit(assets, requests, batch, options)

    async def _submit(
        self,
        assets: List[Asset],
        requests: List[Optional[Any]],
        batch: List[Any],
        options: LoadOptions,
    ) -> LoadResult:
        """Await the loader batch and match resources back to assets."""
        try:
            resources = await self.loader.request(batch, options.loader_options)
            resources = list(resources)
            if len(resources) != len(batch):
                raise LoadError(
                    f"Loader returned {len(resources)} resources for {len(batch)} requests"
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._report_error(e, assets)
            return LoadResult(success=False, error=e)

        entries = []
        fetched = iter(resources)
        for asset, request in zip(assets, requests):
            if request is None:
                asset.resource = None
                entries.append(LoadEntry(asset=asset, status=SKIPPED))
                continue
            resource = next(fetched)
            asset.resource = resource
            entries.append(LoadEntry(asset=asset, status=LOADED, resource=resource))

        return LoadResult(success=True, entries=entries, resources=resources)

    def _report_error(self, error: BaseException, assets: List[Asset]):
        """Make a load failure visible: log it and hand it to the error hook."""
        names = ", ".join(a.name for a in assets)
        logger.error(f"Failed to load assets [{names}]: {error}", exc_info=error)
        if self.on_error:
            try:
                self.on_error(error, assets)
            except Exception as e:
                logger.warning(f"Load error callback failed: {e}")

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self.all())
