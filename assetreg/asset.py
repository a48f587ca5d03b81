# assetreg/asset.py
"""
Asset descriptors.

An Asset names a typed resource the runtime can load: a model, a texture,
or any other opaque kind. It optionally references external file content
(by URL and content hash) and carries inline data. Once an asset is loaded,
its resource slot holds whatever the loader produced.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class AssetKind(Enum):
    """Built-in asset kinds."""
    MODEL = "model"
    TEXTURE = "texture"
    MATERIAL = "material"    # Pure data, no file
    ANIMATION = "animation"
    AUDIO = "audio"
    JSON = "json"
    TEXT = "text"
    CUBEMAP = "cubemap"

    @classmethod
    def coerce(cls, value: "AssetKind | str") -> "AssetKind | str":
        """Map a kind string to its enum member, keeping unknown kinds as strings."""
        if isinstance(value, AssetKind):
            return value
        try:
            return cls(value)
        except ValueError:
            return value


def kind_name(kind: AssetKind | str) -> str:
    """Return the wire name of an asset kind."""
    return kind.value if isinstance(kind, AssetKind) else str(kind)


@dataclass
class FileRef:
    """
    Reference to external file content.

    Attributes:
        url: Location of the content, relative to the registry prefix
        hash: Content hash used for content-addressed lookups
        filename: Original file name
        size: Size in bytes, if known
    """
    url: str
    hash: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"url": self.url}
        if self.hash:
            data["hash"] = self.hash
        if self.filename:
            data["filename"] = self.filename
        if self.size is not None:
            data["size"] = self.size
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRef":
        if not isinstance(data, dict) or not data.get("url"):
            raise ValueError(f"Invalid file reference: {data!r}")
        return cls(
            url=data["url"],
            hash=data.get("hash"),
            filename=data.get("filename"),
            size=data.get("size"),
        )


@dataclass
class Asset:
    """
    A named, typed resource descriptor.

    The asset_id is the identity. Names are expected to be unique but the
    registry does not enforce it (last registration wins the name).

    Attributes:
        name: Human-readable name used for lookups
        kind: Asset kind (AssetKind or string for custom kinds)
        file: Optional reference to the file content
        data: Optional inline data (e.g. a model's name mapping)
        prefix: Prepended to the file URL when resolving it
        asset_id: Identifier; a random one is assigned if not provided
        resource: Loaded resource, None until loaded
    """
    name: str
    kind: AssetKind | str
    file: Optional[FileRef] = None
    data: Optional[Dict[str, Any]] = None
    prefix: str = ""
    asset_id: Optional[str] = None
    resource: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.kind = AssetKind.coerce(self.kind)
        if isinstance(self.file, dict):
            self.file = FileRef.from_dict(self.file) if self.file else None
        if self.asset_id is None:
            self.asset_id = uuid.uuid4().hex

    def get_file_url(self) -> Optional[str]:
        """Resolved URL of the file content, or None if there is no file."""
        if not self.file:
            return None
        return self.prefix + self.file.url

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "asset_id": self.asset_id,
            "name": self.name,
            "kind": kind_name(self.kind),
        }
        if self.file:
            data["file"] = self.file.to_dict()
        if self.data is not None:
            data["data"] = self.data
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], prefix: str = "") -> "Asset":
        """Build an asset from manifest-style fields ('type' is accepted for 'kind')."""
        file_data = data.get("file")
        return cls(
            name=data.get("name", ""),
            kind=data.get("kind", data.get("type", "")),
            file=FileRef.from_dict(file_data) if file_data else None,
            data=data.get("data"),
            prefix=prefix,
            asset_id=data.get("asset_id"),
        )


# Fields a manifest update may overwrite on a live asset
UPDATABLE_FIELDS = ("name", "kind", "file", "data")


@dataclass
class AssetUpdate:
    """
    Partial update of an existing asset.

    Only allow-listed fields are carried; anything else found in a
    manifest entry is dropped when the update is built.
    """
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetUpdate":
        fields = {}
        for key, value in data.items():
            if key == "type":
                key = "kind"
            if key not in UPDATABLE_FIELDS:
                logger.debug(f"Ignoring non-updatable asset field: {key}")
                continue
            if key == "kind":
                value = AssetKind.coerce(value)
            elif key == "file":
                value = FileRef.from_dict(value) if value else None
            fields[key] = value
        return cls(fields=fields)

    def apply(self, asset: Asset) -> List[str]:
        """
        Overwrite the asset's fields in place.

        Returns:
            Names of the fields whose value changed
        """
        changed = []
        for key, value in self.fields.items():
            if getattr(asset, key) != value:
                setattr(asset, key, value)
                changed.append(key)
        return changed
