# assetreg/manifest.py
"""
Asset manifest (table of contents).

The manifest is the server's description of the known assets:

    assets:
      A1:
        name: Tree
        kind: model
        file:
          hash: h1
          url: tree.model

Entries are partial: for an asset the registry already knows, only the
fields present are updated. There is no versioning and no deletion.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict

import yaml


@dataclass
class Manifest:
    """Parsed manifest: asset id -> partial asset fields."""
    assets: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.assets)

    def to_dict(self) -> Dict[str, Any]:
        return {"assets": self.assets}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        """Parse manifest from a decoded mapping."""
        if not isinstance(data, dict) or "assets" not in data:
            raise ValueError("Manifest must be a mapping with an 'assets' key")

        raw_assets = data["assets"] or {}
        if not isinstance(raw_assets, dict):
            raise ValueError("Manifest 'assets' must be a mapping of id -> fields")

        assets = {}
        for asset_id, fields in raw_assets.items():
            if not isinstance(fields, dict):
                raise ValueError(f"Manifest entry {asset_id!r} must be a mapping")
            assets[str(asset_id)] = dict(fields)
        return cls(assets=assets)

    @classmethod
    def from_json(cls, json_content: str) -> "Manifest":
        """Parse manifest from a JSON string."""
        try:
            data = json.loads(json_content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid manifest JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "Manifest":
        """Parse manifest from a YAML string."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid manifest YAML: {e}") from e
        return cls.from_dict(data)
