# tests/test_manifest.py
"""Tests for manifest parsing and asset descriptors."""

import pytest

from assetreg.asset import Asset, AssetKind, AssetUpdate, FileRef
from assetreg.manifest import Manifest


TREE_YAML = """
assets:
  A1:
    name: Tree
    kind: model
    file:
      hash: h1
      url: tree.model
  M1:
    name: Bark
    type: material
    data:
      diffuse: [0.4, 0.3, 0.2]
"""


class TestManifest:
    """Test manifest parsing."""

    def test_from_yaml(self):
        """Test parsing a YAML manifest."""
        manifest = Manifest.from_yaml(TREE_YAML)

        assert len(manifest) == 2
        assert manifest.assets["A1"]["file"] == {"hash": "h1", "url": "tree.model"}
        assert manifest.assets["M1"]["type"] == "material"

    def test_from_json(self):
        """Test parsing a JSON manifest."""
        manifest = Manifest.from_json('{"assets": {"A1": {"name": "Tree", "kind": "model"}}}')
        assert manifest.assets == {"A1": {"name": "Tree", "kind": "model"}}

    def test_numeric_ids_become_strings(self):
        """Test ids are normalised to strings."""
        manifest = Manifest.from_yaml("assets:\n  42:\n    name: Answer\n")
        assert list(manifest.assets) == ["42"]

    def test_empty_assets(self):
        """Test a manifest with no entries."""
        assert len(Manifest.from_yaml("assets:\n")) == 0

    def test_missing_assets_key(self):
        """Test payloads without 'assets' are rejected."""
        with pytest.raises(ValueError, match="assets"):
            Manifest.from_dict({"version": 1})

    def test_assets_not_mapping(self):
        """Test 'assets' must be a mapping."""
        with pytest.raises(ValueError):
            Manifest.from_dict({"assets": ["A1"]})

    def test_entry_not_mapping(self):
        """Test each entry must be a mapping."""
        with pytest.raises(ValueError, match="A1"):
            Manifest.from_dict({"assets": {"A1": "Tree"}})

    def test_invalid_json(self):
        """Test malformed JSON is reported as ValueError."""
        with pytest.raises(ValueError, match="JSON"):
            Manifest.from_json("{not json")

    def test_invalid_yaml(self):
        """Test malformed YAML is reported as ValueError."""
        with pytest.raises(ValueError, match="YAML"):
            Manifest.from_yaml("assets: [unclosed")

    def test_entries_are_copied(self):
        """Test the manifest does not alias the caller's dicts."""
        fields = {"name": "Tree"}
        manifest = Manifest.from_dict({"assets": {"A1": fields}})
        fields["name"] = "Changed"
        assert manifest.assets["A1"]["name"] == "Tree"


class TestAsset:
    """Test asset descriptors."""

    def test_kind_coercion(self):
        """Test known kind strings become enum members."""
        assert Asset("Tree", "model").kind == AssetKind.MODEL
        assert Asset("Level", "level").kind == "level"

    def test_generated_id(self):
        """Test assets get distinct ids by default."""
        assert Asset("A", "json").asset_id != Asset("A", "json").asset_id

    def test_file_url(self):
        """Test URL resolution with prefix."""
        asset = Asset("Tree", "model", file=FileRef(url="tree.model"), prefix="/api/")
        assert asset.get_file_url() == "/api/tree.model"
        assert Asset("Mat", "material").get_file_url() is None

    def test_file_from_dict(self):
        """Test file references given as dicts are parsed."""
        asset = Asset("Tree", "model", file={"url": "tree.model", "hash": "h1"})
        assert asset.file == FileRef(url="tree.model", hash="h1")

    def test_invalid_file(self):
        """Test file references need a URL."""
        with pytest.raises(ValueError):
            FileRef.from_dict({"hash": "h1"})

    def test_from_dict_accepts_type(self):
        """Test 'type' is accepted as the kind field."""
        asset = Asset.from_dict({"name": "Bark", "type": "texture", "file": {"url": "bark.png"}})
        assert asset.kind == AssetKind.TEXTURE
        assert asset.file.url == "bark.png"

    def test_dict_roundtrip(self):
        """Test to_dict/from_dict preserve the descriptor."""
        asset = Asset("Tree", "model", file=FileRef(url="tree.model", hash="h1", size=10),
                      data={"mapping": []}, asset_id="A1")
        assert Asset.from_dict(asset.to_dict()) == asset

    def test_resource_not_serialized(self):
        """Test the runtime resource slot stays out of the descriptor."""
        asset = Asset("Tree", "model", asset_id="A1")
        asset.resource = object()
        assert "resource" not in asset.to_dict()


class TestAssetUpdate:
    """Test allow-listed partial updates."""

    def test_only_allowed_fields(self):
        """Test unknown and identity fields are dropped."""
        update = AssetUpdate.from_dict({"name": "Oak", "asset_id": "X", "prefix": "/x/", "color": "red"})
        assert update.fields == {"name": "Oak"}

    def test_apply_reports_changes(self):
        """Test apply returns the names of changed fields."""
        asset = Asset("Tree", "model", file=FileRef(url="tree.model"), asset_id="A1")
        changed = AssetUpdate.from_dict({"name": "Tree", "kind": "texture", "file": {"url": "t.png"}}).apply(asset)

        assert changed == ["kind", "file"]
        assert asset.kind == AssetKind.TEXTURE
        assert asset.file.url == "t.png"
        assert asset.asset_id == "A1"

    def test_clear_file(self):
        """Test a null file removes the file reference."""
        asset = Asset("Tree", "model", file=FileRef(url="tree.model"))
        AssetUpdate.from_dict({"file": None}).apply(asset)
        assert asset.file is None

    def test_empty_file_means_no_file(self):
        """Test an empty file mapping is read as no file, as on creation."""
        asset = Asset.from_dict({"name": "Tree", "kind": "model", "file": {}})
        update = AssetUpdate.from_dict({"file": {}})

        assert asset.file is None
        assert update.fields == {"file": None}
        assert update.apply(asset) == []
