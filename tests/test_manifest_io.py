"""Tests for manifest loading.

These tests verify loading manifests from JSON/YAML files and the
lenient handling of malformed entries.
"""

import json
import logging

import pytest
import yaml

from swift_docker.errors import (
    ManifestInvalidError,
    ManifestMissingError,
    ManifestUnreadableError,
    MissingFieldError,
    NoPlatformsError,
    NoTargetsError,
)
from swift_docker.manifest.io import load_manifest, parse_manifest_data


@pytest.fixture
def manifest_data():
    """Return a valid manifest with two platforms and two targets."""
    return {
        "platforms": [
            {
                "name": "xenial",
                "image_tag": "ubuntu:16.04",
                "os": "ubuntu",
                "version": {"major": "16", "minor": "04"},
            },
            {
                "name": "trusty",
                "image_tag": "ubuntu:14.04",
                "os": "ubuntu",
                "version": {"major": "14", "minor": "04"},
            },
        ],
        "targets": [
            {
                "swift_version": "4.0",
                "version_code": "4.0",
                "platforms": ["xenial", "trusty"],
                "build_scripts": ["install.sh"],
            },
            {
                "swift_version": "3.1.1",
                "version_code": "3.1",
                "platforms": ["trusty"],
                "build_scripts": ["install.sh", "clean.sh"],
            },
        ],
    }


class TestParseManifestData:
    """Tests for parse_manifest_data."""

    def test_valid(self, manifest_data):
        manifest = parse_manifest_data(manifest_data)
        assert [p.name for p in manifest.platforms] == ["xenial", "trusty"]
        assert [t.version_code for t in manifest.targets] == ["4.0", "3.1"]
        assert manifest.platforms[0].source_image_tag == "ubuntu:16.04"
        assert manifest.targets[1].build_scripts == ("install.sh", "clean.sh")

    def test_target_platforms_resolved_in_target_order(self, manifest_data):
        manifest_data["targets"][0]["platforms"] = ["trusty", "xenial"]
        manifest = parse_manifest_data(manifest_data)
        assert [p.name for p in manifest.targets[0].platforms] == ["trusty", "xenial"]

    def test_unknown_platform_dropped(self, manifest_data, caplog):
        manifest_data["targets"][0]["platforms"] = ["xenial", "bionic"]
        with caplog.at_level(logging.WARNING):
            manifest = parse_manifest_data(manifest_data)
        assert [p.name for p in manifest.targets[0].platforms] == ["xenial"]
        assert "bionic" in caplog.text

    def test_duplicate_reference_kept(self, manifest_data):
        manifest_data["targets"][0]["platforms"] = ["xenial", "xenial"]
        manifest = parse_manifest_data(manifest_data)
        assert [p.name for p in manifest.targets[0].platforms] == ["xenial", "xenial"]

    def test_malformed_platform_omitted(self, manifest_data, caplog):
        del manifest_data["platforms"][1]["image_tag"]
        with caplog.at_level(logging.WARNING):
            manifest = parse_manifest_data(manifest_data)
        assert [p.name for p in manifest.platforms] == ["xenial"]
        # trusty references are then unknown
        assert [p.name for p in manifest.targets[1].platforms] == []
        assert "Omitting platform #1" in caplog.text

    def test_duplicate_platform_first_wins(self, manifest_data, caplog):
        duplicate = dict(manifest_data["platforms"][0], image_tag="ubuntu:other")
        manifest_data["platforms"].append(duplicate)
        with caplog.at_level(logging.WARNING):
            manifest = parse_manifest_data(manifest_data)
        assert len(manifest.platforms) == 2
        assert manifest.platforms[0].name == "xenial"
        assert manifest.platforms[0].source_image_tag == "ubuntu:16.04"
        assert "duplicate platform 'xenial'" in caplog.text

    def test_malformed_target_omitted(self, manifest_data, caplog):
        del manifest_data["targets"][0]["swift_version"]
        with caplog.at_level(logging.WARNING):
            manifest = parse_manifest_data(manifest_data)
        assert [t.version_code for t in manifest.targets] == ["3.1"]
        assert "Omitting target #0" in caplog.text

    def test_non_object_entries_omitted(self, manifest_data):
        manifest_data["platforms"].append("not-a-platform")
        manifest_data["targets"].append(42)
        manifest = parse_manifest_data(manifest_data)
        assert len(manifest.platforms) == 2
        assert len(manifest.targets) == 2

    def test_numeric_versions_kept_as_text(self, manifest_data):
        manifest_data["platforms"][0]["version"] = {"major": 16, "minor": 10}
        manifest = parse_manifest_data(manifest_data)
        assert manifest.platforms[0].version.major == "16"
        assert manifest.platforms[0].version.minor == "10"

    def test_numeric_target_versions_kept_as_text(self, manifest_data):
        manifest_data["targets"][0]["swift_version"] = 4.1
        manifest_data["targets"][0]["version_code"] = 4
        manifest_data["targets"] = manifest_data["targets"][:1]
        manifest = parse_manifest_data(manifest_data)
        assert len(manifest.targets) == 1
        assert manifest.targets[0].swift_version == "4.1"
        assert manifest.targets[0].version_code == "4"

    def test_target_without_known_platform_is_kept(self, manifest_data):
        manifest_data["targets"][1]["platforms"] = ["bionic"]
        manifest = parse_manifest_data(manifest_data)
        assert len(manifest.targets) == 2
        assert manifest.targets[1].platforms == ()

    def test_not_an_object(self):
        with pytest.raises(ManifestInvalidError, match="Expected a manifest object"):
            parse_manifest_data(["platforms"])

    def test_missing_platforms(self, manifest_data):
        del manifest_data["platforms"]
        with pytest.raises(MissingFieldError) as exc_info:
            parse_manifest_data(manifest_data)
        assert exc_info.value.field == "platforms"

    def test_missing_targets(self, manifest_data):
        del manifest_data["targets"]
        with pytest.raises(MissingFieldError) as exc_info:
            parse_manifest_data(manifest_data)
        assert exc_info.value.field == "targets"

    def test_platforms_not_a_list(self, manifest_data):
        manifest_data["platforms"] = {"name": "xenial"}
        with pytest.raises(ManifestInvalidError, match="must be a list"):
            parse_manifest_data(manifest_data)

    def test_no_platforms(self, manifest_data):
        manifest_data["platforms"] = []
        with pytest.raises(NoPlatformsError):
            parse_manifest_data(manifest_data)

    def test_no_valid_platforms(self, manifest_data):
        manifest_data["platforms"] = [{"name": "xenial"}]
        with pytest.raises(NoPlatformsError):
            parse_manifest_data(manifest_data)

    def test_no_targets(self, manifest_data):
        manifest_data["targets"] = []
        with pytest.raises(NoTargetsError):
            parse_manifest_data(manifest_data)

    def test_no_valid_targets(self, manifest_data):
        manifest_data["targets"] = [{"swift_version": "4.0"}]
        with pytest.raises(NoTargetsError) as exc_info:
            parse_manifest_data(manifest_data)
        # Same family and exit code as any invalid manifest
        assert isinstance(exc_info.value, ManifestInvalidError)
        assert exc_info.value.exit_code == 12


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_json(self, tmp_path, manifest_data):
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps(manifest_data))
        manifest = load_manifest(path)
        assert len(manifest.targets) == 2

    def test_yaml(self, tmp_path, manifest_data):
        path = tmp_path / "manifest.yaml"
        path.write_text(yaml.dump(manifest_data))
        manifest = load_manifest(path)
        assert [p.name for p in manifest.platforms] == ["xenial", "trusty"]

    def test_yaml_leading_zero_string(self, tmp_path, manifest_data):
        path = tmp_path / "manifest.yml"
        path.write_text(yaml.dump(manifest_data))
        manifest = load_manifest(path)
        assert manifest.platforms[0].version.minor == "04"

    def test_missing(self, tmp_path):
        with pytest.raises(ManifestMissingError) as exc_info:
            load_manifest(tmp_path / "manifest.json")
        assert exc_info.value.exit_code == 10

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text("{not json")
        with pytest.raises(ManifestUnreadableError) as exc_info:
            load_manifest(path)
        assert exc_info.value.exit_code == 11

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "manifest.yaml"
        path.write_text("platforms: [unclosed")
        with pytest.raises(ManifestUnreadableError):
            load_manifest(path)

    def test_directory_unreadable(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.mkdir()
        with pytest.raises(ManifestUnreadableError):
            load_manifest(path)

    def test_empty_yaml_is_invalid(self, tmp_path):
        path = tmp_path / "manifest.yaml"
        path.write_text("")
        with pytest.raises(ManifestInvalidError):
            load_manifest(path)
