"""Tests for catalog loading."""

import json

import pytest

from locator_svc.errors import CatalogError
from locator_svc.locations.loader import LocationLoader, load_locations
from locator_svc.locations.types import LocationDescriptor


class TestLoadFile:
    def test_yaml_locations_and_ui_nodes(self, catalog_file):
        nodes = LocationLoader().load_file(catalog_file)

        assert len(nodes) == 3 + 4
        assert [n.type_id for n in nodes[:3]] == ["global:api", "global:api", "auth0"]
        assert all(n.type_id == "cd17:search" for n in nodes[3:])
        assert nodes[0].residency == "US"
        assert nodes[1].residency is None
        assert nodes[5].aliases[0] == "https://search.ui-dev.product.dev.alertlogic.com"
        assert nodes[6].uri == "http://localhost:4220"

    def test_json_list(self, tmp_path):
        path = tmp_path / "locations.json"
        path.write_text(json.dumps([
            {"type_id": "global:api", "environment": "production", "residency": "US",
             "uri": "https://api.global.alertlogic.com"},
            {"type_id": "segment", "uri": "https://segment.io"},
        ]))

        nodes = LocationLoader().load_file(path)

        assert [n.type_id for n in nodes] == ["global:api", "segment"]
        assert nodes[1].environment is None

    def test_camel_case_keys(self):
        nodes = load_locations([{
            "locTypeId": "cd14:ui",
            "insightLocationId": "defender-us-ashburn",
            "environment": "production",
            "residency": "US",
            "uri": "https://console.alertlogic.net",
            "productType": "defender",
        }, {
            "locTypeId": "cd14:fino",
            "parentId": "cd14:ui",
            "uri": "/fino",
        }])

        assert nodes[0].type_id == "cd14:ui"
        assert nodes[0].data_center_id == "defender-us-ashburn"
        assert nodes[0].product_type == "defender"
        assert nodes[1].parent_id == "cd14:ui"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert LocationLoader().load_file(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocationLoader().load_file(tmp_path / "nope.yaml")


class TestInvalidRecords:
    def test_missing_type_id(self):
        with pytest.raises(CatalogError, match="type_id"):
            load_locations([{"uri": "https://x"}])

    def test_record_not_a_mapping(self):
        with pytest.raises(CatalogError):
            load_locations(["global:api"])

    def test_non_string_uri(self):
        with pytest.raises(CatalogError, match="non-string uri"):
            load_locations([{"type_id": "x", "uri": 42}])

    def test_bad_ui_node(self):
        with pytest.raises(CatalogError, match="ui_nodes"):
            load_locations({"ui_nodes": [{"type_id": "cd17:x", "app_code": "x"}]})

    def test_bad_top_level(self):
        with pytest.raises(CatalogError):
            LocationLoader().load_data("global:api")

    def test_catalog_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_locations([{}])


class TestLoadDirectory:
    def test_files_in_alphabetical_order(self, tmp_path):
        (tmp_path / "b.yaml").write_text("- type_id: b\n  uri: https://b\n")
        (tmp_path / "a.yaml").write_text("- type_id: a\n  uri: https://a\n")
        (tmp_path / "c.json").write_text(json.dumps([{"type_id": "c", "uri": "https://c"}]))
        (tmp_path / "notes.txt").write_text("ignored")

        nodes = load_locations(tmp_path)

        assert [n.type_id for n in nodes] == ["a", "b", "c"]

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            LocationLoader().load_directory(tmp_path / "missing")


class TestDescriptor:
    def test_to_dict_drops_cache_state(self):
        node = LocationDescriptor(type_id="x", uri="https://x")
        node.full_uri = "https://x"
        node.detected = True

        data = node.to_dict()

        assert "full_uri" not in data
        assert "detected" not in data
        assert LocationDescriptor.from_dict(data) == node

    def test_cache_state_ignored_in_equality(self):
        a = LocationDescriptor(type_id="x", uri="https://x")
        b = LocationDescriptor(type_id="x", uri="https://x")
        b.full_uri = "https://x"
        assert a == b
