"""Tests for the node index and its fallback priority."""

import pytest

from locator_svc.locations.types import LocationContext, LocationDescriptor
from locator_svc.matrix.context import ContextManager
from locator_svc.matrix.index import NodeIndex, candidate_keys, index_keys


@pytest.fixture
def contexts() -> ContextManager:
    return ContextManager()


@pytest.fixture
def index(contexts, catalog) -> NodeIndex:
    idx = NodeIndex(contexts)
    idx.load(catalog)
    return idx


class TestKeys:
    def test_index_keys_full_node(self):
        node = LocationDescriptor(
            type_id="t", environment="production", residency="US", data_center_id="dc", uri="https://t",
        )
        assert index_keys(node) == [
            ("t", "production", "US", "dc"),
            ("t", "production", "US"),
            ("t", "production", "*"),
            ("t", "*", "*"),
        ]

    def test_index_keys_catch_all_node(self):
        node = LocationDescriptor(type_id="t", uri="https://t")
        assert index_keys(node) == [("t", "*", "*")]

    def test_index_keys_residency_without_environment(self):
        node = LocationDescriptor(type_id="t", residency="EMEA", uri="https://t")
        assert index_keys(node) == [("t", "*", "*")]

    def test_candidate_keys_priority_order(self):
        context = LocationContext(
            environment="production", residency="US", data_center_id="a", accessible=["a", "b"],
        )
        assert candidate_keys("t", context) == [
            ("t", "production", "US", "a"),
            ("t", "production", "US", "b"),
            ("t", "production", "US"),
            ("t", "production", "*"),
            ("t", "*", "*"),
        ]

    def test_candidate_keys_without_data_center(self):
        context = LocationContext(environment="integration", residency="EMEA")
        assert candidate_keys("t", context) == [
            ("t", "integration", "EMEA"),
            ("t", "integration", "*"),
            ("t", "*", "*"),
        ]


class TestLookup:
    def test_exact_key_hit(self, index):
        for node in index.nodes:
            if node.environment and node.residency:
                context = {
                    "environment": node.environment,
                    "residency": node.residency,
                    "data_center_id": node.data_center_id,
                }
                assert index.lookup(node.type_id, context) is node

    def test_environment_and_residency_hit(self, index):
        node = index.lookup("global:api", {"environment": "production", "residency": "US"})
        assert node.uri == "https://api.global.alertlogic.com"

    def test_environment_fallback_beats_type_fallback(self, contexts):
        exact = LocationDescriptor(type_id="t", environment="production", residency="US", uri="https://exact")
        by_env = LocationDescriptor(type_id="t", environment="production", uri="https://env")
        catch_all = LocationDescriptor(type_id="t", uri="https://any")
        index = NodeIndex(contexts)
        index.load([exact, by_env, catch_all])

        assert index.lookup("t", {"environment": "production", "residency": "EMEA"}) is by_env
        assert index.lookup("t", {"environment": "production", "residency": "US"}) is exact
        assert index.lookup("t", {"environment": "development"}) is catch_all

    def test_type_fallback(self, index):
        node = index.lookup("cd14:fino", {"environment": "integration", "residency": "EMEA"})
        assert node is not None
        assert node.uri == "/fino"

    def test_unknown_type_returns_none(self, index):
        assert index.lookup("unknown:type") is None

    def test_data_center_has_priority(self, index):
        node = index.lookup("insight:api", {"data_center_id": "defender-us-denver"})
        assert node.data_center_id == "defender-us-denver"

    def test_accessible_in_list_order(self, index):
        node = index.lookup(
            "insight:api", {"accessible": ["defender-us-denver", "defender-us-ashburn"]},
        )
        assert node.data_center_id == "defender-us-denver"

        node = index.lookup(
            "insight:api", {"accessible": ["defender-us-ashburn", "defender-us-denver"]},
        )
        assert node.data_center_id == "defender-us-ashburn"

    def test_data_center_before_accessible(self, index):
        node = index.lookup(
            "insight:api",
            {"data_center_id": "defender-us-ashburn", "accessible": ["defender-us-denver"]},
        )
        assert node.data_center_id == "defender-us-ashburn"

    def test_inaccessible_residency_skipped(self, index):
        # newport is an EMEA data center; under a US context its key does not exist
        node = index.lookup(
            "insight:api", {"accessible": ["defender-uk-newport", "defender-us-denver"]},
        )
        assert node.data_center_id == "defender-us-denver"

    def test_explicit_context_overlays_ambient(self, index, contexts):
        contexts.set_context(residency="EMEA")
        node = index.lookup("insight:api", {"data_center_id": "defender-uk-newport"})
        assert node.residency == "EMEA"
        assert node.data_center_id == "defender-uk-newport"

    def test_later_catalog_entry_wins_shared_key(self, index):
        # denver and ashburn share (insight:api, production, US)
        node = index.lookup("insight:api")
        assert node.data_center_id == "defender-us-ashburn"


class TestMemo:
    def test_ambient_lookup_memoized(self, index, contexts):
        first = index.lookup("global:api")
        # Mutating the live context directly bypasses invalidation
        contexts.get_context().environment = "integration"
        assert index.lookup("global:api") is first

    def test_set_context_flushes_memo(self, index, contexts):
        assert index.lookup("global:api").environment == "production"
        contexts.set_context(environment="integration")
        assert index.lookup("global:api").environment == "integration"

    def test_explicit_context_not_memoized(self, index):
        integration = index.lookup("global:api", {"environment": "integration"})
        assert integration.environment == "integration"
        assert index.lookup("global:api").environment == "production"

    def test_reload_makes_new_type_resolvable(self, index, catalog):
        assert index.lookup("late:type") is None
        index.load(catalog + [LocationDescriptor(type_id="late:type", uri="https://late")])
        assert index.lookup("late:type").uri == "https://late"


class TestLoad:
    def test_load_replaces_catalog(self, index):
        replacement = LocationDescriptor(type_id="other", uri="https://other")
        index.load([replacement])

        assert index.lookup("global:api") is None
        assert index.lookup("other") is replacement
        assert index.nodes == [replacement]

    def test_load_is_idempotent(self, index, catalog):
        queries = [
            ("global:api", None),
            ("global:api", {"environment": "integration"}),
            ("insight:api", {"accessible": ["defender-us-denver"]}),
            ("cd17:incidents", {"environment": "production", "residency": "EMEA"}),
            ("cd17:incidents", {"environment": "development"}),
            ("missing", None),
        ]
        before = [index.lookup(t, c) for t, c in queries]
        index.load(catalog)
        index.load(catalog)
        after = [index.lookup(t, c) for t, c in queries]

        assert all(a is b for a, b in zip(before, after))

    def test_load_flushes_memo(self, index):
        index.lookup("global:api")
        replacement = LocationDescriptor(type_id="global:api", uri="https://new-global")
        index.load([replacement])
        assert index.lookup("global:api") is replacement
