"""Shared test fixtures for locator tests.

Catalog fixtures build fresh descriptors for every test: reverse lookup and
URL composition write into descriptors in place.
"""

import pytest

from locator_svc.locations.types import Location, LocationDescriptor
from locator_svc.matrix.matrix import LocatorMatrix


SAMPLE_CATALOG_YAML = """\
locations:
  - type_id: global:api
    environment: production
    residency: US
    uri: https://api.global.alertlogic.com
  - type_id: global:api
    environment: integration
    uri: https://api.global-integration.product.dev.alertlogic.com
  - type_id: auth0
    environment: production
    uri: alertlogic.auth0.com

ui_nodes:
  - type_id: cd17:search
    app_code: search
    dev_port: 4220
"""


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def catalog() -> list[LocationDescriptor]:
    """A small catalog covering every lookup tier."""
    return [
        LocationDescriptor(
            type_id=Location.GLOBAL_API,
            environment="production",
            residency="US",
            uri="https://api.global.alertlogic.com",
        ),
        LocationDescriptor(
            type_id=Location.GLOBAL_API,
            environment="integration",
            uri="https://api.global-integration.product.dev.alertlogic.com",
        ),
        LocationDescriptor(
            type_id=Location.INSIGHT_API,
            environment="production",
            residency="US",
            data_center_id="defender-us-denver",
            uri="https://api.denver.example.com",
        ),
        LocationDescriptor(
            type_id=Location.INSIGHT_API,
            environment="production",
            residency="US",
            data_center_id="defender-us-ashburn",
            uri="https://api.ashburn.example.com",
        ),
        LocationDescriptor(
            type_id=Location.INSIGHT_API,
            environment="production",
            residency="EMEA",
            data_center_id="defender-uk-newport",
            uri="https://api.newport.example.co.uk",
        ),
        LocationDescriptor(
            type_id=Location.LEGACY_UI,
            environment="production",
            residency="US",
            uri="https://console.alertlogic.net",
        ),
        LocationDescriptor(
            type_id=Location.LEGACY_UI,
            environment="production",
            residency="EMEA",
            uri="https://console.alertlogic.co.uk",
        ),
        LocationDescriptor(
            type_id=Location.FINO,
            parent_id=Location.LEGACY_UI,
            uri="/fino",
        ),
        LocationDescriptor(
            type_id=Location.AUTH0,
            environment="production",
            uri="alertlogic.auth0.com",
        ),
        *Location.ui_node(Location.INCIDENTS_UI, "incidents", 8001),
    ]


@pytest.fixture
def matrix(catalog) -> LocatorMatrix:
    """Matrix over the test catalog with the default context (production/US)."""
    return LocatorMatrix(catalog)


@pytest.fixture
def catalog_file(tmp_path):
    """The sample catalog written to a YAML file."""
    path = tmp_path / "locations.yaml"
    path.write_text(SAMPLE_CATALOG_YAML, encoding="utf-8")
    return path
