"""Location types - descriptors, resolution context, and location type ids."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


# Legacy camelCase catalog keys
_KEY_ALIASES = {
    "locTypeId": "type_id",
    "parentId": "parent_id",
    "insightLocationId": "data_center_id",
    "productType": "product_type",
    "uiCaption": "ui_caption",
    "uiEntryPoint": "ui_entry_point",
}


@dataclass
class LocationDescriptor:
    """
    A single deployed instance of a location type.

    Within one catalog the tuple (type_id, environment, residency,
    data_center_id) is unique.  A node without environment/residency acts as
    a catch-all for its type.

    Descriptors are shared by reference between the node index and the URI
    pattern index, so in-place corrections (URI discovery) are visible to both.
    """
    type_id: str
    uri: str = ""
    parent_id: str | None = None
    data_center_id: str | None = None   # e.g. 'defender-us-ashburn', 'insight-eu-ireland'
    residency: str | None = None        # 'US', 'EMEA'
    environment: str | None = None      # 'production', 'integration', 'development'
    aliases: list[str] = field(default_factory=list)

    product_type: str | None = None     # 'defender' or 'insight'
    aspect: str | None = None           # 'ui' or 'api'

    ui_caption: str | None = None
    ui_entry_point: Any = None
    data: Any = None

    # Composed URL cache, owned by the composer
    full_uri: str | None = field(default=None, repr=False, compare=False)
    # Set once reverse lookup has replaced ``uri`` with an observed base URL
    detected: bool = field(default=False, repr=False, compare=False)

    def invalidate(self) -> None:
        """Drop the cached composed URL."""
        self.full_uri = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocationDescriptor:
        """Create a descriptor from a mapping (snake_case or legacy camelCase keys)."""
        values = {_KEY_ALIASES.get(k, k): v for k, v in data.items()}
        return cls(
            type_id=values["type_id"],
            uri=values.get("uri", ""),
            parent_id=values.get("parent_id"),
            data_center_id=values.get("data_center_id"),
            residency=values.get("residency"),
            environment=values.get("environment"),
            aliases=list(values.get("aliases") or []),
            product_type=values.get("product_type"),
            aspect=values.get("aspect"),
            ui_caption=values.get("ui_caption"),
            ui_entry_point=values.get("ui_entry_point"),
            data=values.get("data"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation (without cache state)."""
        result = asdict(self)
        result.pop("full_uri")
        result.pop("detected")
        return result


@dataclass
class LocationContext:
    """
    Ambient resolution context.

    - environment: production, integration, development
    - residency: US or EMEA
    - data_center_id: insight location id, e.g. 'defender-us-ashburn'
    - accessible: insight location ids reachable from the current vantage point
    """
    environment: str | None = "production"
    residency: str | None = "US"
    data_center_id: str | None = None
    accessible: list[str] | None = None

    def copy(self) -> LocationContext:
        return LocationContext(
            environment=self.environment,
            residency=self.residency,
            data_center_id=self.data_center_id,
            accessible=list(self.accessible) if self.accessible is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Location:
    """
    Location type ids.  Each type is expected to have a single instance per
    environment and residency.
    """

    # API stacks
    GLOBAL_API = "global:api"
    INSIGHT_API = "insight:api"
    ENDPOINTS_API = "endpoints:api"

    # UI nodes
    LEGACY_UI = "cd14:ui"
    OVERVIEW_UI = "cd17:overview"
    INTELLIGENCE_UI = "cd17:intelligence"
    CONFIGURATION_UI = "cd17:config"
    REMEDIATIONS_UI = "cd17:remediations"
    INCIDENTS_UI = "cd17:incidents"
    ACCOUNTS_UI = "cd17:accounts"
    LANDSCAPE_UI = "cd17:landscape"
    INTEGRATIONS_UI = "cd17:integrations"
    ENDPOINTS_UI = "cd19:endpoints"
    INSIGHT_BI = "insight:bi"
    HUD_UI = "insight:hud"
    IRIS_UI = "insight:iris"
    SEARCH_UI = "cd17:search"
    HEALTH_UI = "cd17:health"
    DISPUTES_UI = "cd17:disputes"
    DASHBOARDS_UI = "cd19:dashboards"
    EXPOSURES_UI = "cd17:exposures"

    # Miscellaneous/external resources
    FINO = "cd14:fino"
    SECURITY_CONTENT = "cd14:scc"
    SUPPORT_PORTAL = "cd14:support"
    SEGMENT = "segment"
    AUTH0 = "auth0"

    @staticmethod
    def ui_node(type_id: str, app_code: str, dev_port: int) -> list[LocationDescriptor]:
        """Generate the production (US, EMEA), integration and development nodes of a UI."""
        return [
            LocationDescriptor(
                type_id=type_id,
                environment="production",
                residency="US",
                uri=f"https://console.{app_code}.alertlogic.com",
            ),
            LocationDescriptor(
                type_id=type_id,
                environment="production",
                residency="EMEA",
                uri=f"https://console.{app_code}.alertlogic.co.uk",
            ),
            LocationDescriptor(
                type_id=type_id,
                environment="integration",
                uri=f"https://console.{app_code}.product.dev.alertlogic.com",
                aliases=[
                    f"https://{app_code}.ui-dev.product.dev.alertlogic.com",
                    f"https://{app_code}-*.ui-dev.product.dev.alertlogic.com",
                    f"https://{app_code}-*-*.ui-dev.product.dev.alertlogic.com",
                    f"https://{app_code}-*-*-*.ui-dev.product.dev.alertlogic.com",
                    f"https://*.o3-{app_code}.product.dev.alertlogic.com",
                ],
            ),
            LocationDescriptor(
                type_id=type_id,
                environment="development",
                uri=f"http://localhost:{dev_port}",
            ),
        ]
