"""Insight locations (data centers) as reported by AIMS and the locations service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DataCenterInfo:
    """
    A physical (or virtual) data center.

    A data center that lists ``alternatives`` is virtual: it must be rewritten
    to one of its concrete alternatives (in preference order) before it is
    used to select nodes.
    """
    residency: str
    residency_caption: str
    logical_region: str
    alternatives: tuple[str, ...] = ()

    @property
    def is_virtual(self) -> bool:
        return len(self.alternatives) > 0


INSIGHT_LOCATIONS: dict[str, DataCenterInfo] = {
    "defender-us-denver": DataCenterInfo(
        residency="US",
        residency_caption="UNITED STATES",
        logical_region="us-west-1",
    ),
    "defender-us-ashburn": DataCenterInfo(
        residency="US",
        residency_caption="UNITED STATES",
        logical_region="us-east-1",
    ),
    "defender-uk-newport": DataCenterInfo(
        residency="EMEA",
        residency_caption="UNITED KINGDOM",
        logical_region="uk-west-1",
    ),
    "insight-us-virginia": DataCenterInfo(
        residency="US",
        residency_caption="UNITED STATES",
        logical_region="us-east-1",
        alternatives=("defender-us-denver", "defender-us-ashburn"),
    ),
    "insight-eu-ireland": DataCenterInfo(
        residency="EMEA",
        residency_caption="UNITED KINGDOM",
        logical_region="uk-west-1",
        alternatives=("defender-uk-newport",),
    ),
}
