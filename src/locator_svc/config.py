"""Configuration for the locator service."""

from __future__ import annotations

from dataclasses import dataclass, field

from .matrix.origin import PLACEHOLDER_ORIGIN


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8060
    reload: bool = False


@dataclass
class ContextConfig:
    """Initial resolution context."""
    environment: str = "production"
    residency: str = "US"
    data_center_id: str | None = None
    accessible: list[str] = field(default_factory=list)


@dataclass
class CatalogConfig:
    """Location catalog configuration."""
    # Path to a catalog file (YAML or JSON) or a directory of them
    definition_file: str | None = None


@dataclass
class ActingConfig:
    """Acting node detection."""
    # URL the hosting application is served from; None disables detection
    uri: str | None = None
    # Returned by resolve_url when no node matches and no origin is known
    fallback_origin: str = PLACEHOLDER_ORIGIN


@dataclass
class ResolutionConfig:
    """Resolution behaviour."""
    # Raise instead of defaulting to the first alternative of a virtual data
    # center when none of its alternatives is accessible
    strict_alternatives: bool = False


@dataclass
class Config:
    """Main configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    acting: ActingConfig = field(default_factory=ActingConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            context=ContextConfig(**data.get("context", {})),
            catalog=CatalogConfig(**data.get("catalog", {})),
            acting=ActingConfig(**data.get("acting", {})),
            resolution=ResolutionConfig(**data.get("resolution", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
