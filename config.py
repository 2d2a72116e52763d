"""Application configuration."""
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

ALL_REPORTS = ["html", "openapi_json", "openapi_yaml"]


def _split(value: Optional[str]) -> List[str]:
    """Split a comma separated environment value."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class ServicesConfig:
    """Global API settings used as template for the generated documentation."""

    title: str = ""
    version: str = ""
    description: str = ""
    terms_of_service: str = ""
    contact_name: str = ""
    contact_url: str = ""
    contact_email: str = ""
    license_name: str = ""
    license_url: str = ""
    host: str = ""
    port: Optional[int] = None
    base_path: str = ""
    schemes: List[str] = field(default_factory=lambda: ["https"])
    consumes: List[str] = field(default_factory=list)
    produces: List[str] = field(default_factory=list)
    # Error mappings: dicts with error_name, match, status_code, comment, json_example, xml_example
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "ServicesConfig":
        """Load config from environment variables."""
        port = os.getenv("SERVICEDOCGEN_PORT")
        return cls(
            title=os.getenv("SERVICEDOCGEN_TITLE", ""),
            version=os.getenv("SERVICEDOCGEN_VERSION", ""),
            description=os.getenv("SERVICEDOCGEN_DESCRIPTION", ""),
            host=os.getenv("SERVICEDOCGEN_HOST", ""),
            port=int(port) if port else None,
            base_path=os.getenv("SERVICEDOCGEN_BASE_PATH", ""),
            schemes=_split(os.getenv("SERVICEDOCGEN_SCHEMES")) or ["https"],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServicesConfig":
        """Create config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class AppConfig:
    """Application config."""

    source_packages: List[str] = field(default_factory=list)
    service_class: Optional[str] = None
    classname_regex: str = ".*Service.*"
    output_dir: str = "./build/servicedoc"
    reports: List[str] = field(default_factory=lambda: list(ALL_REPORTS))
    template_dir: Optional[str] = None
    introspect_fields: bool = False
    services: Optional[ServicesConfig] = None

    def __post_init__(self):
        """Initialize defaults."""
        if self.services is None:
            self.services = ServicesConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            source_packages=_split(os.getenv("SERVICEDOCGEN_PACKAGES")),
            service_class=os.getenv("SERVICEDOCGEN_SERVICE_CLASS") or None,
            classname_regex=os.getenv("SERVICEDOCGEN_CLASSNAME_REGEX", ".*Service.*"),
            output_dir=os.getenv("SERVICEDOCGEN_OUTPUT_DIR", "./build/servicedoc"),
            reports=_split(os.getenv("SERVICEDOCGEN_REPORTS")) or list(ALL_REPORTS),
            template_dir=os.getenv("SERVICEDOCGEN_TEMPLATE_DIR") or None,
            introspect_fields=os.getenv("SERVICEDOCGEN_INTROSPECT_FIELDS", "false").lower() == "true",
            services=ServicesConfig.from_env(),
        )

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        """
        Load config from a YAML file.

        Keys mirror the field names; `services` holds the ServicesConfig keys.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        services = ServicesConfig.from_dict(data.pop("services", None) or {})
        known = {f.name for f in fields(cls)}
        return cls(services=services, **{key: value for key, value in data.items() if key in known})

