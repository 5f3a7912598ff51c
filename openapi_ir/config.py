"""
Configuration for OpenAPI <-> IR conversion.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ExportDocumentConfig:
    """Header of the exported OpenAPI document.

    Attributes:
        openapi_version: Value of the top-level "openapi" key
        title: info.title
        api_version: info.version
    """

    openapi_version: str = "3.0.3"
    title: str = "API"
    api_version: str = "1.0.0"


@dataclass
class ConverterConfig:
    """Configuration options for both translation directions."""

    # Name of the HTTP service built from the paths map
    service_name: str = "Service"

    # Raise instead of recording a diagnostic when a named reference does not resolve
    strict_references: bool = False

    # Record a warning for every non-string enum value that gets dropped
    report_dropped_enum_values: bool = True

    # Property carrying the payload of a non-named union member on export
    union_value_key: str = "value"

    # Emit an OpenAPI discriminator object on exported unions
    include_discriminator: bool = True

    # Media type used for exported request and response bodies
    json_media_type: str = "application/json"

    # Add a "Generated by" comment at the top of YAML output
    add_generation_comment: bool = True

    document: ExportDocumentConfig = field(default_factory=ExportDocumentConfig)

    @staticmethod
    def from_dict(d: dict) -> ConverterConfig:
        """Create a config from a dictionary."""
        config = ConverterConfig()
        for k, v in d.items():
            if k == "document" and isinstance(v, dict):
                config.document = ExportDocumentConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "service_name": self.service_name,
            "strict_references": self.strict_references,
            "report_dropped_enum_values": self.report_dropped_enum_values,
            "union_value_key": self.union_value_key,
            "include_discriminator": self.include_discriminator,
            "json_media_type": self.json_media_type,
            "add_generation_comment": self.add_generation_comment,
            "document": {
                "openapi_version": self.document.openapi_version,
                "title": self.document.title,
                "api_version": self.document.api_version,
            },
        }
