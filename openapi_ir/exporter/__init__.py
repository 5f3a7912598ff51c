"""
Export direction: IR declarations to OpenAPI v3 schema objects.
"""

from __future__ import annotations

from .ir_to_schema import IrToSchemaConverter

__all__ = ["IrToSchemaConverter"]
