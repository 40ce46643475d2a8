# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""JSON schema helpers for tool parameter models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def _strip_titles(node: Any) -> None:
    if isinstance(node, dict):
        if isinstance(node.get("title"), str):
            del node["title"]
        for key, value in node.items():
            if key in {"properties", "$defs"} and isinstance(value, dict):
                # Keys here are field and definition names, not schema keywords.
                for child in value.values():
                    _strip_titles(child)
            else:
                _strip_titles(value)
    elif isinstance(node, list):
        for item in node:
            _strip_titles(item)


def model_input_schema(model: type[BaseModel] | None) -> dict[str, Any]:
    """Return the ``inputSchema`` advertised for a tool taking *model*.

    Pydantic's generated ``title`` keys are dropped; a tool without a model
    accepts any object.
    """
    if model is None:
        return {"type": "object"}
    schema = model.model_json_schema()
    _strip_titles(schema)
    schema.setdefault("type", "object")
    return schema


__all__ = ["model_input_schema"]
