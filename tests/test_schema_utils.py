# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

from __future__ import annotations

from pydantic import BaseModel, Field

from swiftmcp.utils.schema import model_input_schema


class Address(BaseModel):
    city: str


class Customer(BaseModel):
    title: str = Field(description="Honorific")
    address: Address


def test_model_schema_drops_generated_titles_but_keeps_fields_named_title() -> None:
    schema = model_input_schema(Customer)

    assert "title" not in schema
    assert set(schema["properties"]) == {"title", "address"}
    assert "title" not in schema["properties"]["title"]
    assert schema["properties"]["title"]["description"] == "Honorific"
    assert "title" not in schema["$defs"]["Address"]
    assert schema["required"] == ["title", "address"]


def test_missing_model_accepts_any_object() -> None:
    assert model_input_schema(None) == {"type": "object"}
