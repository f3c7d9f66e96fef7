"""
Base Schema Models for the x402 Client

This module defines the base model that every wire-level schema inherits
from. It fixes how models are populated (by field name or by camelCase
alias) and how they are serialized into the compact JSON that ends up
inside base64 transport headers.

Core Classes:
    - CanonicalModel: Pydantic base model with alias-aware, compact JSON output

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Pydantic base model with deterministic JSON serialization.

    x402 payloads use camelCase keys on the wire (``payTo``,
    ``maxAmountRequired``, ``validBefore``) while Python code works with
    snake_case attributes. Subclasses declare aliases for the wire names;
    this base accepts either form on input and always emits the wire
    form on output.

    Example:
        class MyModel(CanonicalModel):
            pay_to: str = Field(..., alias="payTo")

        model = MyModel(pay_to="0xabc")
        model.to_canonical_json()  # '{"payTo":"0xabc"}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a compact JSON string using wire (alias) names.

        The conversion process:
        1. model_dump(mode="json", by_alias=True) converts nested models
           and custom serializers to plain Python types
        2. json.dumps with compact separators and sorted keys gives a
           stable representation for a given model state

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to a wire-form dictionary.

        Returns:
            Dict[str, Any]: Dictionary keyed by alias names.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
