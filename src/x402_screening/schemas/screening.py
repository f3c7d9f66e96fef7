"""
Address screening response model.

Shape of the JSON body returned by the paid screening endpoint
``/api-402/screen/v1/chains/{chain}/addresses/{address}``.
"""

from typing import Any, Optional

from pydantic import ConfigDict, Field

from .bases import CanonicalModel


class ScreeningResult(CanonicalModel):
    """Risk screening outcome for one address.

    Attributes:
        chain: Chain family screened (evm, bitcoin, solana, tron).
        address: Screened address.
        found_risk: Whether any risk indicator matched.
        risk_score: Optional aggregate score.
        risk_details: Optional provider-specific detail payload.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    chain: str
    address: str
    found_risk: bool = Field(..., alias="foundRisk")
    risk_score: Optional[float] = Field(default=None, alias="riskScore")
    risk_details: Optional[Any] = Field(default=None, alias="riskDetails")
