"""Pydantic models for Li.Fi API responses."""

from decimal import Decimal

from pydantic import BaseModel


class LiFiToken(BaseModel):
    address: str
    symbol: str = ""
    decimals: int
    chainId: int | str | None = None
    name: str | None = None
    priceUSD: Decimal | None = None

    model_config = {"extra": "ignore"}


class LiFiTokenRef(BaseModel):
    address: str | None = None
    symbol: str = ""
    decimals: int | None = None

    model_config = {"extra": "ignore"}


class LiFiFeeCost(BaseModel):
    name: str = ""
    amount: str | None = None
    amountUSD: Decimal | None = None
    token: LiFiTokenRef | None = None
    included: bool | None = None

    model_config = {"extra": "ignore"}


class LiFiGasCost(BaseModel):
    type: str = ""
    amount: str | None = None
    amountUSD: Decimal | None = None
    limit: str | None = None
    token: LiFiTokenRef | None = None

    model_config = {"extra": "ignore"}


class LiFiEstimate(BaseModel):
    toAmount: str | None = None
    toAmountMin: str | None = None
    executionDuration: float | None = None
    feeCosts: list[LiFiFeeCost] | None = None
    gasCosts: list[LiFiGasCost] | None = None

    model_config = {"extra": "ignore"}


class LiFiToolDetails(BaseModel):
    key: str
    name: str | None = None

    model_config = {"extra": "ignore"}


class LiFiAction(BaseModel):
    fromToken: LiFiTokenRef | None = None
    toToken: LiFiTokenRef | None = None
    fromAmount: str | None = None

    model_config = {"extra": "ignore"}


class LiFiStep(BaseModel):
    """One step of a route, or the whole answer of the /quote endpoint."""

    type: str | None = None
    tool: str | None = None
    toolDetails: LiFiToolDetails | None = None
    action: LiFiAction | None = None
    estimate: LiFiEstimate | None = None

    model_config = {"extra": "ignore"}

    @property
    def tool_key(self) -> str | None:
        if self.toolDetails:
            return self.toolDetails.key
        return self.tool


class LiFiRoute(BaseModel):
    id: str | None = None
    fromAmount: str | None = None
    toAmount: str | None = None
    toAmountMin: str | None = None
    gasCostUSD: Decimal | None = None
    steps: list[LiFiStep] = []

    model_config = {"extra": "ignore"}


class LiFiBridgeTool(BaseModel):
    key: str
    name: str

    model_config = {"extra": "ignore"}
