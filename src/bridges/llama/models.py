"""Pydantic models for DefiLlama API responses."""

from decimal import Decimal

from pydantic import BaseModel


class LlamaProtocol(BaseModel):
    """Directory entry from /protocols."""

    slug: str
    name: str = ""

    model_config = {"extra": "ignore"}


class LlamaTvlPoint(BaseModel):
    date: int | None = None
    totalLiquidityUSD: Decimal = Decimal(0)

    model_config = {"extra": "ignore"}


class LlamaHack(BaseModel):
    """Incident record from /hacks. date is epoch seconds."""

    name: str
    date: int
    classification: str | None = None
    technique: str | None = None
    amount: Decimal | None = None

    model_config = {"extra": "ignore"}
