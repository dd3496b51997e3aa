"""Deterministic bridge risk scoring.

Pure function of SecurityStats: no I/O, no clock, no randomness.

Rules, in order:
- any recent incident: score 0, DANGER, stop
- TVL unknown: -30
- TVL below min_tvl_usd: -20
Verdict: <40 DANGER, <80 CAUTION, else SECURE.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from config.settings import settings
from src.bridges.security import SecurityStats

UNKNOWN_TVL_PENALTY = 30
LOW_TVL_PENALTY = 20
DANGER_BELOW = 40
CAUTION_BELOW = 80
PASSED_MESSAGE = "Standard security checks passed."


class Verdict(str, Enum):
    SECURE = "SECURE"
    CAUTION = "CAUTION"
    DANGER = "DANGER"
    UNAVAILABLE = "UNAVAILABLE"  # never produced by score_security


@dataclass(frozen=True)
class RiskAssessment:
    score: int | None
    verdict: Verdict
    explanation: list[str] = field(default_factory=list)

    @classmethod
    def unavailable(cls, reason: str) -> "RiskAssessment":
        """Placeholder for a route whose security data could not be fetched."""
        return cls(score=None, verdict=Verdict.UNAVAILABLE, explanation=[reason])

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "verdict": self.verdict.value,
            "explanation": list(self.explanation),
        }


def verdict_for_score(score: int) -> Verdict:
    if score < DANGER_BELOW:
        return Verdict.DANGER
    if score < CAUTION_BELOW:
        return Verdict.CAUTION
    return Verdict.SECURE


def _format_musd(value: Decimal) -> str:
    return f"${value / Decimal(1_000_000):,.2f}M"


def score_security(
    stats: SecurityStats,
    *,
    min_tvl_usd: Decimal | None = None,
) -> RiskAssessment:
    """Score a protocol's security stats on a 0-100 scale."""
    threshold = settings.min_tvl_usd if min_tvl_usd is None else min_tvl_usd

    incidents = len(stats.recent_incidents)
    if incidents > 0:
        return RiskAssessment(
            score=0,
            verdict=Verdict.DANGER,
            explanation=[
                f"DANGER: Protocol has {incidents} recent hack(s). Immediate risk."
            ],
        )

    score = 100
    rules: list[str] = []

    if stats.tvl_usd is None:
        score -= UNKNOWN_TVL_PENALTY
        rules.append(f"Penalty: TVL data unavailable (-{UNKNOWN_TVL_PENALTY})")
    elif stats.tvl_usd < threshold:
        score -= LOW_TVL_PENALTY
        rules.append(
            f"Caution: Low TVL ({_format_musd(stats.tvl_usd)} < "
            f"{_format_musd(threshold)}) (-{LOW_TVL_PENALTY})"
        )

    return RiskAssessment(
        score=score,
        verdict=verdict_for_score(score),
        explanation=rules or [PASSED_MESSAGE],
    )
