"""Token pricing for the configured Gemini models.

One canonical table, keyed by provider model id. Rates are USD per
``unit_divisor`` tokens; EUR is a fixed approximation, not a live rate.
"""

from dataclasses import dataclass

USD_TO_EUR = 0.92


@dataclass(frozen=True)
class ModelRate:
    input_price: float
    output_price: float
    unit_divisor: int


@dataclass(frozen=True)
class CostBreakdown:
    model: str
    input_tokens: int
    output_tokens: int
    input_cost_usd: float
    output_cost_usd: float
    total_usd: float
    total_eur: float


# 2025 price list: flash is billed per 1K tokens, pro per 1M tokens.
PRICING_TABLE: dict[str, ModelRate] = {
    "gemini-2.5-flash": ModelRate(input_price=0.004, output_price=0.020, unit_divisor=1_000),
    "gemini-2.5-pro": ModelRate(input_price=4.0, output_price=20.0, unit_divisor=1_000_000),
}


def has_pricing(model_id: str) -> bool:
    return model_id in PRICING_TABLE


def calculate_cost(
    model_id: str,
    input_tokens: int | None = 0,
    output_tokens: int | None = 0,
) -> CostBreakdown:
    """Compute the cost of one generation from its token usage.

    Missing token counts count as zero. ``model_id`` must be in
    ``PRICING_TABLE``; ``Config.validate`` guarantees this for every
    configured model.
    """
    rate = PRICING_TABLE[model_id]
    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0

    input_cost = input_tokens * rate.input_price / rate.unit_divisor
    output_cost = output_tokens * rate.output_price / rate.unit_divisor
    total_usd = input_cost + output_cost

    return CostBreakdown(
        model=model_id,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        input_cost_usd=input_cost,
        output_cost_usd=output_cost,
        total_usd=total_usd,
        total_eur=total_usd * USD_TO_EUR,
    )
