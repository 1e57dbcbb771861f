from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CostSummary(_CamelModel):
    """Cost of the generation that produced the draft."""

    total_eur: float = Field(..., alias="totalEUR")
    total_usd: float = Field(..., alias="totalUSD")
    input_tokens: int
    output_tokens: int
    model: str = Field(..., description="Provider model id that produced the text")


class DraftSuccess(_CamelModel):
    success: bool = True
    content: str
    cost: CostSummary
    fallback: str | None = Field(None, description="Set when the request fell back to Flash")
    timestamp: str


class DraftFailure(_CamelModel):
    success: bool = False
    error: str
