from pydantic import BaseModel, Field


class InvestmentRequest(BaseModel):
    amount: float = Field(gt=0)
