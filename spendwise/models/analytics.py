from typing import Dict, Optional

from pydantic import BaseModel, Field


class TaxRequest(BaseModel):
    category_breakdown: Dict[str, float]
    total_amount: Optional[float] = Field(default=None)  # Defaults to the breakdown sum
