"""
Money Coach chat
Builds the coach's system prompt from the user's expenses and streams the
hosted model's reply through the OpenAI SDK.
"""
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from spendwise.core.config import settings
from spendwise.models.expense import Expense
from spendwise.utils.currency import format_currency

logger = logging.getLogger(__name__)

COACH_PERSONA = """You are a friendly and knowledgeable AI Money Coach helping young adults make smart financial decisions.

Your role is to:
- Analyze spending patterns and provide actionable insights
- Suggest practical budgeting strategies
- Encourage healthy financial habits
- Help users understand their spending categories
- Offer specific, actionable tips for saving money
- Be supportive and non-judgmental about spending"""


def build_financial_overview(expenses: Sequence[Expense]) -> Dict[str, Any]:
    category_breakdown: Dict[str, float] = {}
    monthly_spending: Dict[str, float] = {}
    for exp in expenses:
        category_breakdown[exp.category] = round(category_breakdown.get(exp.category, 0.0) + exp.amount, 2)
        month = exp.date.strftime("%Y-%m")
        monthly_spending[month] = round(monthly_spending.get(month, 0.0) + exp.amount, 2)

    return {
        "total_spent": round(sum(exp.amount for exp in expenses), 2),
        "category_breakdown": category_breakdown,
        "monthly_spending": monthly_spending,
    }


def build_system_prompt(expenses: Sequence[Expense]) -> str:
    overview = build_financial_overview(expenses)
    return (
        f"{COACH_PERSONA}\n\n"
        "Current Financial Overview:\n"
        f"- Total Spent: {format_currency(overview['total_spent'])}\n"
        f"- Category Breakdown: {json.dumps(overview['category_breakdown'], indent=2, ensure_ascii=False)}\n"
        f"- Monthly Spending: {json.dumps(overview['monthly_spending'], indent=2, ensure_ascii=False)}\n\n"
        "Be conversational, encouraging, and specific in your recommendations based on the "
        "user's actual spending data."
    )


def stream_chat(
    client: OpenAI,
    messages: List[Dict[str, str]],
    expenses: Sequence[Expense],
    model: Optional[str] = None,
) -> Iterator[str]:
    """
    Open a streaming completion and return an iterator over the text deltas.
    The request is sent before this returns, so SDK errors surface to the caller.
    """
    payload = [{"role": "system", "content": build_system_prompt(expenses)}]
    payload.extend({"role": msg["role"], "content": msg["content"]} for msg in messages)

    model = model or settings.OPENAI_MODEL
    logger.info(f"Opening chat stream: model={model}, turns={len(messages)}")
    stream = client.chat.completions.create(model=model, messages=payload, stream=True)
    return _iter_deltas(stream)


def _iter_deltas(stream) -> Iterator[str]:
    # Headers are already sent once streaming starts; a failure can only end the body
    try:
        for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content
    except OpenAIError as e:
        logger.error(f"Chat stream interrupted: {str(e)}")


def get_llm_client() -> Optional[OpenAI]:
    """FastAPI dependency; ``None`` when no API key is configured."""
    if not settings.OPENAI_API_KEY:
        return None
    return OpenAI(api_key=settings.OPENAI_API_KEY)
