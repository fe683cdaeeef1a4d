"""
Coach Router
Rule-based spending suggestions and the Money Coach chat
"""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from openai import OpenAI, OpenAIError

from spendwise.core.config import settings
from spendwise.db import repository
from spendwise.db.store import KeyValueStore, get_store
from spendwise.models.coach import ChatRequest
from spendwise.routers.analytics import get_analyzer
from spendwise.routers.auth import get_current_user_id
from spendwise.routers.expenses import load_expenses
from spendwise.utils.analyzer import SpendingAnalyzer
from spendwise.utils.coach import SuggestionGenerator
from spendwise.utils.money_coach import get_llm_client, stream_chat

router = APIRouter()
logger = logging.getLogger(__name__)
suggestion_generator = SuggestionGenerator(rules_config_path=settings.COACH_RULES_JSON)


@router.get("/suggestions")
def get_suggestions(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> Dict:
    expenses = load_expenses(store, user_id)
    monthly_budget = repository.get_monthly_budget(store, user_id)

    analysis = analyzer.analyze(expenses)
    suggestions = suggestion_generator.generate(analysis, monthly_budget)
    logger.info(f"Generated {len(suggestions)} suggestion(s) for user {user_id}")

    return {
        "analysis": analysis.to_dict(),
        "monthly_budget": monthly_budget,
        "suggestions": suggestions,
    }


@router.post("/chat")
def chat(
    request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    client: Optional[OpenAI] = Depends(get_llm_client),
):
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Money Coach chat is not configured",
        )

    expenses = load_expenses(store, user_id)
    messages = [message.model_dump() for message in request.messages]
    try:
        deltas = stream_chat(client, messages, expenses)
    except OpenAIError as e:
        logger.error(f"Chat error for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error processing request")

    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")
