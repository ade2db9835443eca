# -*- coding: utf-8 -*-
"""Motivation — short model-generated fitness quote for the dashboard."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .. import gemini
from ..auth.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Motivation"])

QUOTE_PROMPT = (
    "Generate a short, motivational fitness quote (1-2 sentences) that encourages healthy eating "
    "and exercise. Make it inspiring and positive."
)


class QuoteResponse(BaseModel):
    quote: str


@router.get("/motivational-quote", response_model=QuoteResponse, summary="Motivational quote")
def motivational_quote(user: dict = Depends(get_current_user)):  # noqa: ARG001
    try:
        quote = gemini.generate_text(QUOTE_PROMPT).strip()
    except gemini.GeminiError as exc:
        logger.error("quote generation failed: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to generate motivational quote") from exc
    return QuoteResponse(quote=quote)
