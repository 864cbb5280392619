from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from cardforge.core.config import settings
from cardforge.core.logging import get_logger
from cardforge.modules.cards.classifier import category_label, classify
from cardforge.modules.cards.errors import (
    CardForgeError,
    CardValidationError,
    ConfigurationError,
    EmptyContentError,
    ParseError,
    ProviderError,
    display_message,
)
from cardforge.modules.cards.main import CardGenerator
from .schemas import (
    AutoFillRequest,
    AutoFillResponse,
    ClassifyRequest,
    ClassifyResponse,
    GenerateRequest,
    GenerateResponse,
    MapRequest,
    MapResponse,
    ScoreRequest,
    ScoreResponse,
    SuggestTagsRequest,
    SuggestTagsResponse,
)

logger = get_logger(__name__)

router = APIRouter()

PREFIX = f"/{settings.app.version}/cards"

_STATUS_BY_ERROR: tuple[tuple[type[CardForgeError], int], ...] = (
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (EmptyContentError, status.HTTP_400_BAD_REQUEST),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
    (ParseError, 422),
    (CardValidationError, 422),
)


def get_card_generator() -> CardGenerator:
    return CardGenerator()


Generator = Annotated[CardGenerator, Depends(get_card_generator)]


def _http_error(e: CardForgeError) -> HTTPException:
    code = next(
        (c for cls, c in _STATUS_BY_ERROR if isinstance(e, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    logger.warning("Request failed with %s: %s", code, e.__class__.__name__)
    return HTTPException(status_code=code, detail=display_message(e))


@router.post(f"{PREFIX}/classify", response_model=ClassifyResponse, tags=["cards"])
async def classify_text(req: ClassifyRequest) -> ClassifyResponse:
    category = classify(req.text)
    return ClassifyResponse(category=category.value, label=category_label(category))


@router.post(f"{PREFIX}/generate", response_model=GenerateResponse, tags=["cards"])
async def generate_cards(req: GenerateRequest, svc: Generator) -> GenerateResponse:
    try:
        result, category = await svc.run(
            req.action,
            req.text,
            count=req.count,
            convert_mode=req.convert_mode,
            template=req.template_id,
        )
    except CardForgeError as e:
        raise _http_error(e) from e
    return GenerateResponse(
        category=category.value, result=result, needs_review=result.needs_review
    )


@router.post(f"{PREFIX}/score", response_model=ScoreResponse, tags=["cards"])
async def score_cards(req: ScoreRequest, svc: Generator) -> ScoreResponse:
    try:
        scores = await svc.score(req.cards, req.note_type)
    except CardForgeError as e:
        raise _http_error(e) from e
    return ScoreResponse(scores=scores)


@router.post(
    f"{PREFIX}/map",
    response_model=MapResponse,
    status_code=status.HTTP_200_OK,
    tags=["cards"],
)
async def map_cards(req: MapRequest, svc: Generator) -> MapResponse:
    # Mapping failures are per-card data, not request errors
    return MapResponse(mappings=svc.map(req.result, req.schemas))


@router.post(f"{PREFIX}/suggest-tags", response_model=SuggestTagsResponse, tags=["cards"])
async def suggest_tags(req: SuggestTagsRequest, svc: Generator) -> SuggestTagsResponse:
    try:
        tags = await svc.suggest_tags(req.content)
    except CardForgeError as e:
        raise _http_error(e) from e
    return SuggestTagsResponse(tags=tags)


@router.post(f"{PREFIX}/autofill", response_model=AutoFillResponse, tags=["cards"])
async def autofill(req: AutoFillRequest, svc: Generator) -> AutoFillResponse:
    try:
        result = await svc.auto_fill(
            req.text,
            deck_names=req.decks,
            schemas=req.schemas,
            existing_tags=req.tags,
            last_deck=req.last_deck,
            last_model=req.last_model,
        )
    except CardForgeError as e:
        raise _http_error(e) from e
    return AutoFillResponse(result=result)
