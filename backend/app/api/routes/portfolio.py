"""Portfolio upload and dashboard endpoints."""

from __future__ import annotations

import asyncio
import logging
import math

from fastapi import APIRouter, File, HTTPException, Query, Response, UploadFile, status

from app.config import AppSettings
from app.schemas import (
    AllocationSliceSchema,
    ChartPointSchema,
    HoldingSchema,
    HoldingsPageSchema,
    PortfolioChartsResponse,
    PortfolioResponse,
)
from app.services.cache import PortfolioCache
from app.services.portfolio import analyze_upload
from portfolio_tracker.errors import CsvFormatError, ValidationError
from portfolio_tracker.models import ParsedResult
from portfolio_tracker.serialization import holding_to_payload, result_to_payload
from portfolio_tracker.views import (
    HoldingSortField,
    SortDirection,
    allocation_slices,
    history_chart_points,
    query_holdings,
)

logger = logging.getLogger(__name__)


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _to_response(result: ParsedResult) -> PortfolioResponse:
    return PortfolioResponse.model_validate(result_to_payload(result))


def get_portfolio_router(cache: PortfolioCache, settings: AppSettings) -> APIRouter:
    router = APIRouter(prefix="/portfolio", tags=["portfolio"])
    upload_lock = asyncio.Lock()

    async def _require_cached() -> ParsedResult:
        result = await cache.load()
        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No portfolio has been uploaded")
        return result

    @router.post("/upload", response_model=PortfolioResponse, status_code=status.HTTP_201_CREATED)
    async def upload_portfolio(file: UploadFile = File(...)) -> PortfolioResponse:
        content = await file.read(settings.max_upload_bytes + 1)
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Upload exceeds {settings.max_upload_bytes} bytes",
            )

        async with upload_lock:
            try:
                result = analyze_upload(content, settings)
            except ValidationError as exc:
                logger.info("Upload %s rejected with %d row error(s)", file.filename, len(exc.errors))
                raise HTTPException(
                    status_code=422,
                    detail={"message": str(exc), "errors": exc.errors},
                ) from exc
            except CsvFormatError as exc:
                raise HTTPException(
                    status_code=422,
                    detail={"message": str(exc), "errors": [str(exc)]},
                ) from exc
            await cache.save(result)

        return _to_response(result)

    @router.get("", response_model=PortfolioResponse)
    async def get_portfolio() -> PortfolioResponse:
        return _to_response(await _require_cached())

    @router.delete("", status_code=status.HTTP_204_NO_CONTENT)
    async def reset_portfolio() -> Response:
        await cache.clear()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.get("/holdings", response_model=HoldingsPageSchema)
    async def get_holdings(
        search: str = Query(default="", max_length=32),
        sort: HoldingSortField = Query(default=HoldingSortField.MARKET_VALUE),
        direction: SortDirection = Query(default=SortDirection.DESC),
        page: int = Query(default=1, ge=1),
        page_size: int | None = Query(default=None, ge=1, le=500),
    ) -> HoldingsPageSchema:
        result = await _require_cached()
        holdings_page = query_holdings(
            result.holdings,
            search=search,
            sort_field=sort,
            direction=direction,
            page=page,
            page_size=page_size or settings.holdings_page_size,
        )
        return HoldingsPageSchema(
            items=[HoldingSchema.model_validate(holding_to_payload(h)) for h in holdings_page.items],
            page=holdings_page.page,
            page_size=holdings_page.page_size,
            total_items=holdings_page.total_items,
            total_pages=holdings_page.total_pages,
            start_index=holdings_page.start_index,
            end_index=holdings_page.end_index,
        )

    @router.get("/charts", response_model=PortfolioChartsResponse)
    async def get_charts() -> PortfolioChartsResponse:
        result = await _require_cached()
        return PortfolioChartsResponse(
            allocation=[
                AllocationSliceSchema(
                    name=piece.name,
                    value=_finite_or_none(piece.value),
                    percent=_finite_or_none(piece.percent),
                    color=piece.color,
                )
                for piece in allocation_slices(result.holdings)
            ],
            history=[
                ChartPointSchema(date=point.date, value=_finite_or_none(point.value))
                for point in history_chart_points(result.portfolio_history)
            ],
        )

    return router


__all__ = ["get_portfolio_router"]
