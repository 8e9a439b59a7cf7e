"""FastAPI application factory."""

import logging
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from macros_tracker.api.models import (
    AddLinesRequest,
    CalcRequest,
    RemoveLineRequest,
    UpdateQuantityRequest,
)
from macros_tracker.app_logging import configure_logging
from macros_tracker.containers import AppContainer
from macros_tracker.domain.macros import BlockView, Group
from macros_tracker.domain.metrics import MacroMetrics
from macros_tracker.services.blocks import (
    BlockNotFoundError,
    InvalidEditError,
    LineNotFoundError,
)
from macros_tracker.services.metrics import summarize


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/blocks/calc")
    async def calculate(payload: CalcRequest, request: Request) -> dict[str, object]:
        """Aggregate totals across blocks with a breakdown and summary metrics."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.block_service.calculate(payload.ids)
        body = asdict(result)
        body["metrics"] = _format_metrics(summarize(result))
        return body

    @app.get("/blocks/{block_id}")
    async def get_block(block_id: str, request: Request) -> dict[str, object]:
        """Return the parsed groups and totals of a block."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.block_service.get_block(block_id)
        except BlockNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        return _format_view(view)

    @app.post("/blocks/{block_id}/lines")
    async def add_lines(
        block_id: str, payload: AddLinesRequest, request: Request
    ) -> dict[str, object]:
        """Append lines to a block."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.block_service.add_lines(
                block_id, payload.lines
            )
        except BlockNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        return _format_view(view)

    @app.post("/blocks/{block_id}/remove")
    async def remove_line(
        block_id: str, payload: RemoveLineRequest, request: Request
    ) -> dict[str, object]:
        """Remove a row or a whole section from a block."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.block_service.remove_line(
                block_id, payload.macro_line
            )
        except (BlockNotFoundError, LineNotFoundError) as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        return _format_view(view)

    @app.patch("/blocks/{block_id}/lines")
    async def update_quantity(
        block_id: str, payload: UpdateQuantityRequest, request: Request
    ) -> dict[str, object]:
        """Change the quantity of a food line."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.block_service.update_quantity(
                block_id, payload.macro_line, payload.grams
            )
        except (BlockNotFoundError, LineNotFoundError) as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        except InvalidEditError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        logger.info("Updated quantity in block %s", block_id)
        return _format_view(view)

    @app.get("/foods")
    async def search_foods(
        request: Request, query: str = "", limit: int = 10
    ) -> dict[str, object]:
        """Search the food database by name."""
        state_container: AppContainer = request.app.state.container
        if not query.strip():
            return {"foods": []}
        foods = state_container.food_repository.search_foods(query.strip(), limit)
        return {"foods": [asdict(food) for food in foods]}

    return app


def _format_view(view: BlockView) -> dict[str, object]:
    return {
        "id": view.id,
        "groups": [_format_group(group) for group in view.groups],
        "totals": asdict(view.totals),
    }


def _format_group(group: Group) -> dict[str, object]:
    payload = asdict(group)
    payload["kind"] = group.kind.value
    return payload


def _format_metrics(metrics: MacroMetrics) -> dict[str, object]:
    payload = asdict(metrics)
    if metrics.date_range is not None:
        payload["date_range"] = {
            "start": metrics.date_range.start.isoformat(),
            "end": metrics.date_range.end.isoformat(),
            "day_count": metrics.date_range.day_count,
        }
    return payload
