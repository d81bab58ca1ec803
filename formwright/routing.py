"""Request pipeline: validate a submission, then run the side effect and respond.

The handler installed for a form has exactly two outcomes per request: the
success handler's response, or the error handler's response. Validation
failures and exceptions from the side effect or success handler share the
error path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Union

from litestar import Request, Response, route
from litestar.handlers import HTTPRouteHandler
from litestar.status_codes import HTTP_200_OK

from formwright.exceptions import ValidationError
from formwright.paths import to_litestar_path
from formwright.schema import CompiledValidator

logger = logging.getLogger(__name__)

SideEffect = Callable[[Request, dict[str, Any]], Union[Awaitable[None], None]]
SuccessHandler = Callable[[Request], Union[Awaitable[Response], Response]]
ErrorHandler = Callable[[Request, Exception], Union[Awaitable[Response], Response]]


async def call_handler(callback: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async callback and return its result."""
    result = callback(*args)
    if asyncio.iscoroutine(result):
        return await result
    return result


def flatten_multidict(data: Any) -> dict[str, Any]:
    """Collapse query/form multidicts to one value per key. The last value wins."""
    if hasattr(data, "multi_items"):
        return dict(data.multi_items())
    if isinstance(data, Mapping):
        return dict(data.items())
    return dict(data)


async def read_submission(request: Request, method: str) -> dict[str, Any]:
    if method == "GET":
        return flatten_multidict(request.query_params)
    return flatten_multidict(await request.form())


def create_route_handler(
    *,
    path: str,
    method: str,
    validator: CompiledValidator,
    success_handler: SuccessHandler,
    error_handler: ErrorHandler,
    side_effect: SideEffect | None = None,
) -> HTTPRouteHandler:
    """Build the Litestar handler that serves submissions of one form."""

    async def handle_submission(request: Request) -> Response:
        raw = await read_submission(request, method)

        try:
            data = validator.validate(raw)
            if side_effect is not None:
                await call_handler(side_effect, request, data)
            return await call_handler(success_handler, request)
        except ValidationError as exc:
            logger.info(
                "Rejected submission to %s %s: invalid fields %s",
                method,
                path,
                ", ".join(exc.errors),
            )
            return await call_handler(error_handler, request, exc)
        except Exception as exc:
            logger.warning("Submission to %s %s failed: %s", method, path, exc)
            return await call_handler(error_handler, request, exc)

    litestar_path = to_litestar_path(path)
    logger.debug("Creating form handler for %s %s (%s)", method, path, litestar_path)
    return route(litestar_path, http_method=[method], status_code=HTTP_200_OK)(handle_submission)
