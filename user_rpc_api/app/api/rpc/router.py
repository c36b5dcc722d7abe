"""
HTTP adapter for the remote procedures.

All procedures live under one path prefix (``/trpc`` by default):

* query: ``GET /trpc/getUserById?input="1"``
* mutation: ``POST /trpc/createUser`` with the JSON input as body
* batch: ``GET /trpc/getUsers,getUserById?batch=1&input={"1":"2"}``,
  inputs keyed by call position; the response is a list of envelopes.

A successful call is answered with ``{"result": {"data": ...}}``, a
failed one with the error envelope built by ``core.errors.format_error``.
"""

import json
import logging
import traceback
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from user_rpc_api.app.api.deps import RequestContext, create_context, get_settings, get_user_service
from user_rpc_api.app.api.rpc.procedures import MUTATION, QUERY, resolve
from user_rpc_api.app.core.config import Settings
from user_rpc_api.app.core.errors import ErrorCode, ProcedureError, format_error
from user_rpc_api.app.core.result import Err
from user_rpc_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

router = APIRouter()

MULTI_STATUS = 207


class _ParseFailure(Exception):
    def __init__(self, error: ProcedureError) -> None:
        self.error = error
        super().__init__(error.message)


@router.get("/{path:path}")
async def handle_query(
    path: str,
    request: Request,
    service: UserService = Depends(get_user_service),
    context: RequestContext = Depends(create_context),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Serve queries, single or batched."""
    raw = request.query_params.get("input")
    return _dispatch(path, raw, QUERY, request, service, context, settings)


@router.post("/{path:path}")
async def handle_mutation(
    path: str,
    request: Request,
    service: UserService = Depends(get_user_service),
    context: RequestContext = Depends(create_context),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Serve mutations, single or batched."""
    body = await request.body()
    raw = body.decode("utf-8", errors="replace") if body else None
    return _dispatch(path, raw, MUTATION, request, service, context, settings)


def _is_batch(request: Request) -> bool:
    return request.query_params.get("batch", "").lower() in {"1", "true"}


def _decode_input(raw: Optional[str]) -> Any:
    if raw is None or raw.strip() == "":
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise _ParseFailure(
            ProcedureError(ErrorCode.PARSE_ERROR, f"Unable to parse input: {exc.msg}")
        ) from exc


def _call_inputs(names: List[str], raw: Optional[str], batch: bool) -> List[Any]:
    decoded = _decode_input(raw)
    if not batch:
        return [decoded]
    if decoded is None:
        decoded = {}
    if not isinstance(decoded, dict):
        raise _ParseFailure(
            ProcedureError(ErrorCode.BAD_REQUEST, "Batch input must be an object keyed by call index")
        )
    return [decoded.get(str(index)) for index in range(len(names))]


def _dispatch(
    path: str,
    raw: Optional[str],
    kind: str,
    request: Request,
    service: UserService,
    context: RequestContext,
    settings: Settings,
) -> JSONResponse:
    batch = _is_batch(request)
    names = path.split(",") if batch else [path]
    try:
        inputs = _call_inputs(names, raw, batch)
    except _ParseFailure as failure:
        outcomes = [(name, None, failure.error) for name in names]
    else:
        outcomes = [
            _invoke(name, raw_input, kind, service, settings)
            for name, raw_input in zip(names, inputs)
        ]

    envelopes: List[Dict[str, Any]] = []
    statuses: List[int] = []
    for name, raw_input, outcome in outcomes:
        if isinstance(outcome, ProcedureError):
            _log_failure(outcome, name, kind, raw_input, request, context)
            envelopes.append(format_error(outcome, name, debug=settings.is_development))
            statuses.append(outcome.http_status)
        else:
            envelopes.append({"result": {"data": jsonable_encoder(outcome)}})
            statuses.append(200)

    if not batch:
        return JSONResponse(content=envelopes[0], status_code=statuses[0])
    status_code = statuses[0] if len(set(statuses)) == 1 else MULTI_STATUS
    return JSONResponse(content=envelopes, status_code=status_code)


def _invoke(
    name: str, raw_input: Any, kind: str, service: UserService, settings: Settings
) -> Tuple[str, Any, Any]:
    """Run one call and return ``(name, input, output_or_error)``."""
    procedure = resolve(name)
    if procedure is None:
        error = ProcedureError(ErrorCode.NOT_FOUND, f'No "{kind}"-procedure on path "{name}"')
        return name, raw_input, error
    if procedure.kind != kind:
        method = "GET" if kind == QUERY else "POST"
        error = ProcedureError(
            ErrorCode.METHOD_NOT_SUPPORTED,
            f'Unsupported {method}-request to {procedure.kind} procedure at path "{name}"',
        )
        return name, raw_input, error
    try:
        result = procedure(service, raw_input)
    except Exception as exc:
        logger.exception("Unexpected error in procedure %s", name)
        message = str(exc) if settings.is_development else "Internal server error"
        error = ProcedureError(
            ErrorCode.INTERNAL_SERVER_ERROR,
            message or "Internal server error",
            stack=traceback.format_exc(),
        )
        return name, raw_input, error
    if isinstance(result, Err):
        return name, raw_input, result.error
    return name, raw_input, result.value


def _log_failure(
    error: ProcedureError,
    name: str,
    kind: str,
    raw_input: Any,
    request: Request,
    context: RequestContext,
) -> None:
    logger.error(
        "RPC error: code=%s path=%s type=%s input=%r user_id=%s method=%s url=%s message=%s",
        error.code.value,
        name,
        kind,
        raw_input,
        context.user_id,
        request.method,
        request.url,
        error.message,
    )
