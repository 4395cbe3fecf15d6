"""
File: kvstore/api.py
HTTP interface of the KV store. Every path is a key: GET reads, PUT writes,
DELETE removes, and GET / lists all keys.
"""
import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.metrics import store_metrics
from kvstore.models import StructuredValue, decode_body, encode_json
from kvstore.store import StoreBackend, StoreError

log = structlog.get_logger()


def error_response(message: str, status_code: int) -> Response:
    """Plain-text, single-line error body."""
    return PlainTextResponse(f"{message}\n", status_code=status_code)


def json_response(payload) -> Response:
    try:
        body = encode_json(payload)
    except (TypeError, ValueError) as e:
        log.error("error - encoding response", error=str(e))
        store_metrics["errors"].labels(operation="encode").inc()
        return error_response("error - encoding response", 500)

    return Response(content=body, media_type="application/json")


def create_api(store: StoreBackend) -> FastAPI:
    """
    Create the FastAPI application for a store.

    Args:
        store: Store every request is served from

    Returns:
        FastAPI: Configured FastAPI application
    """
    # Documentation routes are disabled: /docs and /openapi.json are keys here
    app = FastAPI(title="KV Store API", docs_url=None, redoc_url=None, openapi_url=None)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        log.debug("Request received", method=request.method, path=request.url.path)

        response = await call_next(request)

        store_metrics["request_duration"].labels(method=request.method).observe(time.perf_counter() - start)
        log.debug("Response sent", method=request.method, path=request.url.path, status=response.status_code)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return error_response("method not allowed", 405)
        return await http_exception_handler(request, exc)

    async def update_key_count() -> None:
        try:
            count = await run_in_threadpool(len, store)
        except StoreError as e:
            log.warning("error - counting keys", error=str(e))
            return
        store_metrics["keys"].set(count)

    async def list_keys() -> Response:
        try:
            keys = await run_in_threadpool(store.list_keys)
        except StoreError as e:
            log.error("error - getting all keys", error=str(e))
            store_metrics["errors"].labels(operation="list").inc()
            return error_response("error - getting all keys", 500)

        store_metrics["lists"].inc()
        return json_response(keys)

    @app.get("/{key:path}")
    async def read(key: str):
        if not key:
            return await list_keys()

        try:
            value = await run_in_threadpool(store.get, key)
        except StoreError as e:
            log.error("error - getting key", key=key, error=str(e))
            store_metrics["errors"].labels(operation="get").inc()
            return error_response("error - getting key", 500)

        if value is None:
            store_metrics["reads"].labels(status="not_found").inc()
            return Response(status_code=404)

        store_metrics["reads"].labels(status="found").inc()
        return json_response(value.to_json())

    @app.put("/{key:path}")
    async def write(key: str, request: Request):
        if not key:
            return error_response("error - no key provided", 400)

        # The body is read in full before the store is locked
        body = await request.body()
        value = decode_body(body)

        try:
            await run_in_threadpool(store.set, key, value)
        except StoreError as e:
            if isinstance(value, StructuredValue):
                message = "error - putting json kv pair"
            else:
                message = "error - putting kv pair"
            log.error(message, key=key, error=str(e))
            store_metrics["errors"].labels(operation="set").inc()
            return error_response(message, 500)

        store_metrics["writes"].labels(kind=value.kind).inc()
        await update_key_count()
        log.debug("Key written", key=key, kind=value.kind, size=len(body))
        return Response(status_code=200)

    @app.delete("/{key:path}")
    async def remove(key: str):
        if not key:
            return error_response("error - no key provided", 400)

        # Existence is checked first so that deleting an absent key answers 404
        try:
            value = await run_in_threadpool(store.get, key)
        except StoreError as e:
            log.error("error - getting key", key=key, error=str(e))
            store_metrics["errors"].labels(operation="get").inc()
            return error_response("error - getting key", 500)

        if value is None:
            store_metrics["deletes"].labels(status="not_found").inc()
            return Response(status_code=404)

        try:
            await run_in_threadpool(store.delete, key)
        except StoreError as e:
            log.error("error - deleting key", key=key, error=str(e))
            store_metrics["errors"].labels(operation="delete").inc()
            return error_response("error - deleting key", 500)

        store_metrics["deletes"].labels(status="deleted").inc()
        await update_key_count()
        log.debug("Key deleted", key=key)
        return Response(status_code=200)

    return app
