from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...api import ApiFunction, api_state, call_api, get_api_functions
from ...data import EventNotFoundError, SupabaseNotInitializedError

logger = logging.getLogger(__name__)

app = FastAPI(title="calgrid Local API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _serialize_api_function(api_function: ApiFunction) -> dict:
    return api_function.describe()


@app.get("/api/functions")
async def list_api_functions() -> JSONResponse:
    functions = [_serialize_api_function(func) for func in get_api_functions()]
    return JSONResponse({"functions": functions})


@app.get("/api/health")
def health() -> JSONResponse:
    context = api_state.context
    return JSONResponse(
        {
            "status": "ok",
            "store": context.settings.storage.backend,
            "buckets": len(context.buckets),
            "dragging": context.drag.state.is_dragging,
        }
    )


@app.post("/api/functions/{function_name}")
def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
    try:
        result = call_api(function_name, **request.arguments)
    except EventNotFoundError as exc:
        logger.warning("API function %s targeted a missing event: %s", function_name, exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SupabaseNotInitializedError as exc:
        logger.error("Event store unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except KeyError as exc:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("API function %s failed", function_name)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(app, config))
