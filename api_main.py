"""
Habit Roasts – Roast Generation API

Single-endpoint FastAPI app that turns a habit "roast" request into a batch
of screen / done / missed messages. Generation goes through OpenAI; the
canned pool in roast_client covers a missing key or a failed call.

File: api_main.py
"""

import logging
import os
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError

from config import get_settings
from roast_client import RoastCompletionClient
from schemas import ErrorResponse, RoastRequest, RoastResponse

# --------------------------------------------------------------------
# Logging Setup
# --------------------------------------------------------------------

logger = logging.getLogger("roast_api")
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

# --------------------------------------------------------------------
# Settings
# --------------------------------------------------------------------

settings = get_settings()


def log_startup(settings) -> None:
    logger.info(
        f"Roast API starting (environment={settings.env}, debug={settings.debug}, "
        f"openai_key_configured={bool(settings.openai_api_key)})"
    )


log_startup(settings)

# The browser client calls this endpoint cross-origin with its anon key,
# so every response (errors included) must carry these.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

ROAST_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# --------------------------------------------------------------------
# FastAPI App
# --------------------------------------------------------------------

app = FastAPI(
    title="Habit Roasts – Roast Generation API",
    description=(
        "Generates tone-specific roast messages for the habit prompt, "
        "done and missed screens."
    ),
    version="1.0.0",
)

# --------------------------------------------------------------------
# Middleware
# --------------------------------------------------------------------


@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    """Attach a request ID and the CORS headers to each response, and log basic info."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(f"[{request_id}] {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as exc:  # global safety net
        logger.exception(f"[{request_id}] Unhandled error: {exc}")
        response = _json_response(500, ErrorResponse(error="Internal server error"))

    response.headers.update(CORS_HEADERS)
    response.headers["X-Request-ID"] = request_id
    return response


# --------------------------------------------------------------------
# Utility Helpers
# --------------------------------------------------------------------


def _json_response(status_code: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(),
        headers=CORS_HEADERS,
    )


def get_roast_client() -> RoastCompletionClient:
    """Roast client wired with the configured OpenAI key (None means fallback only)."""
    return RoastCompletionClient(api_key=get_settings().openai_api_key)


# --------------------------------------------------------------------
# Roasts
# --------------------------------------------------------------------


@app.api_route(
    "/generate-roasts",
    methods=ROAST_METHODS,
    tags=["roasts"],
    summary="Generate a batch of screen / done / missed roasts",
)
async def generate_roasts(
    request: Request,
    client: RoastCompletionClient = Depends(get_roast_client),
):
    """
    Body (JSON):
      habit, reason, tone          – non-empty strings
      streak, consecutiveMisses,
      escalationState              – numbers
      count                        – optional, defaults to 7

    Returns {"roasts": [{"screen", "done", "missed"}, ...]} with exactly
    `count` entries. OPTIONS is answered as a CORS preflight.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    request_id = getattr(request.state, "request_id", None)

    try:
        payload = await request.json()

        try:
            roast_request = RoastRequest.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"[{request_id}] Rejected roast request: {e.errors()}")
            return _json_response(400, ErrorResponse(error="Missing required fields"))

        roasts = await client.generate(roast_request)
        logger.info(f"[{request_id}] Returning {len(roasts)} roasts (tone={roast_request.tone})")
        return _json_response(200, RoastResponse(roasts=roasts))

    except Exception as e:
        logger.exception(f"[{request_id}] generate_roasts failed: {e}")
        return _json_response(500, ErrorResponse(error="Internal server error"))


# --------------------------------------------------------------------
# Local dev runner
# --------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=settings.debug,
    )
