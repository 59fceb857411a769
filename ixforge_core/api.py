"""
REST / HTTP API server for ixforge.

Built on ``aiohttp``.  Every endpoint turns a JSON request into a
ready-to-sign instruction description; nothing is signed, submitted or
stored.

Endpoints
---------
GET  /health          Liveness check
POST /keypair         Generate a fresh keypair
POST /token/create    InitializeMint instruction
POST /token/mint      MintTo instruction
POST /send/sol        System transfer instruction
POST /send/token      TransferChecked instruction

Responses
---------
Success:  200  {"success": true,  "data": {...}}
Failure:  4xx  {"success": false, "error": "<message>"}
          500  {"success": false, "error": "Request processing error"}

Usage:
    api = APIServer(host="127.0.0.1", port=8080)
    await api.start()    # call inside existing event loop
    ...
    await api.stop()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web

from ixforge_core import __version__
from ixforge_core.errors import (
    APIError,
    InstructionBuildFailed,
    InternalFault,
    MalformedRequest,
    success_envelope,
)
from ixforge_core.instructions import (
    InstructionBuildError,
    initialize_mint,
    mint_to,
    transfer_checked,
    transfer_native,
)
from ixforge_core.keypair import generate_keypair
from ixforge_core.responses import (
    encode_instruction,
    encode_keypair,
    encode_native_transfer,
    encode_token_transfer,
)
from ixforge_core.validation import (
    CreateMintRequest,
    MintToRequest,
    SendSolRequest,
    SendTokenRequest,
)

if TYPE_CHECKING:
    from ixforge_core.config import APIConfig

logger = logging.getLogger("ixforge_api")

DEFAULT_MAX_BODY_BYTES = 65_536


# ═══════════════════════════════════════════════════════════════════
#  Input / output helpers
# ═══════════════════════════════════════════════════════════════════

async def _read_json(request: web.Request) -> Any:
    """Parse the request body; any parse failure is malformed."""
    try:
        return await request.json()
    except (ValueError, RecursionError) as exc:
        raise MalformedRequest(f"body is not valid JSON: {exc}") from exc


def _ok(data: dict) -> web.Response:
    return web.json_response(success_envelope(data))


class _TransportError(APIError):
    """Routing / size errors raised by aiohttp itself (404, 405, 413)."""

    def __init__(self, status: int, reason: str):
        super().__init__(reason)
        self.status = status


def _error_response(exc: APIError, headers: dict | None = None) -> web.Response:
    return web.json_response(exc.to_dict(), status=exc.status, headers=headers)


# ═══════════════════════════════════════════════════════════════════
#  Middleware factories
# ═══════════════════════════════════════════════════════════════════

def _make_error_middleware():
    """aiohttp middleware that renders every failure as an error envelope."""

    @web.middleware
    async def error_middleware(request: web.Request, handler):
        try:
            return await handler(request)
        except APIError as exc:
            if isinstance(exc, MalformedRequest) and exc.detail:
                logger.debug("Malformed request: %s", exc.detail)
            logger.info(
                "Rejected %s: %s", request.path, exc.message,
                extra={"endpoint": request.path, "status": exc.status},
            )
            return _error_response(exc)
        except web.HTTPException as exc:
            if exc.status < 400:
                raise
            headers = {}
            if "Allow" in exc.headers:
                headers["Allow"] = exc.headers["Allow"]
            return _error_response(_TransportError(exc.status, exc.reason), headers)
        except Exception:
            logger.exception(
                "Unhandled error on %s", request.path,
                extra={"endpoint": request.path, "status": 500},
            )
            return _error_response(InternalFault())

    return error_middleware


def _make_cors_middleware(origins: list[str]):
    """aiohttp middleware that adds CORS headers.

    The ``*`` wildcard is **not** supported; operators must list concrete
    origins.
    """

    allowed = set(origins) if origins else set()
    allowed.discard("*")

    @web.middleware
    async def cors_middleware(request: web.Request, handler):
        origin = request.headers.get("Origin", "")
        if request.method == "OPTIONS":
            resp = web.Response(status=204)
        else:
            resp = await handler(request)

        if origin in allowed:
            resp.headers["Access-Control-Allow-Origin"] = origin
            resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
            resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
            resp.headers["Access-Control-Max-Age"] = "3600"
        return resp

    return cors_middleware


# ═══════════════════════════════════════════════════════════════════
#  Handlers
# ═══════════════════════════════════════════════════════════════════

async def health(_request: web.Request) -> web.Response:
    return _ok({"status": "ok", "version": __version__})


async def create_keypair(_request: web.Request) -> web.Response:
    """
    POST /keypair
    Returns {"pubkey": "<base58>", "secret": "<base58 64 bytes>"}
    """
    kp = generate_keypair()
    logger.debug("Generated keypair %s", kp.address)
    return _ok(encode_keypair(kp))


async def create_token(request: web.Request) -> web.Response:
    """
    POST /token/create
    Body: {"mintAuthority": "<addr>", "mint": "<addr>", "decimals": 6}
    """
    req = CreateMintRequest.from_json(await _read_json(request))
    try:
        ix = initialize_mint(req.mint, req.mint_authority, req.decimals)
    except InstructionBuildError as exc:
        raise InstructionBuildFailed("mint", str(exc)) from exc
    return _ok(encode_instruction(ix))


async def mint_token(request: web.Request) -> web.Response:
    """
    POST /token/mint
    Body: {"mint": "<addr>", "destination": "<addr>", "authority": "<addr>", "amount": 1000}
    """
    req = MintToRequest.from_json(await _read_json(request))
    try:
        ix = mint_to(req.mint, req.destination, req.authority, req.amount)
    except InstructionBuildError as exc:
        raise InstructionBuildFailed("mint", str(exc)) from exc
    return _ok(encode_instruction(ix))


async def send_sol(request: web.Request) -> web.Response:
    """
    POST /send/sol
    Body: {"from": "<addr>", "to": "<addr>", "lamports": 100000}
    """
    req = SendSolRequest.from_json(await _read_json(request))
    try:
        ix = transfer_native(req.from_pubkey, req.to_pubkey, req.lamports)
    except InstructionBuildError as exc:
        raise InstructionBuildFailed("transfer", str(exc)) from exc
    return _ok(encode_native_transfer(ix))


async def send_token(request: web.Request) -> web.Response:
    """
    POST /send/token
    Body: {"destination": "<addr>", "mint": "<addr>", "owner": "<addr>",
           "amount": 100, "decimals": 6}

    ``decimals`` is optional and defaults to 6.  The owner's address is
    used as the source account.
    """
    req = SendTokenRequest.from_json(await _read_json(request))
    try:
        ix = transfer_checked(
            req.owner, req.mint, req.destination, req.owner,
            req.amount, req.decimals,
        )
    except InstructionBuildError as exc:
        raise InstructionBuildFailed("token transfer", str(exc)) from exc
    return _ok(encode_token_transfer(ix))


def _register_routes(app: web.Application) -> None:
    app.router.add_get("/health", health)
    app.router.add_post("/keypair", create_keypair)
    app.router.add_post("/token/create", create_token)
    app.router.add_post("/token/mint", mint_token)
    app.router.add_post("/send/sol", send_sol)
    app.router.add_post("/send/token", send_token)


def build_app(api_config: APIConfig | None = None) -> web.Application:
    """Build the aiohttp application with routes and middlewares."""
    middlewares: list = []
    max_body = DEFAULT_MAX_BODY_BYTES

    if api_config is not None:
        max_body = api_config.max_body_bytes
        if api_config.cors_origins:
            middlewares.append(_make_cors_middleware(api_config.cors_origins))

    # innermost, so CORS headers are added to error envelopes too
    middlewares.append(_make_error_middleware())

    app = web.Application(middlewares=middlewares, client_max_size=max_body)
    _register_routes(app)
    return app


class APIServer:
    """Thin aiohttp wrapper that owns the listener lifecycle."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8080,
        *,
        api_config: APIConfig | None = None,
    ):
        self.host = host
        self.port = port
        self._api_config = api_config
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    # ── lifecycle ────────────────────────────────────────────────

    async def start(self) -> None:
        self._app = build_app(self._api_config)
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("API listening on http://%s:%s", self.host, self.port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
