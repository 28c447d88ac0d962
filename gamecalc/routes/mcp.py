import json
import logging
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from ..config import settings
from ..tools.router import ToolRouter, UnknownToolError
from ..tools.schemas import tool_schemas

log = logging.getLogger(__name__)
router = APIRouter()

PROTOCOL_VERSION = "2024-11-05"

_tools = ToolRouter()


class RPCRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: Optional[Union[int, str]] = None
    method: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)


def _error(rid: Any, code: int, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "id": rid, "error": {"code": code, "message": message}},
        status_code=status_code,
    )


def _result(rid: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": rid, "result": result})


@router.get("", response_class=PlainTextResponse)
def mcp_status():
    return "MCP Server is running"


@router.post("")
async def mcp_rpc(request: Request):
    raw = await request.body()
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        return _error(None, -32700, f"Parse error: {e}", 500)

    try:
        rpc = RPCRequest.model_validate(payload)
    except ValidationError:
        return _error(None, -32600, "Invalid Request", 400)
    if not rpc.method:
        return _error(rpc.id, -32600, "Invalid Request", 400)

    log.info("RPC %s id=%s", rpc.method, rpc.id)

    if rpc.method == "initialize":
        return _result(
            rpc.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": {"name": settings.server_name, "version": settings.server_version},
                "capabilities": {"tools": {}},
            },
        )
    if rpc.method == "tools/list":
        return _result(rpc.id, {"tools": tool_schemas()})
    if rpc.method == "tools/call":
        name = rpc.params.get("name") or rpc.params.get("tool") or ""
        try:
            result = await _tools.call(name, rpc.params.get("arguments") or {})
        except UnknownToolError as e:
            return _error(rpc.id, -32602, str(e), 400)
        return _result(rpc.id, result)

    return _error(rpc.id, -32601, f"Method not found: {rpc.method}", 404)
