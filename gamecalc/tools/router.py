import asyncio
import json
import logging
from typing import Any, Dict, Optional, Union

from ..config import settings, tool_enabled
from ..executor.sandbox import SandboxExecutor
from ..rawg.client import RAWGClient
from .execute_calculation import handle_execute_calculation
from .fetch_game_data import handle_fetch_game_data

log = logging.getLogger(__name__)


class UnknownToolError(Exception):
    pass


def _content(payload: Dict[str, Any], is_error: bool = False) -> Dict[str, Any]:
    return {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2, default=str)}],
        "isError": is_error,
    }


class ToolRouter:
    def __init__(self, rawg: Optional[RAWGClient] = None, executor: Optional[SandboxExecutor] = None):
        self._rawg = rawg
        self.executor = executor

    @property
    def rawg(self) -> RAWGClient:
        if self._rawg is None:
            self._rawg = RAWGClient(settings.rawg_api_key)
        return self._rawg

    async def call(self, name: str, arguments: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
        if isinstance(arguments, str):
            try:
                args = json.loads(arguments or "{}")
            except ValueError as e:
                return _content({"error": f"Invalid JSON args: {e}"}, is_error=True)
        else:
            args = arguments or {}

        if not tool_enabled(name):
            raise UnknownToolError(f"Unknown tool: {name}")

        try:
            if name == "execute_calculation":
                result = await handle_execute_calculation(args, self.executor)
                if not result["success"]:
                    failure = {"error": result["error"]}
                    if "executionTime" in result:
                        failure["executionTime"] = result["executionTime"]
                    return _content(failure, is_error=True)
                return _content(result)
            if name == "fetch_game_data":
                result = await asyncio.to_thread(handle_fetch_game_data, args, self.rawg)
                return _content(result)
        except Exception as e:
            log.exception("Tool '%s' raised error", name)
            return _content({"error": str(e)}, is_error=True)

        raise UnknownToolError(f"Unknown tool: {name}")
