from typing import Any, Dict, List

from ..config import tool_enabled
from .execute_calculation import EXECUTE_CALCULATION_TOOL
from .fetch_game_data import FETCH_GAME_DATA_TOOL


def all_tool_schemas() -> List[Dict[str, Any]]:
    return [FETCH_GAME_DATA_TOOL, EXECUTE_CALCULATION_TOOL]


def tool_schemas() -> List[Dict[str, Any]]:
    return [t for t in all_tool_schemas() if tool_enabled(t["name"])]
