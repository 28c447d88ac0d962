import logging
from typing import Any, Dict, Mapping, Optional

from ..executor.sandbox import SandboxExecutor, execute_safely

log = logging.getLogger(__name__)


EXECUTE_CALCULATION_TOOL: Dict[str, Any] = {
    "name": "execute_calculation",
    "description": (
        "Execute JavaScript code for data analysis and calculations. "
        "Code has access to helper functions: avg(), sum(), max(), min(), groupBy()"
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "code": {
                "type": "string",
                "description": (
                    "JavaScript code to execute. Should return a value. Code has access to "
                    "data passed in the data parameter and helper functions."
                ),
            },
            "data": {
                "type": "object",
                "description": "Data to make available to the code execution context",
            },
        },
        "required": ["code", "data"],
    },
}


async def handle_execute_calculation(
    params: Mapping[str, Any], executor: Optional[SandboxExecutor] = None
) -> Dict[str, Any]:
    code = params.get("code")
    data = params.get("data")
    if data is None:
        data = {}

    if executor is None:
        outcome = await execute_safely(code, data)
    else:
        outcome = await executor.execute(code, data)

    if not outcome.success:
        out: Dict[str, Any] = {"result": None, "success": False, "error": outcome.error}
        if outcome.execution_time is not None:
            out["executionTime"] = outcome.execution_time
        return out

    return {"result": outcome.value, "success": True, "executionTime": outcome.execution_time}
