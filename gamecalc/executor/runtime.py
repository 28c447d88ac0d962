import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from .helpers import HELPER_NAMES, HELPERS, HELPERS_JS

log = logging.getLogger(__name__)

ExecutionContext = Dict[str, Any]

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Reserved words plus the non-configurable globals that cannot be rebound.
_JS_RESERVED = frozenset(
    """
    break case catch class const continue debugger default delete do else enum
    export extends false finally for function if import in instanceof new null
    return super switch this throw true try typeof var void while with yield
    let static implements interface package private protected public await
    arguments eval undefined NaN Infinity
    """.split()
)


def build_context(data: Optional[Mapping[str, Any]]) -> ExecutionContext:
    """Data fields plus helpers as one namespace. Helpers win on name collisions."""
    context: ExecutionContext = dict(data or {})
    context.update(HELPERS)
    return context


def reserved_fields(data: Optional[Mapping[str, Any]]) -> List[str]:
    return [name for name in (data or {}) if name in HELPER_NAMES]


def _is_bindable(name: Any) -> bool:
    return isinstance(name, str) and bool(_IDENTIFIER.match(name)) and name not in _JS_RESERVED


def _json_literal(value: Any) -> Optional[str]:
    try:
        # allow_nan keeps NaN/Infinity, which are valid JavaScript literals
        return json.dumps(value, allow_nan=True, ensure_ascii=False)
    except (TypeError, ValueError):
        return None


def render_data_declarations(data: Optional[Mapping[str, Any]]) -> str:
    lines: List[str] = []
    for name, value in (data or {}).items():
        if name in HELPER_NAMES:
            continue
        if not _is_bindable(name):
            log.debug("Dropping data field with unusable name: %r", name)
            continue
        literal = _json_literal(value)
        if literal is None:
            log.debug("Dropping non-serializable data field: %s", name)
            continue
        lines.append(f"const {name} = {literal};")
    return "\n".join(lines)


# QuickJS parse error for a bare top-level return
RETURN_OUTSIDE_FUNCTION = "return not in a function"


def wrap_snippet(code: str, as_function: bool = False) -> str:
    if as_function:
        return "(function () {\n" + code + "\n})();"
    # A block keeps the snippet's declarations out of the data scope and
    # still yields the completion value of its last statement.
    return "{\n" + code + "\n}"


def compose_program(code: str, data: Optional[Mapping[str, Any]], as_function: bool = False) -> str:
    """
    Self-contained program: helper declarations, then a block holding the data
    constants and the snippet. Data constants live in that block so they only
    shadow globals for the snippet, never for the helpers.
    """
    declarations = render_data_declarations(data)
    body = wrap_snippet(code, as_function)
    if declarations:
        body = declarations + "\n" + body
    return HELPERS_JS + "{\n" + body + "\n}"
