"""
Aggregate helpers available to every calculation snippet.

Each helper exists twice: as a pure Python function (used by the in-process
context and for reasoning about results) and as JavaScript source that is
prepended to every snippet evaluated in the isolated interpreter. Both return
NaN or an empty/zero default instead of raising.
"""

import math
from typing import Any, Dict, Iterable, List

HELPER_NAMES = ("avg", "sum", "max", "min", "groupBy")

_MISSING = object()


def _numbers(values: Any) -> List[float]:
    if values is None or isinstance(values, (str, bytes, dict)):
        return []
    return list(values)


def avg(numbers: Iterable[float]) -> float:
    values = _numbers(numbers)
    if not values:
        return math.nan
    try:
        return math.fsum(values) / len(values)
    except (TypeError, ValueError):
        return math.nan


def sum_values(numbers: Iterable[float]) -> float:
    values = _numbers(numbers)
    try:
        total = math.fsum(values)
    except (TypeError, ValueError):
        return math.nan
    if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return int(total)
    return total


def _to_number(value: Any) -> float:
    """JavaScript ToNumber for the JSON value types."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _extreme(numbers: Iterable[float], pick) -> float:
    values = [_to_number(v) for v in _numbers(numbers)]
    if not values:
        return math.nan
    # Math.max/Math.min semantics: any NaN wins
    if any(isinstance(v, float) and math.isnan(v) for v in values):
        return math.nan
    return pick(values)


def max_value(numbers: Iterable[float]) -> float:
    return _extreme(numbers, max)


def min_value(numbers: Iterable[float]) -> float:
    return _extreme(numbers, min)


def js_string(value: Any) -> str:
    """Stringify a value the way JavaScript's String() would."""
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else js_string(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _lookup(item: Any, path: List[str]) -> Any:
    value = item
    for key in path:
        if value is None or value is _MISSING:
            return _MISSING
        if isinstance(value, dict):
            value = value.get(key, _MISSING)
        elif isinstance(value, (list, tuple)) and key.isdigit():
            index = int(key)
            value = value[index] if index < len(value) else _MISSING
        else:
            value = _MISSING
    return value


def group_by(items: Iterable[Any], key_path: str) -> Dict[str, List[Any]]:
    groups: Dict[str, List[Any]] = {}
    if items is None or isinstance(items, (str, bytes, dict)):
        return groups
    path = str(key_path).split(".")
    for item in items:
        groups.setdefault(js_string(_lookup(item, path)), []).append(item)
    return groups


HELPERS = {
    "avg": avg,
    "sum": sum_values,
    "max": max_value,
    "min": min_value,
    "groupBy": group_by,
}


# Injected ahead of every snippet. Keep in step with the Python versions above.
# Builtins are captured before the data constants are declared, so a data field
# named Array, String or Object cannot break the helpers.
HELPERS_JS = """\
const [avg, sum, max, min, groupBy] = (function (isArray, toStr, createObject) {
  function avg(arr) {
    if (!isArray(arr) || arr.length === 0) return NaN;
    let total = 0;
    for (let i = 0; i < arr.length; i++) total += arr[i];
    return total / arr.length;
  }
  function sum(arr) {
    if (!isArray(arr)) return 0;
    let total = 0;
    for (let i = 0; i < arr.length; i++) total += arr[i];
    return total;
  }
  function extreme(arr, better) {
    if (!isArray(arr) || arr.length === 0) return NaN;
    let best = +arr[0];
    for (let i = 0; i < arr.length; i++) {
      const v = +arr[i];
      if (v !== v) return NaN;
      if (better(v, best)) best = v;
    }
    return best;
  }
  function max(arr) {
    return extreme(arr, (a, b) => a > b);
  }
  function min(arr) {
    return extreme(arr, (a, b) => a < b);
  }
  function groupBy(arr, key) {
    const result = createObject(null);
    if (!isArray(arr)) return result;
    const path = toStr(key).split('.');
    for (let i = 0; i < arr.length; i++) {
      const item = arr[i];
      let value = item;
      for (let j = 0; j < path.length; j++) {
        if (value === null || value === undefined) { value = undefined; break; }
        value = value[path[j]];
      }
      const group = toStr(value);
      if (!(group in result)) result[group] = [];
      result[group].push(item);
    }
    return result;
  }
  return [avg, sum, max, min, groupBy];
})(Array.isArray, String, Object.create);
"""
