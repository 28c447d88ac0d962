from typing import Any, Dict, Mapping

FILTER_KEYS = ("page", "page_size", "search", "platforms", "genres", "dates", "metacritic", "ordering")


def build_query_params(options: Mapping[str, Any]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for key in FILTER_KEYS:
        value = options.get(key)
        if key in ("page", "page_size"):
            if value is not None:
                params[key] = str(value)
        elif value:
            params[key] = str(value)
    return params
