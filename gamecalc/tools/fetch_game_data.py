from typing import Any, Dict, Mapping

from ..rawg.client import MAX_PAGE_SIZE, RAWGClient


FETCH_GAME_DATA_TOOL: Dict[str, Any] = {
    "name": "fetch_game_data",
    "description": "Fetch game data from RAWG API with optional filters (platform, genre, date range, Metacritic score)",
    "inputSchema": {
        "type": "object",
        "properties": {
            "platform": {
                "type": "string",
                "description": "Platform ID or slug (e.g., 'pc', '4' for PC, 'playstation', '18' for PS4)",
            },
            "genre": {"type": "string", "description": "Genre ID or slug (e.g., 'action', '4')"},
            "dates": {
                "type": "string",
                "description": "Date range in format 'YYYY-MM-DD,YYYY-MM-DD' (e.g., '2024-01-01,2024-03-31')",
            },
            "metacritic": {
                "type": "string",
                "description": "Metacritic score range in format 'min,max' (e.g., '80,100')",
            },
            "page_size": {
                "type": "number",
                "description": "Number of results per page (max 40)",
                "minimum": 1,
                "maximum": MAX_PAGE_SIZE,
            },
        },
    },
}

_PARAM_TO_FILTER = {
    "platform": "platforms",
    "genre": "genres",
    "dates": "dates",
    "metacritic": "metacritic",
}


def handle_fetch_game_data(params: Mapping[str, Any], client: RAWGClient) -> Dict[str, Any]:
    filters: Dict[str, Any] = {}
    for param, key in _PARAM_TO_FILTER.items():
        if params.get(param):
            filters[key] = params[param]
    if params.get("page_size"):
        filters["page_size"] = min(int(params["page_size"]), MAX_PAGE_SIZE)

    resp = client.get_games(filters)
    return {"games": resp.get("results", []), "count": resp.get("count", 0), "filters": filters}
