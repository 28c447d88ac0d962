#!/usr/bin/env python3
"""
Send a calculation straight to a running server's JSON-RPC endpoint.

Run the server:
  uvicorn gamecalc.app:create_app --factory --port 8787
Then:
  python examples/calc_direct.py --url http://127.0.0.1:8787/mcp
"""
import argparse

import requests


SAMPLE_GAMES = [
    {"name": "Elden Ring", "metacritic": 96, "genre": "RPG", "platform": {"name": "PC"}},
    {"name": "Hades", "metacritic": 93, "genre": "Action", "platform": {"name": "PC"}},
    {"name": "Returnal", "metacritic": 86, "genre": "Action", "platform": {"name": "PlayStation 5"}},
    {"name": "Starfield", "metacritic": None, "genre": "RPG", "platform": {"name": "PC"}},
]

SAMPLE_CODE = """
const scored = games.filter(g => g.metacritic !== null);
const byGenre = groupBy(scored, 'genre');
const out = {};
for (const genre of Object.keys(byGenre)) {
  out[genre] = avg(byGenre[genre].map(g => g.metacritic));
}
return out;
"""


def call_tool(url: str, name: str, arguments: dict) -> dict:
    payload = {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
    resp = requests.post(url, json=payload, timeout=15)
    resp.raise_for_status()
    return resp.json()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--url", default="http://127.0.0.1:8787/mcp")
    args = ap.parse_args()

    body = call_tool(args.url, "execute_calculation", {"code": SAMPLE_CODE, "data": {"games": SAMPLE_GAMES}})
    result = body.get("result") or {}
    for item in result.get("content", []):
        print(item.get("text"))
    if result.get("isError"):
        print("Calculation failed")


if __name__ == "__main__":
    main()
