import json
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from gamecalc.app import create_app
from gamecalc.config import settings
from gamecalc.tools.router import ToolRouter


class MCPRoutesTest(unittest.TestCase):
    def setUp(self):
        self.orig_log_to_file = settings.log_to_file
        settings.log_to_file = False
        self.client = TestClient(create_app())

    def tearDown(self):
        settings.log_to_file = self.orig_log_to_file

    def rpc(self, method, params=None, rid=1):
        return self.client.post("/mcp", json={"jsonrpc": "2.0", "id": rid, "method": method, "params": params or {}})

    def test_get_reports_running(self):
        resp = self.client.get("/mcp")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "MCP Server is running")

    def test_initialize(self):
        body = self.rpc("initialize").json()
        self.assertEqual(body["result"]["serverInfo"]["name"], settings.server_name)

    def test_lists_both_tools(self):
        body = self.rpc("tools/list").json()
        names = [t["name"] for t in body["result"]["tools"]]
        self.assertEqual(names, ["fetch_game_data", "execute_calculation"])

    def test_calls_execute_calculation(self):
        resp = self.rpc(
            "tools/call",
            {"name": "execute_calculation", "arguments": {"code": "return avg(data)", "data": {"data": [10, 20, 30, 40, 50]}}},
        )
        self.assertEqual(resp.status_code, 200)
        result = resp.json()["result"]
        self.assertFalse(result["isError"])
        payload = json.loads(result["content"][0]["text"])
        self.assertEqual(payload["result"], 30)
        self.assertTrue(payload["success"])

    def test_failed_calculation_is_error_content(self):
        resp = self.rpc("tools/call", {"name": "execute_calculation", "arguments": {"code": "eval('x')", "data": {}}})
        result = resp.json()["result"]
        self.assertTrue(result["isError"])
        payload = json.loads(result["content"][0]["text"])
        self.assertIn("Dangerous pattern", payload["error"])
        self.assertNotIn("executionTime", payload)

    def test_calls_fetch_game_data(self):
        rawg = MagicMock()
        rawg.get_games.return_value = {"count": 1, "results": [{"id": 7}]}
        with patch("gamecalc.routes.mcp._tools", ToolRouter(rawg=rawg)):
            resp = self.rpc("tools/call", {"name": "fetch_game_data", "arguments": {"genre": "rpg"}})
        payload = json.loads(resp.json()["result"]["content"][0]["text"])
        self.assertEqual(payload["games"], [{"id": 7}])
        self.assertEqual(payload["filters"], {"genres": "rpg"})

    def test_fetch_without_api_key_is_error_content(self):
        with patch.object(settings, "rawg_api_key", ""), patch("gamecalc.routes.mcp._tools", ToolRouter()):
            resp = self.rpc("tools/call", {"name": "fetch_game_data", "arguments": {}})
        result = resp.json()["result"]
        self.assertTrue(result["isError"])
        self.assertIn("RAWG API key is required", result["content"][0]["text"])

    def test_unknown_tool(self):
        resp = self.rpc("tools/call", {"name": "nope", "arguments": {}})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], -32602)

    def test_unknown_method(self):
        resp = self.rpc("resources/list")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["code"], -32601)

    def test_missing_method(self):
        resp = self.client.post("/mcp", json={"jsonrpc": "2.0", "id": 5})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], -32600)

    def test_malformed_json(self):
        resp = self.client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"]["code"], -32700)


class HealthRouteTest(unittest.TestCase):
    def test_health_reports_sandbox(self):
        orig = settings.log_to_file
        settings.log_to_file = False
        try:
            resp = TestClient(create_app()).get("/health")
        finally:
            settings.log_to_file = orig
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["sandbox"]["live_interpreters"], 0)


if __name__ == "__main__":
    unittest.main()
