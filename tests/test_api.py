import unittest

from fastapi.testclient import TestClient

from weather_agent.data_sources import CallableWeatherDataSource, CurrentReading
from weather_agent.domain import AgentRun, ChatMessage, Location, ToolCallRecord
from weather_agent.errors import LocationNotFound, UpstreamUnavailable
from weather_agent.main import app as fastapi_app
from weather_agent.memory import InMemoryMemoryStore
from weather_agent.tools import build_tools


def _stub_source():
    def geocode(name):
        if name == "Atlantis":
            raise LocationNotFound(name)
        return Location(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)

    def current(lat, lon):
        return CurrentReading(
            temperature=26.0, apparent_temperature=27.0, relative_humidity=55.0,
            wind_speed=35.0, wind_gusts=50.0, weather_code=0, precipitation=0.0, uv_index=8.0,
        )

    def daily(lat, lon, forecast_days=3):
        raise UpstreamUnavailable("forecast", "HTTP 503")

    return CallableWeatherDataSource(geocoder=geocode, current=current, daily=daily)


class FakeAgent:
    def __init__(self):
        self.memory = InMemoryMemoryStore()
        self.calls = []

    def generate(self, messages, *, thread_id=None):
        self.calls.append((messages, thread_id))
        return AgentRun(
            input_messages=[ChatMessage.model_validate(m) for m in messages],
            text="Sunny and 26°C in Lisbon.",
            tool_calls=[ToolCallRecord(tool_name="weatherTool", input={"location": "Lisbon"}, output={"temperature": 26.0})],
            thread_id=thread_id,
        )


class TestApi(unittest.TestCase):
    def setUp(self):
        import weather_agent.api as api_mod
        from weather_agent.config import settings

        self.api_mod = api_mod
        self._orig_tools = api_mod.TOOLS
        self._orig_get_agent = api_mod.get_agent
        self._orig_max_len = settings.max_user_message_chars
        self._orig_api_key = settings.api_key

        self.agent = FakeAgent()
        api_mod.TOOLS = build_tools(_stub_source())
        api_mod.get_agent = lambda: self.agent
        settings.api_key = None
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        from weather_agent.config import settings

        self.api_mod.TOOLS = self._orig_tools
        self.api_mod.get_agent = self._orig_get_agent
        settings.max_user_message_chars = self._orig_max_len
        settings.api_key = self._orig_api_key

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_list_tools(self):
        resp = self.client.get("/v1/tools")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([t["name"] for t in data][:2], ["weatherTool", "forecastTool"])
        self.assertIn("location", data[0]["inputSchema"]["properties"])

    def test_invoke_tool_by_id(self):
        resp = self.client.post("/v1/tools/get-weather-alerts", json={"location": "Lisbon"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["hasAlerts"])
        self.assertEqual(data["alerts"][0]["event"], "High Winds")

    def test_invoke_tool_by_name(self):
        resp = self.client.post("/v1/tools/weatherTool", json={"location": "Lisbon"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["feelsLike"], 27.0)

    def test_invoke_tool_validation_error_422(self):
        resp = self.client.post("/v1/tools/forecastTool", json={"location": "Lisbon", "days": 9})
        self.assertEqual(resp.status_code, 422)

    def test_invoke_tool_without_body_422(self):
        resp = self.client.post("/v1/tools/weatherTool")
        self.assertEqual(resp.status_code, 422)

    def test_invoke_tool_location_not_found_404(self):
        resp = self.client.post("/v1/tools/weatherTool", json={"location": "Atlantis"})
        self.assertEqual(resp.status_code, 404)
        self.assertIn("Atlantis", resp.json()["detail"])

    def test_invoke_tool_upstream_failure_502(self):
        resp = self.client.post("/v1/tools/forecastTool", json={"location": "Lisbon"})
        self.assertEqual(resp.status_code, 502)

    def test_unknown_tool_404(self):
        resp = self.client.post("/v1/tools/radarTool", json={"location": "Lisbon"})
        self.assertEqual(resp.status_code, 404)

    def test_generate_assigns_thread_id(self):
        resp = self.client.post(
            "/v1/agents/weather/generate",
            json={"messages": [{"role": "user", "content": "Weather in Lisbon?"}]},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["text"], "Sunny and 26°C in Lisbon.")
        self.assertEqual(data["toolCalls"][0]["toolName"], "weatherTool")
        self.assertTrue(data["threadId"])
        self.assertEqual(self.agent.calls[0][1], data["threadId"])

    def test_generate_keeps_given_thread_id(self):
        resp = self.client.post(
            "/v1/agents/weather/generate",
            json={"messages": [{"role": "user", "content": "Hi"}], "threadId": "t-42"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["threadId"], "t-42")

    def test_generate_requires_messages(self):
        resp = self.client.post("/v1/agents/weather/generate", json={"messages": []})
        self.assertEqual(resp.status_code, 422)

    def test_generate_rejects_long_message(self):
        from weather_agent.config import settings

        settings.max_user_message_chars = 5
        resp = self.client.post(
            "/v1/agents/weather/generate",
            json={"messages": [{"role": "user", "content": "far too long"}]},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.agent.calls, [])

    def test_api_key_enforced(self):
        from weather_agent.config import settings

        settings.api_key = "sekret"
        self.assertEqual(self.client.get("/v1/tools").status_code, 401)
        self.assertEqual(self.client.get("/v1/tools", headers={"X-API-Key": "nope"}).status_code, 401)
        self.assertEqual(self.client.get("/v1/tools", headers={"X-API-Key": "sekret"}).status_code, 200)
        # health stays open
        self.assertEqual(self.client.get("/health").status_code, 200)


if __name__ == "__main__":
    unittest.main()
