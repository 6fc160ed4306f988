import os
import unittest

from pydantic import ValidationError

from weather_agent.config import Settings


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._saved = {k: v for k, v in os.environ.items() if k.startswith("WEATHER_AGENT_")}
        for key in self._saved:
            os.environ.pop(key)

    def tearDown(self):
        for key in [k for k in os.environ if k.startswith("WEATHER_AGENT_")]:
            os.environ.pop(key)
        os.environ.update(self._saved)

    def test_settings_defaults(self):
        s = Settings()
        self.assertEqual(s.data_source, "open_meteo")
        self.assertEqual(s.geocoding_url, "https://geocoding-api.open-meteo.com/v1/search")
        self.assertEqual(s.forecast_url, "https://api.open-meteo.com/v1/forecast")
        self.assertEqual(s.ollama_base_url, "http://localhost:11434")
        self.assertEqual(s.default_forecast_days, 3)
        self.assertIsNone(s.api_key)
        self.assertIsNone(s.memory_redis_url)

    def test_settings_env_override(self):
        os.environ["WEATHER_AGENT_OLLAMA_BASE_URL"] = "http://example.com/"
        os.environ["WEATHER_AGENT_MAX_TOOL_ROUNDS"] = "2"
        s = Settings()
        self.assertEqual(s.ollama_base_url, "http://example.com")
        self.assertEqual(s.max_tool_rounds, 2)

    def test_forecast_days_bounds(self):
        os.environ["WEATHER_AGENT_DEFAULT_FORECAST_DAYS"] = "8"
        with self.assertRaises(ValidationError):
            Settings()


if __name__ == "__main__":
    unittest.main()
