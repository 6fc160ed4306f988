import unittest

from weather_agent.data_sources import open_meteo_client
from weather_agent.data_sources.base import CallableWeatherDataSource
from weather_agent.data_sources.factory import DEFAULT_SOURCE_NAME, build_data_source


class DummySettings:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        self.data_source = getattr(self, "data_source", DEFAULT_SOURCE_NAME)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_open_meteo_default(self):
        ds = build_data_source(DummySettings())
        self.assertIsInstance(ds, CallableWeatherDataSource)
        self.assertIs(ds.geocoder, open_meteo_client.geocode_location)
        self.assertIs(ds.current, open_meteo_client.fetch_weather_current)
        self.assertIs(ds.daily, open_meteo_client.fetch_weather_daily)

    def test_name_is_case_insensitive(self):
        self.assertIsInstance(build_data_source(DummySettings(data_source="Open_Meteo")), CallableWeatherDataSource)

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            build_data_source(DummySettings(data_source="unknown-source"))


if __name__ == "__main__":
    unittest.main()
