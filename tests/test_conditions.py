import pytest

from weather_agent.conditions import UNKNOWN_CONDITION, WEATHER_CODE_LABELS, describe_weather_code


@pytest.mark.parametrize(
    "code,label",
    [
        (0, "Clear sky"),
        (2, "Partly cloudy"),
        (45, "Foggy"),
        (65, "Heavy rain"),
        (77, "Snow grains"),
        (99, "Thunderstorm with heavy hail"),
    ],
)
def test_known_codes_map_to_fixed_labels(code, label):
    assert describe_weather_code(code) == label


def test_every_table_entry_round_trips():
    for code, label in WEATHER_CODE_LABELS.items():
        assert describe_weather_code(code) == label
    assert len(WEATHER_CODE_LABELS) == 28


@pytest.mark.parametrize("code", [-1, 4, 50, 60, 100, 1000, None])
def test_unlisted_codes_are_unknown(code):
    assert describe_weather_code(code) == UNKNOWN_CONDITION == "Unknown"


def test_table_is_read_only():
    with pytest.raises(TypeError):
        WEATHER_CODE_LABELS[0] = "Sunny"  # type: ignore[index]
