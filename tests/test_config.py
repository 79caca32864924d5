"""Тесты для конфигурации."""

import pytest
from pydantic import ValidationError

from j5_relay.config import Config, RelayConfig, SimulatorConfig


def test_relay_config_defaults() -> None:
    """Проверка дефолтных значений RelayConfig."""
    cfg = RelayConfig()

    assert cfg.command_topic == "/j5_cmd"
    assert cfg.status_topic == "/j5_status"
    assert cfg.publish_rate_hz == 10
    assert cfg.period_s == pytest.approx(0.1)
    assert cfg.default_velocity == 0.0
    assert cfg.default_turn_rate == 0.0
    assert cfg.max_velocity == 3.0
    assert cfg.max_turn_rate == 1.0


def test_config_is_immutable() -> None:
    """Конфиг нельзя менять после создания."""
    cfg = RelayConfig()

    with pytest.raises(ValidationError):
        cfg.max_velocity = 10.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"publish_rate_hz": 0},
        {"max_velocity": 0.0},
        {"max_turn_rate": -1.0},
        {"default_velocity": 3.5},
        {"default_turn_rate": -1.5},
    ],
)
def test_relay_config_rejects_invalid_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        RelayConfig(**overrides)


def test_nested_config_defaults() -> None:
    cfg = Config()

    assert cfg.simulator.enabled is True
    assert cfg.server.port == 8000
    assert cfg.logging.level == "INFO"


def test_simulator_config_rate_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        SimulatorConfig(status_rate_hz=0.0)
