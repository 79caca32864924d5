"""Тесты для разбора аргументов в команду скорости."""

import pytest

from j5_relay.config import RelayConfig
from j5_relay.messages import MotionCommand
from j5_relay.nodes.command import CommandBuilder, ParsedValue, UseDefault, build_command, parse_token


def test_build_with_both_values() -> None:
    """Оба аргумента в пределах лимитов передаются как есть."""
    cmd = CommandBuilder().build(["prog", "1.5", "0.3"])

    assert cmd == MotionCommand(linear_velocity=1.5, angular_velocity=0.3)


def test_build_clamps_linear_velocity() -> None:
    """10 м/с обрезается до лимита 3.0."""
    cmd = CommandBuilder().build(["prog", "10", "0.3"])

    assert cmd.linear_velocity == 3.0
    assert cmd.angular_velocity == 0.3


def test_build_bad_token_uses_default() -> None:
    """Нечисловой аргумент ведёт себя как отсутствующий."""
    cmd = CommandBuilder().build(["prog", "oops"])

    assert cmd == MotionCommand(linear_velocity=0.0, angular_velocity=0.0)


def test_build_empty_args() -> None:
    """Без аргументов - команда по умолчанию."""
    assert CommandBuilder().build([]) == MotionCommand(0.0, 0.0)


def test_build_program_name_only() -> None:
    assert CommandBuilder().build(["prog"]) == MotionCommand(0.0, 0.0)


def test_build_single_token_sets_linear_only() -> None:
    cmd = CommandBuilder().build(["prog", "-2.25"])

    assert cmd.linear_velocity == -2.25
    assert cmd.angular_velocity == 0.0


def test_build_ignores_extra_tokens() -> None:
    cmd = CommandBuilder().build(["prog", "1", "0.5", "7", "junk"])

    assert cmd == MotionCommand(1.0, 0.5)


def test_build_bad_angular_keeps_linear() -> None:
    """Ошибка во втором аргументе не влияет на первый."""
    cmd = CommandBuilder().build(["prog", "2", "abc"])

    assert cmd == MotionCommand(2.0, 0.0)


@pytest.mark.parametrize("token", ["0", "0.1", "-0.1", "2.999", "-3", "3", "1e-3", " 1.25 "])
def test_linear_round_trip_within_bounds(token: str) -> None:
    """Значения внутри лимита не меняются."""
    cmd = CommandBuilder().build(["prog", token])

    assert cmd.linear_velocity == float(token)


@pytest.mark.parametrize("token", ["-1", "-0.5", "0", "0.75", "1"])
def test_angular_round_trip_within_bounds(token: str) -> None:
    cmd = CommandBuilder().build(["prog", "0", token])

    assert cmd.angular_velocity == float(token)


@pytest.mark.parametrize(
    "linear, angular, expected",
    [
        ("3.0001", "1.0001", MotionCommand(3.0, 1.0)),
        ("-3.0001", "-1.0001", MotionCommand(-3.0, -1.0)),
        ("1000", "-50", MotionCommand(3.0, -1.0)),
        ("-1e9", "1e9", MotionCommand(-3.0, 1.0)),
        ("inf", "-inf", MotionCommand(3.0, -1.0)),
    ],
)
def test_out_of_bounds_saturates(linear: str, angular: str, expected: MotionCommand) -> None:
    """Выход за лимит - насыщение, а не отказ."""
    assert CommandBuilder().build(["prog", linear, angular]) == expected


@pytest.mark.parametrize("token", ["abc", "", "nan", "-nan", "--", "-", ".", "m1.5", "e5", "x"])
def test_non_numeric_tokens_use_default(token: str) -> None:
    cmd = CommandBuilder().build(["prog", token, token])

    assert cmd == MotionCommand(0.0, 0.0)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("1.5m/s", 1.5),
        ("1,5", 1.0),
        ("1_5", 1.0),
        ("2.", 2.0),
        (".5", 0.5),
        ("-.25rad", -0.25),
        ("1e", 1.0),
        ("2e-1x", 0.2),
        ("\t+0.75", 0.75),
        ("0x1p-1", 0.5),
        ("0x10", 3.0),
        ("-Infinity", -3.0),
    ],
)
def test_numeric_prefix_is_used(token: str, expected: float) -> None:
    """Как strtof: берётся самый длинный числовой префикс."""
    cmd = CommandBuilder().build(["prog", token])

    assert cmd.linear_velocity == expected


def test_build_with_unit_suffixes() -> None:
    assert CommandBuilder().build(["prog", "1.5m/s", "0.3rad"]) == MotionCommand(1.5, 0.3)


def test_build_is_idempotent() -> None:
    builder = CommandBuilder()
    args = ["prog", "2.5", "-0.7"]

    assert builder.build(args) == builder.build(args)


def test_custom_limits_and_defaults() -> None:
    """Лимиты и значения по умолчанию берутся из конфига."""
    cfg = RelayConfig(max_velocity=1.0, max_turn_rate=0.5, default_velocity=0.2, default_turn_rate=-0.1)
    builder = CommandBuilder(cfg)

    assert builder.build(["prog", "5", "-5"]) == MotionCommand(1.0, -0.5)
    assert builder.build(["prog", "x"]) == MotionCommand(0.2, -0.1)


def test_build_command_wrapper() -> None:
    assert build_command(["prog", "1.5", "0.3"]) == MotionCommand(1.5, 0.3)


def test_parse_token_sum_type() -> None:
    assert parse_token("1.5") == ParsedValue(1.5)
    assert parse_token("abc") == UseDefault("abc")
    assert parse_token(None) == UseDefault()
