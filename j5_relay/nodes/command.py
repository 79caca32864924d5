"""
Command line -> velocity command.

Parse failures never propagate: a token without a leading number falls
back to the configured default, and parsed values saturate at the
configured limits. Like C's strtof, only the longest numeric prefix is
read, so "1.5m/s" is 1.5 and "1,5" is 1.0.
"""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from j5_relay.config import RelayConfig, config as default_config
from j5_relay.messages import MotionCommand

_HEX = r"0x(?:[0-9a-f]+(?:\.[0-9a-f]*)?|\.[0-9a-f]+)(?:p[+-]?\d+)?"
_DEC = r"(?:\d+(?:\.\d*)?|\.\d+)(?:e[+-]?\d+)?"
_NUMBER_PREFIX = re.compile(
    rf"\s*(?P<sign>[+-]?)(?:(?P<hex>{_HEX})|(?P<dec>{_DEC})|(?P<inf>inf(?:inity)?)|(?P<nan>nan))",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedValue:
    value: float


@dataclass(frozen=True)
class UseDefault:
    token: Optional[str] = None


ParseResult = Union[ParsedValue, UseDefault]


def parse_token(token: Optional[str]) -> ParseResult:
    """
    Разобрать один аргумент командной строки.

    Args:
        token: Текст аргумента или None, если аргумента нет

    Returns:
        ParsedValue с числом из начала строки либо UseDefault,
        если строка не начинается с числа
    """
    if token is None:
        return UseDefault()
    match = _NUMBER_PREFIX.match(token)
    # nan has no meaningful clamp; +/-inf saturates below
    if match is None or match.group("nan"):
        return UseDefault(token)

    sign = match.group("sign")
    if match.group("hex"):
        value = float.fromhex(sign + match.group("hex"))
    elif match.group("dec"):
        value = float(sign + match.group("dec"))
    else:
        value = -math.inf if sign == "-" else math.inf
    return ParsedValue(value)


def clamp(value: float, bound: float) -> float:
    return max(-bound, min(bound, value))


class CommandBuilder:
    def __init__(self, config: RelayConfig = default_config.relay) -> None:
        self.config = config

    def _resolve(self, token: Optional[str], default: float, bound: float) -> float:
        result = parse_token(token)
        if isinstance(result, ParsedValue):
            return clamp(result.value, bound)
        return default

    def build(self, args: Sequence[str]) -> MotionCommand:
        """
        Собрать команду из аргументов процесса.

        Args:
            args: argv-подобная последовательность: args[0] - имя программы,
                args[1] - линейная скорость, args[2] - угловая скорость.
                Остальные аргументы игнорируются.

        Returns:
            MotionCommand в пределах лимитов из конфига
        """
        linear_token = args[1] if len(args) > 1 else None
        angular_token = args[2] if len(args) > 2 else None

        return MotionCommand(
            linear_velocity=self._resolve(
                linear_token, self.config.default_velocity, self.config.max_velocity
            ),
            angular_velocity=self._resolve(
                angular_token, self.config.default_turn_rate, self.config.max_turn_rate
            ),
        )


def build_command(args: Sequence[str], config: Optional[RelayConfig] = None) -> MotionCommand:
    return CommandBuilder(config or default_config.relay).build(args)
