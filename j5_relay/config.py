from pydantic import BaseModel, ConfigDict, Field, model_validator


class RelayConfig(BaseModel):
    """Настройки ретранслятора команд J5"""
    model_config = ConfigDict(frozen=True)

    # Топики (не менять, их слушает J5)
    command_topic: str = Field("/j5_cmd", description="Топик команд скорости")
    status_topic: str = Field("/j5_status", description="Топик статуса J5")

    # Частота публикации (J5 требует не меньше 10 Гц)
    publish_rate_hz: int = Field(10, ge=1, le=100, description="Частота публикации команд (Hz)")

    # Значения по умолчанию
    default_velocity: float = Field(0.0, description="Линейная скорость по умолчанию (м/с)")
    default_turn_rate: float = Field(0.0, description="Угловая скорость по умолчанию (рад/с)")

    # Лимиты (для безопасности, не отражают реальные возможности платформы)
    max_velocity: float = Field(3.0, gt=0.0, description="Максимальная линейная скорость (м/с)")
    max_turn_rate: float = Field(1.0, gt=0.0, description="Максимальная угловая скорость (рад/с)")

    # Логирование
    log_commands: bool = Field(True, description="Логировать каждую отправленную команду")

    @model_validator(mode="after")
    def _defaults_within_limits(self) -> "RelayConfig":
        if abs(self.default_velocity) > self.max_velocity:
            raise ValueError("default_velocity exceeds max_velocity")
        if abs(self.default_turn_rate) > self.max_turn_rate:
            raise ValueError("default_turn_rate exceeds max_turn_rate")
        return self

    @property
    def period_s(self) -> float:
        return 1.0 / self.publish_rate_hz


class SimulatorConfig(BaseModel):
    """Настройки симулятора J5 (вместо реальной машины)"""
    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(True, description="Запускать симулятор статуса")
    status_rate_hz: float = Field(1.0, gt=0.0, le=50.0, description="Частота публикации статуса (Hz)")
    command_timeout_s: float = Field(0.5, gt=0.0, le=5.0, description="Через сколько команда считается устаревшей")
    nominal_voltage: float = Field(48.0, gt=0.0, description="Напряжение питания без нагрузки (В)")
    voltage_sag_per_mps: float = Field(0.5, ge=0.0, description="Просадка напряжения на 1 м/с (В)")
    frame_id: str = Field("j5", description="frame_id в заголовке статуса")


class ServerConfig(BaseModel):
    """Настройки веб-монитора"""
    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="Адрес для привязки сервера")
    port: int = Field(8000, ge=1, le=65535, description="Порт сервера")
    status_queue_size: int = Field(16, ge=1, le=1024, description="Очередь статусов на одного клиента")


class LoggingConfig(BaseModel):
    """Настройки логирования"""
    model_config = ConfigDict(frozen=True)

    level: str = Field("INFO", description="Уровень логов пакета j5_relay")
    format: str = Field("%(levelname)s:     %(name)s - %(message)s", description="Формат строки лога")


class Config(BaseModel):
    """Главная конфигурация приложения"""
    model_config = ConfigDict(frozen=True)

    relay: RelayConfig = RelayConfig()
    simulator: SimulatorConfig = SimulatorConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()


# Глобальный экземпляр конфигурации
config = Config()
