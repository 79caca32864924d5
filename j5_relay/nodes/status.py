import logging

from j5_relay.messages import StatusReport

logger = logging.getLogger(__name__)

STATUS_FORMAT = "RCV Status: EXT_CONTROL: %i FAULT: %i CONTACTORS: %i VOLTAGE: %.1f"


def _fields(report: StatusReport) -> tuple[bool, bool, bool, float]:
    return (
        report.external_control_active,
        report.fault_active,
        report.contactors_closed,
        report.supply_voltage,
    )


class StatusObserver:
    """Logs every status report received from the J5. Never blocks."""

    def render(self, report: StatusReport) -> str:
        return STATUS_FORMAT % _fields(report)

    async def on_status(self, report: StatusReport) -> None:
        logger.info(STATUS_FORMAT, *_fields(report))
