from .bus import EventBus

# Process-wide bus shared by the relay, the simulator and the monitor
event_bus = EventBus()
