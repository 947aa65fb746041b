from peakstream.client.buffer import WindowBuffer
from peakstream.client.dashboard import ConnectionStatus, DisplayState, LogRenderer, SensorDashboard
from peakstream.client.projector import ChartView, SeriesPoint, project_view
from peakstream.client.transport import TRANSPORT_ERRORS, Channel, connect

__all__ = [
    "Channel",
    "ChartView",
    "ConnectionStatus",
    "DisplayState",
    "LogRenderer",
    "SensorDashboard",
    "SeriesPoint",
    "TRANSPORT_ERRORS",
    "WindowBuffer",
    "connect",
    "project_view",
]
