from nicestats.ingest.aggregator import Aggregator, MetricTable
from nicestats.ingest.parser import parse_datagram, parse_measurement
from nicestats.ingest.transport import TransportSetupError, UdpReceiver

__all__ = [
    "Aggregator",
    "MetricTable",
    "TransportSetupError",
    "UdpReceiver",
    "parse_datagram",
    "parse_measurement",
]
