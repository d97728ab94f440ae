from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional, Protocol, TextIO

from nicestats.common.logging import setup_logging
from nicestats.common.metrics import MetricsEmitter
from nicestats.common.pipeline import Display, Pipeline
from nicestats.common.settings import DISPLAY_CURSES, Settings, default_settings
from nicestats.display.renderer import CursesDisplay, StreamDisplay
from nicestats.ingest.aggregator import Aggregator
from nicestats.ingest.transport import TransportSetupError, UdpReceiver


class Receiver(Protocol):
    def open(self) -> None: ...

    def receive(self) -> bytes: ...

    def close(self) -> None: ...


def build_display(settings: Settings, stdout: Optional[TextIO] = None) -> Display:
    stdout = stdout if stdout is not None else sys.stdout
    if settings.display == DISPLAY_CURSES and stdout.isatty():
        return CursesDisplay()
    # Piped or redirected output gets plain frames without escape codes.
    return StreamDisplay(stream=stdout, clear=stdout.isatty())


@dataclass
class Collector:
    settings: Settings = field(default_factory=default_settings)
    receiver: Optional[Receiver] = None
    display: Optional[Display] = None
    pipeline: Optional[Pipeline] = field(default=None, init=False)

    def run(self) -> None:
        display = self.display if self.display is not None else build_display(self.settings)
        owns_terminal = isinstance(display, CursesDisplay)
        logger = setup_logging(
            self.settings.app_log_path,
            self.settings.log_level,
            stream=not owns_terminal,
        )
        metrics = MetricsEmitter(self.settings.metrics_log_path, echo=not owns_terminal)
        receiver = self.receiver if self.receiver is not None else UdpReceiver(logger=logger)
        self.pipeline = Pipeline(aggregator=Aggregator(logger=logger), display=display)
        display_open = False
        try:
            logger.info("collector_start", extra={"display": self.settings.display})
            try:
                receiver.open()
            except TransportSetupError as exc:
                logger.error("transport_setup_failed", extra={"error": str(exc)})
                raise
            display.open()
            display_open = True
            self._run_loop(receiver, self.pipeline, logger)
        except KeyboardInterrupt:
            logger.info("shutdown_requested")
        finally:
            if display_open:
                display.close()
            receiver.close()
            self._emit_totals(metrics)
            metrics.close()

    def _run_loop(
        self, receiver: Receiver, pipeline: Pipeline, logger: logging.Logger
    ) -> None:
        logger.info("loop_start")
        while True:
            data = receiver.receive()
            pipeline.process_datagram(data)

    def _emit_totals(self, metrics: MetricsEmitter) -> None:
        if self.pipeline is None:
            return
        aggregator = self.pipeline.aggregator
        metrics.emit("datagrams_total", aggregator.datagrams_total)
        metrics.emit("malformed_total", aggregator.malformed_total)
        metrics.emit("metric_keys", len(aggregator.table))
