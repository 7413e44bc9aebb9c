"""OpenTelemetry sink – pushes samples as gauges via OTLP/HTTP."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

from ..config import StorageConfig
from .base import BaseSink

logger = logging.getLogger(__name__)


class OtelSink(BaseSink):
    """Records each sample as an OpenTelemetry gauge.

    The gauge is named ``system_monitor.<collection>``. Dictionary payloads
    produce one observation per numeric field, labelled with ``field``.
    The SDK's ``PeriodicExportingMetricReader`` flushes to the endpoint.
    """

    def __init__(self, config: StorageConfig, reader: MetricReader | None = None) -> None:
        resource = Resource.create({SERVICE_NAME: config.otel_service_name})
        if reader is None:
            reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=f"{config.otel_endpoint.rstrip('/')}/v1/metrics"),
                export_interval_millis=config.otel_export_interval_ms,
            )
        self._provider = MeterProvider(resource=resource, metric_readers=[reader])
        self._meter = self._provider.get_meter("system_monitor")
        self._gauges: dict[str, Any] = {}

        logger.info(
            "OtelSink initialized → %s (service=%s)",
            config.otel_endpoint,
            config.otel_service_name,
        )

    def _get_gauge(self, collection: str) -> Any:
        if collection not in self._gauges:
            self._gauges[collection] = self._meter.create_gauge(
                name=f"system_monitor.{collection}",
                description=f"Samples from the {collection} monitor",
            )
        return self._gauges[collection]

    def store(self, collection: str, value: Any) -> None:
        gauge = self._get_gauge(collection)
        if isinstance(value, dict):
            for field, number in value.items():
                if isinstance(number, (int, float)):
                    gauge.set(number, attributes={"field": field})
        elif isinstance(value, (int, float)):
            gauge.set(value)
        else:
            logger.warning("Dropping non-numeric sample for %s: %r", collection, value)

    def shutdown(self) -> None:
        self._provider.shutdown()
        logger.info("OtelSink shut down")
