"""CloudWatch custom metrics for backend calls, generation calls and tools.

Every external call the copilot makes (chat backend, artifact drafting,
media generation) and every tool execution is recorded as a count plus a
latency data point, dimensioned by ``Service`` and ``Operation``.

* Data points are buffered in memory under a lock.
* With ``METRICS_ENABLED=true`` a daemon thread pushes the buffer to
  CloudWatch every ``FLUSH_INTERVAL_SECONDS``; otherwise points are only
  logged at DEBUG level and dropped on flush.

Usage
-----
>>> from velocity.services.metrics import metrics
>>> with metrics.timer("anthropic", "chat_completion"):
...     response = await llm.ainvoke(messages)
>>> metrics.record_failure("tool", "getPricing", error_type="ValueError")
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "VelocityCopilot"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # PutMetricData limit per call


class MetricsClient:
    """Buffered CloudWatch publisher."""

    def __init__(self, enabled: bool | None = None) -> None:
        if enabled is None:
            enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._enabled = enabled
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None

        if self._enabled:
            self._start_flush_thread()

    def _get_cw_client(self):
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Recording ─────────────────────────────────────────────────────

    def record_success(self, service: str, operation: str, latency_ms: float) -> None:
        self._record(service, operation, "success", latency_ms)

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        self._record(service, operation, "failure", latency_ms, error_type=error_type)

    @contextmanager
    def timer(self, service: str, operation: str) -> Iterator[None]:
        """Time the enclosed block and record its outcome.

        Exceptions are recorded as failures and re-raised unchanged.
        """
        t0 = time.perf_counter()
        try:
            yield
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            self.record_failure(service, operation, type(exc).__name__, latency_ms=elapsed)
            raise
        elapsed = (time.perf_counter() - t0) * 1000
        self.record_success(service, operation, latency_ms=elapsed)

    def _record(
        self,
        service: str,
        operation: str,
        outcome: str,
        latency_ms: float,
        *,
        error_type: str | None = None,
    ) -> None:
        now = datetime.now(UTC)
        dims = [
            {"Name": "Service", "Value": service},
            {"Name": "Operation", "Value": operation},
        ]
        points = [
            {
                "MetricName": "Calls/Count",
                "Dimensions": dims + [{"Name": "Outcome", "Value": outcome}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            },
        ]
        if error_type is not None:
            points.append(
                {
                    "MetricName": "Calls/Errors",
                    "Dimensions": dims + [{"Name": "ErrorType", "Value": error_type}],
                    "Timestamp": now,
                    "Value": 1,
                    "Unit": "Count",
                }
            )
        if latency_ms > 0:
            points.append(
                {
                    "MetricName": "Calls/Latency",
                    "Dimensions": dims,
                    "Timestamp": now,
                    "Value": latency_ms,
                    "Unit": "Milliseconds",
                }
            )

        with self._lock:
            self._buffer.extend(points)
        logger.debug(
            "Metric: %s %s %s latency=%.1fms%s",
            service, operation, outcome, latency_ms,
            f" error={error_type}" if error_type else "",
        )

    # ── Flushing ──────────────────────────────────────────────────────

    def flush(self) -> int:
        """Send buffered points to CloudWatch.  Returns the number sent."""
        with self._lock:
            if not self._buffer:
                return 0
            batch = self._buffer[:]
            self._buffer.clear()

        if not self._enabled:
            logger.debug("Metrics flush skipped (not enabled): %d items", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for i in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[i : i + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    def _start_flush_thread(self) -> None:
        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        t = threading.Thread(target=_loop, daemon=True, name="metrics-flush")
        t.start()
        atexit.register(self.flush)
        logger.info("Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS)


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
