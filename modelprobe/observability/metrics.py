"""Prometheus metrics for observability."""

from prometheus_client import Counter, Histogram, Gauge, Info, REGISTRY, generate_latest


class MetricsCollector:
    """Centralized metrics collection for ModelProbe."""

    def __init__(self):
        self.app_info = Info(
            "modelprobe_app",
            "Application information",
        )

        # Endpoint probes
        self.endpoint_probes = Counter(
            "modelprobe_endpoint_probes_total",
            "Endpoint probes by outcome",
            ["provider", "method", "path", "status"],
        )
        self.endpoint_probe_latency = Histogram(
            "modelprobe_endpoint_probe_latency_seconds",
            "Latency of a single endpoint probe",
            ["provider"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
        )

        # Validation runs
        self.validation_runs = Counter(
            "modelprobe_validation_runs_total",
            "Endpoint validation runs",
            ["provider", "outcome"],
        )
        self.validation_duration = Histogram(
            "modelprobe_validation_duration_seconds",
            "Wall time of a full validation run",
            ["provider"],
            buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
        )

        # Models
        self.model_tests = Counter(
            "modelprobe_model_tests_total",
            "Model smoke tests",
            ["provider", "status"],
        )
        self.model_test_latency = Histogram(
            "modelprobe_model_test_latency_seconds",
            "Latency of a model smoke test",
            ["provider"],
            buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
        )
        self.models_listed = Gauge(
            "modelprobe_models_listed",
            "Number of models returned by the last listing",
            ["provider"],
        )

    def set_app_info(self, version: str, providers: str):
        """Set application info labels."""
        self.app_info.info({
            "version": version,
            "providers": providers,
        })

    def record_endpoint_probe(
        self,
        provider: str,
        method: str,
        path: str,
        status: str,
        duration_seconds: float,
    ):
        """Record one endpoint probe."""
        self.endpoint_probes.labels(
            provider=provider, method=method, path=path, status=status
        ).inc()
        self.endpoint_probe_latency.labels(provider=provider).observe(duration_seconds)

    def record_validation(self, provider: str, outcome: str, duration_seconds: float):
        """Record a completed validation run."""
        self.validation_runs.labels(provider=provider, outcome=outcome).inc()
        self.validation_duration.labels(provider=provider).observe(duration_seconds)

    def record_model_test(self, provider: str, status: str, duration_seconds: float):
        """Record a model smoke test."""
        self.model_tests.labels(provider=provider, status=status).inc()
        self.model_test_latency.labels(provider=provider).observe(duration_seconds)

    def update_models_listed(self, provider: str, count: int):
        """Update models listed gauge."""
        self.models_listed.labels(provider=provider).set(count)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(REGISTRY)


# Global metrics instance
metrics = MetricsCollector()
