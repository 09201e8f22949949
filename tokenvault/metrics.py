"""
Prometheus metrics for TokenVault service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
import psutil
import os


class Metrics:
    """
    Centralized metrics for TokenVault service.
    """

    def __init__(self, service_name: str = "tokenvault", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Business Metrics - TokenVault specific
        self.tokens_created_total = Counter(
            "tokenvault_tokens_created_total",
            "Total tokens created",
            ["token_type"],
            registry=self.registry,
        )

        self.token_reads_total = Counter(
            "tokenvault_token_reads_total",
            "Total token reads by view",
            ["view"],
            registry=self.registry,
        )

        self.tokens_deleted_total = Counter(
            "tokenvault_tokens_deleted_total",
            "Total tokens deleted",
            registry=self.registry,
        )

        self.operation_errors_total = Counter(
            "tokenvault_operation_errors_total",
            "Failed vault operations",
            ["operation", "error"],
            registry=self.registry,
        )

        # System Metrics
        self.process_memory_bytes = Gauge(
            "process_resident_memory_bytes",
            "Resident memory size in bytes",
            ["service"],
            registry=self.registry,
        )

        self.process_open_fds = Gauge(
            "process_open_fds",
            "Number of open file descriptors",
            ["service"],
            registry=self.registry,
        )

        self.update_system_metrics()

    def update_system_metrics(self):
        """Update system metrics from psutil."""
        process = psutil.Process(os.getpid())
        self.process_memory_bytes.labels(service=self.service_name).set(process.memory_info().rss)

        # num_fds() is not available on Windows
        if hasattr(process, "num_fds"):
            self.process_open_fds.labels(service=self.service_name).set(process.num_fds())

    def record_token_created(self, token_type: str):
        """Record a token creation."""
        self.tokens_created_total.labels(token_type=token_type or "unspecified").inc()

    def record_token_read(self, view: str):
        """Record a token read ("encrypted" or "decrypted")."""
        self.token_reads_total.labels(view=view).inc()

    def record_token_deleted(self):
        """Record a token deletion."""
        self.tokens_deleted_total.inc()

    def record_operation_error(self, operation: str, error: str):
        """Record a failed vault operation."""
        self.operation_errors_total.labels(operation=operation, error=error).inc()
