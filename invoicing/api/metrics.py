"""Prometheus metrics for API service.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- Document generation metrics
- Email delivery metrics

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Document generation metrics
documents_generated_total = Counter(
    "documents_generated_total",
    "Total PDF documents generated",
    ["document_type", "status"],  # status: success, failed
)

document_generation_duration_seconds = Histogram(
    "document_generation_duration_seconds",
    "PDF generation duration in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

document_size_bytes = Histogram(
    "document_size_bytes",
    "Generated PDF size in bytes",
    buckets=(1024, 4096, 10240, 51200, 102400, 1048576),  # 1KB to 1MB
)

# Email delivery metrics
emails_sent_total = Counter(
    "emails_sent_total",
    "Total emails handed to the SMTP server",
    ["template", "status"],  # template: invoice, receipt, admission
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
