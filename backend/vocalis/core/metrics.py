"""
Prometheus metrics configuration
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'vocalis_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'vocalis_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

# ============================================================================
# Reasoning Endpoint Metrics
# ============================================================================

llm_requests_total = Counter(
    'vocalis_llm_requests_total',
    'Total number of reasoning endpoint requests',
    ['status']  # success, unavailable, timeout
)

llm_request_duration_seconds = Histogram(
    'vocalis_llm_request_duration_seconds',
    'Reasoning endpoint request duration in seconds',
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0)
)

# ============================================================================
# Command Pipeline Metrics
# ============================================================================

intents_total = Counter(
    'vocalis_intents_total',
    'Intents returned by the command pipeline',
    ['kind', 'source']  # source: model, fallback, throttle
)


def render_latest() -> tuple:
    """Return (body, content_type) for the /metrics endpoint"""
    return generate_latest(), CONTENT_TYPE_LATEST
