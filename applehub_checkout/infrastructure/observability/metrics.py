"""Prometheus metrics for coupon usage, orders, credit approvals and edge-function calls"""

from prometheus_client import Counter, Histogram

# Checkout metrics
coupon_validation_counter = Counter(
    "applehub_coupon_validations_total",
    "Coupon validations by outcome",
    ["outcome"],  # applied | inactive | not_yet_valid | expired | exhausted | below_minimum
)

order_counter = Counter(
    "applehub_orders_total",
    "Orders created by payment type",
    ["payment_type"],
)

order_total_histogram = Histogram(
    "applehub_order_total_brl",
    "Order totals in BRL",
    buckets=[100, 250, 500, 1000, 2500, 5000, 10000, 20000],
)

# Credit metrics
credit_approval_counter = Counter(
    "applehub_credit_approvals_total",
    "Credit analyses completed",
)

financing_installments_histogram = Histogram(
    "applehub_financing_installments",
    "Installment count chosen on confirmed financing plans",
    buckets=[1, 3, 6, 10, 12, 18, 24],
)

# Edge function metrics
edge_function_latency_histogram = Histogram(
    "edge_function_latency_seconds",
    "Edge function response time",
    ["function"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

edge_function_failure_counter = Counter(
    "edge_function_failures_total",
    "Failed edge function invocations",
    ["function"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_coupon_validation(reason: str | None) -> None:
    """Count a validation as applied, or under its rejection reason"""
    coupon_validation_counter.labels(outcome=reason or "applied").inc()


def record_order(payment_type: str, total: float) -> None:
    order_counter.labels(payment_type=payment_type).inc()
    order_total_histogram.observe(total)
