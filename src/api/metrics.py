from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # Already registered: hand back the existing collector
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "growcycle_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "growcycle_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

CALENDAR_TASKS_TOTAL = get_or_create_metric(
    "growcycle_calendar_tasks_total",
    "Calendar tasks emitted, by kind",
    Counter,
    labelnames=["kind"],
)

PLANS_TOTAL = get_or_create_metric(
    "growcycle_plans_total",
    "Planner invocations, by planner and outcome",
    Counter,
    labelnames=["planner", "outcome"],
)
