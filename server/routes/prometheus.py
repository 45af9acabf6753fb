import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Request, Response

router = APIRouter()

API_REQUEST_COUNT = Counter(
    "api_requests_total",
    "Notification/task API requests",
    ["method", "route", "http_status"]
)

API_REQUEST_LATENCY = Histogram(
    "api_request_duration_seconds",
    "Notification/task API request latency",
    ["route"]
)

API_EXCEPTION_COUNT = Counter(
    "api_exceptions_total",
    "Unhandled exceptions in API handlers",
    ["route"]
)


def _route_label(request: Request) -> str:
    # Use the route template so ids don't explode label cardinality
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@router.get("/")
def metrics():
    """Scheduler and API metrics in Prometheus text format."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


async def metrics_middleware(request: Request, call_next):
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception:
        API_EXCEPTION_COUNT.labels(route=_route_label(request)).inc()
        raise

    route = _route_label(request)
    API_REQUEST_LATENCY.labels(route=route).observe(time.time() - start_time)
    API_REQUEST_COUNT.labels(
        method=request.method,
        route=route,
        http_status=response.status_code
    ).inc()

    return response
