from fastapi import APIRouter
from starlette.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST, Counter

router = APIRouter()

# incremented by the check-in route
CHECKIN_REQUESTS = Counter("checkin_requests_total", "Check-in requests received")
CHECKIN_SUCCESSES = Counter("checkin_success_total", "Check-ins recorded as success")
CHECKIN_FAILURES = Counter("checkin_failed_total", "Check-ins recorded as failed")
CHECKIN_OUT_OF_RANGE = Counter(
    "checkin_out_of_range_total", "Check-ins captured too far from the event"
)


@router.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
