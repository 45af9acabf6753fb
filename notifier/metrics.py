from prometheus_client import Counter, Histogram

NOTIFICATIONS_EMITTED = Counter(
    "notifier_notifications_emitted_total",
    "Notifications persisted by the emitter",
    ["type"]
)

DUPLICATES_SUPPRESSED = Counter(
    "notifier_duplicates_suppressed_total",
    "Emissions skipped because the (task, type) notification already existed",
    ["type"]
)

SCAN_FAILURES = Counter(
    "notifier_scan_failures_total",
    "Failures during a scan cycle",
    ["stage"]
)

NOTIFICATIONS_SWEPT = Counter(
    "notifier_notifications_swept_total",
    "Notifications deleted by the retention sweeper"
)

SCAN_DURATION = Histogram(
    "notifier_scan_duration_seconds",
    "Wall time of one scan cycle"
)
