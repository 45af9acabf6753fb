"""
Scheduler Configuration for Due-Date Notifications

Defaults for scan cadence, time windows and retention.
"""

# How often the due-date scan runs (in seconds)
SCAN_INTERVAL_SECONDS = 300  # Every 5 minutes

# Tasks due within this many hours are "due soon"
DUE_SOON_WINDOW_HOURS = 24

# Notifications older than this are swept
RETENTION_DAYS = 30

# How often the retention sweep runs (in hours)
SWEEP_INTERVAL_HOURS = 24

# Store timeouts (in seconds)
WRITE_TIMEOUT_SECONDS = 5
FETCH_TIMEOUT_SECONDS = 30

# Consecutive fetch failures before the scan logs at CRITICAL
FETCH_FAILURE_ESCALATION = 3

# Concurrent scan runs APScheduler will allow before skipping a tick
SCAN_MAX_INSTANCES = 1
