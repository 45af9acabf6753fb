from .classifier import LifecycleState, Classification, ClassificationError, classify, classify_task
from .gate import should_emit
from .emitter import AlreadyExists, emit
from .scan import ScanCycle, ScanReport
from .sweeper import RetentionSweeper, sweep
from .scheduler import NotificationScheduler
