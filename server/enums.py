import enum
# =========================================================
# ENUMS
# =========================================================
class NotificationType(str, enum.Enum):
    created = "created"
    due_soon = "due_soon"
    overdue = "overdue"

class TaskPriority(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"
