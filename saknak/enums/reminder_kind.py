from enum import Enum


class ReminderKind(str, Enum):
    """Kinds of reminders the scheduled jobs send, used as de-duplication keys"""

    RENT_UPCOMING = "rent_upcoming"
    RENT_URGENT = "rent_urgent"
    RENT_OVERDUE_STUDENT = "rent_overdue_student"
    RENT_OVERDUE_OWNER = "rent_overdue_owner"
    RATE_OWNER = "rate_owner"
    RATE_STUDENT = "rate_student"

    def __str__(self):
        return self.value
