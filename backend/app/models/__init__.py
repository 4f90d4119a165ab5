"""SQLAlchemy models package."""
from app.models.user import User
from app.models.parent import Parent
from app.models.teacher import Teacher, TeacherChild
from app.models.child import Child
from app.models.fee import Fee
from app.models.notification import Notification
from app.models.holiday import Holiday
from app.models.event import Event, EventParticipant
from app.models.attendance import Attendance
from app.models.message import Message
from app.models.activity import DailyActivity
from app.models.leave import LeaveRequest

__all__ = [
    "User",
    "Parent",
    "Teacher",
    "Child",
    "Fee",
    "Notification",
    "Holiday",
    "Event",
    "EventParticipant",
    "Attendance",
    "Message",
    "TeacherChild",
    "DailyActivity",
    "LeaveRequest",
]
