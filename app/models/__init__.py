from .user import User
from .profile import Profile, ROLE_ADMIN, ROLE_TRAINEE, ROLE_CHOICES
from .feedback import Feedback
from .admin_response import (
    AdminResponse,
    STATUS_PENDING,
    STATUS_REPLIED,
    STATUS_ACKNOWLEDGED,
    STORED_STATUSES,
)

__all__ = [
    "User",
    "Profile",
    "Feedback",
    "AdminResponse",
    "ROLE_ADMIN",
    "ROLE_TRAINEE",
    "ROLE_CHOICES",
    "STATUS_PENDING",
    "STATUS_REPLIED",
    "STATUS_ACKNOWLEDGED",
    "STORED_STATUSES",
]
