from .user_model import User
from .property_model import Property
from .booking_request_model import BookingRequest
from .notification_model import Notification
from .rating_model import Rating
from .booking_reminder_model import BookingReminder

__all__ = ["User", "Property", "BookingRequest", "Notification", "Rating", "BookingReminder"]
