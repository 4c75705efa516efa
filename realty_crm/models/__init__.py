"""CRM models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, CreatedAtMixin, TimestampMixin
from .user import User, UserSettings
from .contact import Contact
from .deal import Deal, DealDocument
from .task import Task, CustomTaskType
from .appointment import Appointment, AppointmentType
from .property import Property, PropertyImage, PropertyType
from .communication import Communication
from .activity import Activity

__all__ = [
    "Base",
    "UUIDMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "User",
    "UserSettings",
    "Contact",
    "Deal",
    "DealDocument",
    "Task",
    "CustomTaskType",
    "Appointment",
    "AppointmentType",
    "Property",
    "PropertyImage",
    "PropertyType",
    "Communication",
    "Activity",
]
