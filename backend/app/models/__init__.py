"""ORM models package export."""

from app.models.animal import Animal, HealthStatus, Species
from app.models.feeding import FeedingFrequency, FeedingRecord, FeedingSchedule
from app.models.reminder import FeedingReminder
from app.models.user import User
from app.models.vaccination import Vaccination, VaccinationStatus
from app.models.weight_record import WeightRecord

__all__ = [
    "Animal",
    "FeedingFrequency",
    "FeedingRecord",
    "FeedingReminder",
    "FeedingSchedule",
    "HealthStatus",
    "Species",
    "User",
    "Vaccination",
    "VaccinationStatus",
    "WeightRecord",
]
