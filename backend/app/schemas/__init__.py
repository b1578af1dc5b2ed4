"""Schema exports."""

from app.schemas.animal import AnimalCreate, AnimalRead, AnimalUpdate
from app.schemas.auth import RegistrationResponse, Token
from app.schemas.feeding import (
    FeedingRecordCreate,
    FeedingRecordRead,
    FeedingReminderRead,
    FeedingScheduleCreate,
    FeedingScheduleRead,
    FeedingScheduleUpdate,
    FeedingStatusEntry,
    FeedingStatusResponse,
)
from app.schemas.reporting import (
    FeedingReportEntry,
    GrowthEntry,
    HealthSummary,
    WeightPoint,
    WeightRecordCreate,
    WeightRecordRead,
)
from app.schemas.user import ProfileUpdate, UserCreate, UserRead
from app.schemas.vaccination import (
    OverdueUpdateResponse,
    VaccinationComplete,
    VaccinationCreate,
    VaccinationRead,
    VaccinationUpdate,
)

__all__ = [
    "AnimalCreate",
    "AnimalRead",
    "AnimalUpdate",
    "FeedingRecordCreate",
    "FeedingRecordRead",
    "FeedingReminderRead",
    "FeedingReportEntry",
    "FeedingScheduleCreate",
    "FeedingScheduleRead",
    "FeedingScheduleUpdate",
    "FeedingStatusEntry",
    "FeedingStatusResponse",
    "GrowthEntry",
    "HealthSummary",
    "OverdueUpdateResponse",
    "ProfileUpdate",
    "RegistrationResponse",
    "Token",
    "UserCreate",
    "UserRead",
    "VaccinationComplete",
    "VaccinationCreate",
    "VaccinationRead",
    "VaccinationUpdate",
    "WeightPoint",
    "WeightRecordCreate",
    "WeightRecordRead",
]
