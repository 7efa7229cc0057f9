"""SQLAlchemy models."""

from econwatch.models.data import Data
from econwatch.models.data_history import DataHistory
from econwatch.models.job_run import JobRun
from econwatch.models.notification import NotificationRecord
from econwatch.models.recipient import Recipient
from econwatch.models.threshold import ThresholdDefinition
from econwatch.models.threshold_recipient import ThresholdRecipient
from econwatch.models.user import User

__all__ = [
    "Data",
    "DataHistory",
    "JobRun",
    "NotificationRecord",
    "Recipient",
    "ThresholdDefinition",
    "ThresholdRecipient",
    "User",
]
