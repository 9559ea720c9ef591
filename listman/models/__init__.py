"""Listman models."""

from listman.models.automation import Automation, AutomationStep, StepType, WaitUnit
from listman.models.mailing_list import MailingList
from listman.models.contact import Contact
from listman.models.association import (
    AutomationAssociation,
    ListAssociation,
    Source,
)
from listman.models.history import AutomationHistory, AutomationStatus, ListHistory
from listman.models.stats import GlobalStats

__all__ = [
    # Automation Directory
    "Automation",
    "AutomationStep",
    "StepType",
    "WaitUnit",
    # List Directory
    "MailingList",
    # Contact Store
    "Contact",
    "ListAssociation",
    "AutomationAssociation",
    "Source",
    "ListHistory",
    "AutomationHistory",
    "AutomationStatus",
    # Platform counters
    "GlobalStats",
]
