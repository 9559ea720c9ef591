"""Pytest fixtures for Listman tests."""

import pytest

from listman.models import (
    Automation,
    AutomationStep,
    Contact,
    MailingList,
    StepType,
    WaitUnit,
)


@pytest.fixture
def automation_a(db):
    """Automation that starts immediately with a mail step."""
    automation = Automation.objects.create(code="automation-a", name="Welcome")
    AutomationStep.objects.create(
        automation=automation,
        step_count=1,
        step_type=StepType.SEND_MAIL,
        title="Welcome mail",
    )
    return automation


@pytest.fixture
def automation_b(db):
    """Automation whose first step waits two days."""
    automation = Automation.objects.create(code="automation-b", name="Nurture")
    AutomationStep.objects.create(
        automation=automation,
        step_count=1,
        step_type=StepType.WAIT_SUBSCRIBER,
        title="Wait",
        wait_duration=2,
        wait_unit=WaitUnit.DAYS,
    )
    AutomationStep.objects.create(
        automation=automation,
        step_count=2,
        step_type=StepType.SEND_MAIL,
        title="Follow-up",
    )
    return automation


@pytest.fixture
def list_one(db, automation_a):
    """L1 -> automation A."""
    return MailingList.objects.create(code="L1", name="List One", automation=automation_a)


@pytest.fixture
def list_two(db, automation_b):
    """L2 -> automation B."""
    return MailingList.objects.create(code="L2", name="List Two", automation=automation_b)


@pytest.fixture
def list_three(db, automation_a):
    """L3 -> automation A (shared with L1)."""
    return MailingList.objects.create(code="L3", name="List Three", automation=automation_a)


@pytest.fixture
def list_plain(db):
    """List without automation."""
    return MailingList.objects.create(code="plain", name="Plain List")


@pytest.fixture
def contact(db):
    """Contact with no memberships."""
    return Contact.objects.create(
        code="c-001",
        email="jane@example.com",
        full_name="Jane Doe",
    )
