"""
Wait-step scheduler.

Computes where a freshly enrolled contact starts in an automation. A
leading waitSubscriber step is satisfied by delaying the first run, so the
contact resumes at step 2 once the wait elapses.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.utils import timezone

from listman.models.automation import StepType, WaitUnit


@dataclass(frozen=True)
class StepTiming:
    """Initial position of a contact in an automation."""

    next_step_time: datetime
    step_number: int


def _field(step, name: str):
    if isinstance(step, dict):
        return step.get(name)
    return getattr(step, name, None)


def wait_delta(duration, unit: str | None) -> timedelta | None:
    """timedelta for a wait step, or None if duration/unit are unusable."""
    from listman.conf import listman_settings

    if not duration or not unit:
        return None
    try:
        duration = int(duration)
    except (TypeError, ValueError):
        return None
    if duration <= 0:
        return None

    if unit == WaitUnit.SECONDS:
        return timedelta(seconds=duration)
    if unit == WaitUnit.MINUTES:
        return timedelta(minutes=duration)
    if unit == WaitUnit.HOURS:
        return timedelta(hours=duration)
    if unit == WaitUnit.DAYS:
        return timedelta(days=duration)
    if unit == WaitUnit.WEEKS:
        return timedelta(weeks=duration)
    if unit == WaitUnit.MONTHS:
        return timedelta(days=duration * listman_settings.MONTH_DAYS)
    return None


def initial_timing(steps: Iterable, now: datetime | None = None) -> StepTiming:
    """
    Initial timing for an automation's steps.

    Args:
        steps: AutomationStep instances or dicts with step_count, step_type,
            wait_duration and wait_unit
        now: Reference time (defaults to timezone.now())

    Returns:
        StepTiming(now, 1) unless step 1 is a usable waitSubscriber step,
        in which case StepTiming(now + wait, 2)
    """
    now = now or timezone.now()

    first = next((s for s in steps if _field(s, "step_count") == 1), None)
    if first is None or _field(first, "step_type") != StepType.WAIT_SUBSCRIBER:
        return StepTiming(next_step_time=now, step_number=1)

    delta = wait_delta(_field(first, "wait_duration"), _field(first, "wait_unit"))
    if delta is None:
        return StepTiming(next_step_time=now, step_number=1)

    return StepTiming(next_step_time=now + delta, step_number=2)
