"""Listman services.

- membership: list subscriptions, automation enrollment, engagement
- contact: registration, soft and hard deletion
"""

from listman.services import membership
from listman.services import contact

__all__ = ["membership", "contact"]
