"""
Django Listman - Contact membership & automation enrollment.

Usage:
    from listman.services import membership
    from listman import Gates, ListmanError

    membership.add("c-001", "newsletter", source="form")
    result = membership.reconcile_set("c-001", ["newsletter", "onboarding"])
    result.added_automations  # ["welcome-flow"]

    # HTTP-style envelope
    from listman.actions import dispatch
    dispatch({"contactId": "c-001", "action": "removeFromList", "data": {"listId": "newsletter"}})
"""


def __getattr__(name):
    if name == "Gates":
        from listman.gates import Gates

        return Gates
    if name == "ListmanError":
        from listman.exceptions import ListmanError

        return ListmanError
    if name == "initial_timing":
        from listman.scheduling import initial_timing

        return initial_timing
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Gates", "ListmanError", "initial_timing"]
__version__ = "0.1.0"
