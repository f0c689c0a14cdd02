from tickets.handlers.views import (
    EventDetailView,
    EventListView,
    IssueTicketView,
    TicketListView,
    VerifyView,
    WindowView,
)

__all__ = [
    "EventListView",
    "EventDetailView",
    "IssueTicketView",
    "TicketListView",
    "WindowView",
    "VerifyView",
]
