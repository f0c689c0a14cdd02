from django.urls import path

from tickets.handlers import (
    EventDetailView,
    EventListView,
    IssueTicketView,
    TicketListView,
    VerifyView,
    WindowView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/tickets",
        IssueTicketView.as_view(),
        name="event-tickets",
    ),
    path("tickets", TicketListView.as_view(), name="ticket-list"),
    path("window", WindowView.as_view(), name="window"),
    path("verify", VerifyView.as_view(), name="verify"),
]
