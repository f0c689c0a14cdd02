"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import math
from datetime import datetime

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from tickets.conf import spotlight_setting
from tickets.domain import Event
from tickets.domain.errors import DomainError, ErrorCode
from tickets.handlers.serializers import (
    CreateEventSerializer,
    EventSerializer,
    IssueTicketSerializer,
    TicketSerializer,
    VerificationResultSerializer,
    VerifyRequestSerializer,
)
from tickets.services import EventService, VerificationService, WindowClock, issue_ticket
from tickets.services.event_service import canonical_address
from tickets.signals import ACTIVE_EVENTS_KEY, event_cache_key
from tickets.stores.django_store import DjangoTicketStore

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ADDRESS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MALFORMED_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_EXPIRED: status.HTTP_409_CONFLICT,
    ErrorCode.TICKET_ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_TICKET: status.HTTP_409_CONFLICT,
    ErrorCode.SIGNATURE_DECLINED: status.HTTP_409_CONFLICT,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def invalid_input(errors) -> Response:
    return Response(
        {"code": "INVALID_INPUT", "message": "Invalid request", "fields": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def active_list_timeout(events: list[Event], now: datetime) -> int:
    """Cache lifetime for the active list, ending when its first event expires."""
    timeout = spotlight_setting("CACHE_TIMEOUT")
    if events:
        remaining = math.ceil((events[0].expires_at - now).total_seconds())
        timeout = max(1, min(timeout, remaining))
    return timeout


def _clock() -> WindowClock:
    return WindowClock.from_settings()


def _event_service() -> EventService:
    return EventService(DjangoTicketStore(), _clock())


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        owner = request.query_params.get("owner")
        try:
            if owner:
                events = _event_service().list_events_owned_by(owner)
                return Response(EventSerializer(events, many=True).data)
            data = cache.get(ACTIVE_EVENTS_KEY)
            if data is None:
                clock = _clock()
                events = EventService(DjangoTicketStore(), clock).list_active_events()
                data = EventSerializer(events, many=True).data
                cache.set(ACTIVE_EVENTS_KEY, data, active_list_timeout(events, clock.now()))
        except DomainError as e:
            return error_response(e)
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer = CreateEventSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input(serializer.errors)
        try:
            event = _event_service().create_event(**serializer.validated_data)
        except DomainError as e:
            return error_response(e)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        key = event_cache_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                event = _event_service().get_event(event_id)
            except DomainError as e:
                return error_response(e)
            data = EventSerializer(event).data
            cache.set(key, data, spotlight_setting("CACHE_TIMEOUT"))
        return Response(data)


class IssueTicketView(APIView):
    """Handler for POST /api/events/{event_id}/tickets"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = IssueTicketSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input(serializer.errors)
        try:
            address = canonical_address(serializer.validated_data["address"])
            ticket, created = issue_ticket(DjangoTicketStore(), _clock(), event_id, address)
        except DomainError as e:
            return error_response(e)
        return Response(
            TicketSerializer(ticket).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class TicketListView(APIView):
    """Handler for GET /api/tickets?address="""

    def get(self, request: Request) -> Response:
        address = request.query_params.get("address")
        if not address:
            return invalid_input({"address": ["This query parameter is required."]})
        try:
            tickets = DjangoTicketStore().list_tickets_for_address(canonical_address(address))
        except DomainError as e:
            return error_response(e)
        return Response(TicketSerializer(tickets, many=True).data)


class WindowView(APIView):
    """Handler for GET /api/window"""

    def get(self, request: Request) -> Response:
        clock = _clock()
        return Response(
            {
                "window": clock.current_window(),
                "rotation_seconds": clock.rotation_seconds,
                "seconds_remaining": clock.seconds_until_rotation(),
            }
        )


class VerifyView(APIView):
    """Handler for POST /api/verify

    Verdicts are always 200; only store outages are errors.
    """

    def post(self, request: Request) -> Response:
        serializer = VerifyRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input(serializer.errors)
        service = VerificationService(
            DjangoTicketStore(),
            _clock(),
            window_tolerance=spotlight_setting("WINDOW_TOLERANCE"),
        )
        try:
            result = service.verify(
                serializer.validated_data["payload"],
                serializer.validated_data["event_id"],
            )
        except DomainError as e:
            return error_response(e)
        return Response(VerificationResultSerializer(result).data)
