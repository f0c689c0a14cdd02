"""Operator terminal: verify a pasted credential against the selected event.

    python manage.py scan_ticket --event <event_id> '<payload>'
    echo '<payload>' | python manage.py scan_ticket --event <event_id>
"""

import sys

from django.core.management.base import BaseCommand, CommandError

from tickets.conf import spotlight_setting
from tickets.domain import Verdict
from tickets.domain.errors import StoreUnavailableError
from tickets.services import VerificationService, WindowClock
from tickets.stores.django_store import DjangoTicketStore


class Command(BaseCommand):
    help = "Verify a scanned ticket payload at a gate and record the entry."

    def add_arguments(self, parser):
        parser.add_argument("--event", required=True, help="Event selected at this gate")
        parser.add_argument("payload", nargs="?", help="Payload text; read from stdin if omitted")

    def handle(self, *args, **options):
        payload = options["payload"]
        if payload is None:
            payload = sys.stdin.read()
        service = VerificationService(
            DjangoTicketStore(),
            WindowClock.from_settings(),
            window_tolerance=spotlight_setting("WINDOW_TOLERANCE"),
        )
        try:
            result = service.verify(payload.strip(), options["event"])
        except StoreUnavailableError as e:
            raise CommandError(e.message) from e

        line = f"{result.verdict.value}: {result.message}"
        if result.verdict is Verdict.GRANTED:
            self.stdout.write(self.style.SUCCESS(line))
            return
        if result.verdict is Verdict.ALREADY_USED:
            self.stdout.write(self.style.ERROR(line))
        else:
            self.stdout.write(self.style.WARNING(line))
        raise CommandError(f"Entry refused ({result.verdict.value})", returncode=2)
