from django.contrib import admin

from tickets.models import Event, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["id", "address", "purchased_at", "scanned", "scanned_at"]
    readonly_fields = ["id", "purchased_at", "scanned_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "expires_at", "sold", "scanned", "created_at"]
    search_fields = ["name", "owner"]
    readonly_fields = ["sold", "scanned"]
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "address", "scanned", "purchased_at"]
    list_filter = ["scanned", "event"]
    search_fields = ["id", "address"]
    readonly_fields = ["scanned", "scanned_at"]
