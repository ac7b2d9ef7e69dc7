from django.contrib import admin

from offers.models import Application, Offer

# Lifecycle state only changes through the API.
APPLICATION_STATE_FIELDS = [
    "musician_id",
    "status",
    "submitted_at",
    "score",
    "comment",
    "rated",
    "organizer_score",
    "organizer_comment",
    "organizer_rated",
]


class ApplicationInline(admin.TabularInline):
    model = Application
    extra = 0
    fields = APPLICATION_STATE_FIELDS
    readonly_fields = APPLICATION_STATE_FIELDS

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ["title", "genre", "location", "status", "has_accepted", "created_at"]
    list_filter = ["status", "genre"]
    search_fields = ["title", "location"]
    readonly_fields = ["status", "close_date", "has_accepted", "version"]
    inlines = [ApplicationInline]


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ["offer", "musician_id", "status", "score", "submitted_at"]
    list_filter = ["status", "offer__genre"]
    readonly_fields = ["offer", "position", *APPLICATION_STATE_FIELDS]

    def has_add_permission(self, request):
        return False
