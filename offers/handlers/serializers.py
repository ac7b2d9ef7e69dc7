"""Serializers for request validation and domain-to-response transformation."""

from rest_framework import serializers

from offers.domain import ApplicationStatus, OfferStatus


class ApplicationSerializer(serializers.Serializer):
    """Serializer for Application domain model."""

    id = serializers.UUIDField(source="id.value")
    musician_id = serializers.UUIDField(source="musician_id.value")
    motivation = serializers.CharField()
    submitted_at = serializers.DateTimeField()
    status = serializers.CharField(source="status.value")
    score = serializers.IntegerField(allow_null=True)
    comment = serializers.CharField(allow_null=True)
    rated = serializers.BooleanField()
    organizer_score = serializers.IntegerField(allow_null=True)
    organizer_comment = serializers.CharField(allow_null=True)
    organizer_rated = serializers.BooleanField()


class OfferSerializer(serializers.Serializer):
    """Serializer for Offer domain model."""

    id = serializers.UUIDField(source="id.value")
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    event_date = serializers.DateTimeField(allow_null=True)
    genre = serializers.CharField()
    location = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()
    close_date = serializers.DateTimeField(allow_null=True)
    has_accepted = serializers.BooleanField()
    applications = ApplicationSerializer(many=True)


class OfferSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    event_date = serializers.DateTimeField(allow_null=True)
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    status = serializers.CharField(source="status.value")


class MusicianApplicationSerializer(serializers.Serializer):
    offer = OfferSummarySerializer()
    application = ApplicationSerializer()


class ReceivedRatingSerializer(serializers.Serializer):
    offer_id = serializers.UUIDField(source="offer_id.value")
    offer_title = serializers.CharField()
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    score = serializers.IntegerField()
    comment = serializers.CharField(allow_null=True)


class OrganizerRatingSerializer(serializers.Serializer):
    offer_id = serializers.UUIDField(source="offer_id.value")
    offer_title = serializers.CharField()
    musician_id = serializers.UUIDField(source="musician_id.value")
    score = serializers.IntegerField()
    comment = serializers.CharField(allow_null=True)


class PastEventSerializer(serializers.Serializer):
    offer = OfferSummarySerializer()
    musician_ids = serializers.ListField(child=serializers.UUIDField())


class MusicianEventSerializer(serializers.Serializer):
    offer = OfferSummarySerializer()
    application_id = serializers.UUIDField(source="application.id.value")
    rated = serializers.BooleanField(source="application.organizer_rated")


# Request bodies


class OfferCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    event_date = serializers.DateTimeField(required=False, allow_null=True)
    genre = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class OfferUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    event_date = serializers.DateTimeField(required=False)
    genre = serializers.CharField(max_length=100, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)


class OfferStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in OfferStatus])
    close_date = serializers.DateTimeField(required=False, allow_null=True)


class ApplicationSubmitSerializer(serializers.Serializer):
    motivation = serializers.CharField(required=False, allow_blank=True, default="")


class ApplicationDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value]
    )
    close_offer = serializers.BooleanField(required=False, default=False)


class RatingSerializer(serializers.Serializer):
    # Range is enforced by the domain Score.
    score = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
