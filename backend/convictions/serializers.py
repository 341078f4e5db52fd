"""
Convictions app serializers.

Request serializers validate the JSON bodies of the custody endpoints;
response serializers render ``Custody`` and ``KeyDate`` records.  Field
names are camelCase to match the payloads the prisons integration sends
and expects.  No business logic lives here; see ``services.py``.
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from .models import Custody, KeyDate


# ═══════════════════════════════════════════════════════════════════
#  1. Request Serializers
# ═══════════════════════════════════════════════════════════════════


class UpdateCustodySerializer(serializers.Serializer):
    """Body of ``PUT .../custody/bookingNumber/{bookingNumber}``."""

    nomsPrisonInstitutionCode = serializers.CharField(
        max_length=20,
        help_text="NOMIS code of the prison the offender is now held at, e.g. 'MDI'.",
    )


class UpdateCustodyBookingNumberSerializer(serializers.Serializer):
    """Body of ``PUT .../custody/bookingNumber``."""

    bookingNumber = serializers.CharField(max_length=35, help_text="Prison booking number, e.g. '38339A'.")
    sentenceStartDate = serializers.DateField(
        help_text="Sentence start date as recorded by the prison; matched within a tolerance window.",
    )

    def validate_bookingNumber(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Booking number must not be blank.")
        return value


class CreateCustodyKeyDateSerializer(serializers.Serializer):
    """Body of the key date ``PUT`` endpoints."""

    date = serializers.DateField(help_text="The key date, ISO 8601.")


# ═══════════════════════════════════════════════════════════════════
#  2. Response Serializers
# ═══════════════════════════════════════════════════════════════════


class CodeDescriptionSerializer(serializers.Serializer):
    code = serializers.CharField()
    description = serializers.CharField()


class KeyDateSerializer(serializers.ModelSerializer):
    """A key date rendered as ``{"type": {"code", "description"}, "date"}``."""

    type = serializers.SerializerMethodField()
    date = serializers.DateField(source="key_date")

    class Meta:
        model = KeyDate
        fields = ["type", "date"]

    def get_type(self, obj: KeyDate) -> dict[str, str]:
        return {
            "code": obj.key_date_type.code_value,
            "description": obj.key_date_type.code_description,
        }


class CustodySerializer(serializers.ModelSerializer):
    """Read-only representation of a custody record."""

    convictionId = serializers.IntegerField(source="event_id", read_only=True)
    bookingNumber = serializers.CharField(source="prisoner_number", read_only=True)
    sentenceStartDate = serializers.DateField(source="event.sentence_start_date", read_only=True)
    institution = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    keyDates = KeyDateSerializer(source="key_dates", many=True, read_only=True)

    class Meta:
        model = Custody
        fields = [
            "convictionId",
            "bookingNumber",
            "sentenceStartDate",
            "institution",
            "status",
            "keyDates",
        ]

    def get_institution(self, obj: Custody) -> dict[str, Any] | None:
        if obj.institution is None:
            return None
        return {
            "code": obj.institution.code,
            "description": obj.institution.description,
        }

    def get_status(self, obj: Custody) -> dict[str, str] | None:
        if not obj.custodial_status:
            return None
        return {
            "code": obj.custodial_status,
            "description": obj.get_custodial_status_display(),
        }
