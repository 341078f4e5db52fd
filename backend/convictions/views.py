"""
Convictions app views.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Domain failures surface as ``core.domain.exceptions`` and are rendered by
the global exception handler, so no view catches them.

Views
-----
- ``CustodyByBookingNumberView``  — GET custody / PUT prison location.
- ``CustodyBookingNumberView``    — PUT booking number.
- ``KeyDateByNomsNumberView``     — PUT key date on active custodial events.
- ``KeyDateByConvictionView``     — PUT key date on one conviction.
- ``CustodyByConvictionView``     — GET custody of one conviction.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from offenders.services import OffenderQueryService

from .serializers import (
    CreateCustodyKeyDateSerializer,
    CustodySerializer,
    KeyDateSerializer,
    UpdateCustodyBookingNumberSerializer,
    UpdateCustodySerializer,
)
from .services import (
    BookingNumberService,
    CustodyKeyDateService,
    CustodyQueryService,
    CustodyUpdateService,
)

logger = logging.getLogger(__name__)

_NOT_FOUND = OpenApiResponse(description="Offender, conviction or prison not found.")


class CustodyByBookingNumberView(APIView):
    """
    ``/api/offenders/nomsNumber/{noms_number}/custody/bookingNumber/{booking_number}``
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get custody by booking number",
        description="Custody of the single active custodial sentence carrying the booking number.",
        responses={200: CustodySerializer, 404: _NOT_FOUND, 409: OpenApiResponse(description="Duplicate offenders.")},
        tags=["Custody"],
    )
    def get(self, request: Request, noms_number: str, booking_number: str) -> Response:
        custody = CustodyQueryService.get_custody_by_booking_number(noms_number, booking_number)
        return Response(CustodySerializer(custody).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update prison location",
        description=(
            "Record a prison-to-prison transfer.  Moves every eligible active "
            "custodial sentence to the institution, setting offenders sentenced "
            "to custody as in custody.  Idempotent: a repeat returns the "
            "unchanged custody."
        ),
        request=UpdateCustodySerializer,
        responses={200: CustodySerializer, 404: _NOT_FOUND},
        tags=["Custody"],
    )
    def put(self, request: Request, noms_number: str, booking_number: str) -> Response:
        serializer = UpdateCustodySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        custody = CustodyUpdateService.update_prison_location(
            noms_number,
            booking_number,
            serializer.validated_data["nomsPrisonInstitutionCode"],
            requesting_user=request.user,
        )
        return Response(CustodySerializer(custody).data, status=status.HTTP_200_OK)


class CustodyBookingNumberView(APIView):
    """``/api/offenders/nomsNumber/{noms_number}/custody/bookingNumber``"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update booking number",
        description=(
            "Assign the prison booking number to the active custodial sentence "
            "whose start date is closest to ``sentenceStartDate``."
        ),
        request=UpdateCustodyBookingNumberSerializer,
        responses={200: CustodySerializer, 404: _NOT_FOUND},
        tags=["Custody"],
    )
    def put(self, request: Request, noms_number: str) -> Response:
        serializer = UpdateCustodyBookingNumberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        custody = BookingNumberService.update_booking_number(
            noms_number,
            data["bookingNumber"],
            data["sentenceStartDate"],
            requesting_user=request.user,
        )
        return Response(CustodySerializer(custody).data, status=status.HTTP_200_OK)


class KeyDateByNomsNumberView(APIView):
    """``/api/offenders/nomsNumber/{noms_number}/custody/keyDates/{type_code}``"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Add or replace key date by NOMS number",
        request=CreateCustodyKeyDateSerializer,
        responses={
            200: KeyDateSerializer,
            400: OpenApiResponse(description="Unknown key date type."),
            404: _NOT_FOUND,
            409: OpenApiResponse(description="Duplicate offenders."),
        },
        tags=["Key Dates"],
    )
    def put(self, request: Request, noms_number: str, type_code: str) -> Response:
        serializer = CreateCustodyKeyDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        key_date = CustodyKeyDateService.add_or_replace_by_noms_number(
            noms_number,
            type_code,
            serializer.validated_data["date"],
            requesting_user=request.user,
        ).unwrap()
        return Response(KeyDateSerializer(key_date).data, status=status.HTTP_200_OK)


class KeyDateByConvictionView(APIView):
    """``/api/offenders/crn/{crn}/convictions/{conviction_id}/custody/keyDates/{type_code}``"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Add or replace key date on a conviction",
        request=CreateCustodyKeyDateSerializer,
        responses={
            200: KeyDateSerializer,
            400: OpenApiResponse(description="Unknown key date type."),
            404: _NOT_FOUND,
        },
        tags=["Key Dates"],
    )
    def put(self, request: Request, crn: str, conviction_id: int, type_code: str) -> Response:
        serializer = CreateCustodyKeyDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offender = OffenderQueryService.get_by_crn(crn).unwrap()
        key_date = CustodyKeyDateService.add_or_replace_by_conviction_id(
            offender.pk,
            conviction_id,
            type_code,
            serializer.validated_data["date"],
            requesting_user=request.user,
        ).unwrap()
        return Response(KeyDateSerializer(key_date).data, status=status.HTTP_200_OK)


class CustodyByConvictionView(APIView):
    """``/api/offenders/crn/{crn}/convictions/{conviction_id}/custody``"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get custody of a conviction",
        responses={
            200: CustodySerializer,
            400: OpenApiResponse(description="The conviction is not a custodial sentence."),
            404: _NOT_FOUND,
        },
        tags=["Custody"],
    )
    def get(self, request: Request, crn: str, conviction_id: int) -> Response:
        custody = CustodyQueryService.get_custody_by_conviction_id(crn, conviction_id)
        return Response(CustodySerializer(custody).data, status=status.HTTP_200_OK)
