"""
Convictions app URL configuration.

All routes are registered under the ``/api/offenders/`` prefix.

Route Hierarchy
---------------
  ── By NOMS number (prisons integration) ────────────────────────
  GET  nomsNumber/{noms}/custody/bookingNumber/{booking}   → custody
  PUT  nomsNumber/{noms}/custody/bookingNumber/{booking}   → prison location
  PUT  nomsNumber/{noms}/custody/bookingNumber             → booking number
  PUT  nomsNumber/{noms}/custody/keyDates/{typeCode}       → key date

  ── By CRN ──────────────────────────────────────────────────────
  GET  crn/{crn}/convictions/{id}/custody                  → custody
  PUT  crn/{crn}/convictions/{id}/custody/keyDates/{typeCode}
"""

from django.urls import path

from .views import (
    CustodyBookingNumberView,
    CustodyByBookingNumberView,
    CustodyByConvictionView,
    KeyDateByConvictionView,
    KeyDateByNomsNumberView,
)

urlpatterns = [
    path(
        "nomsNumber/<str:noms_number>/custody/bookingNumber/<str:booking_number>",
        CustodyByBookingNumberView.as_view(),
        name="custody-by-booking-number",
    ),
    path(
        "nomsNumber/<str:noms_number>/custody/bookingNumber",
        CustodyBookingNumberView.as_view(),
        name="custody-booking-number",
    ),
    path(
        "nomsNumber/<str:noms_number>/custody/keyDates/<str:type_code>",
        KeyDateByNomsNumberView.as_view(),
        name="key-date-by-noms-number",
    ),
    path(
        "crn/<str:crn>/convictions/<int:conviction_id>/custody",
        CustodyByConvictionView.as_view(),
        name="custody-by-conviction",
    ),
    path(
        "crn/<str:crn>/convictions/<int:conviction_id>/custody/keyDates/<str:type_code>",
        KeyDateByConvictionView.as_view(),
        name="key-date-by-conviction",
    ),
]
