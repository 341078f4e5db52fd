"""
Core constants — **Single Source of Truth** for reference-data codes.

Any service that looks up a reference code or compares a stored code
should import it from here instead of hardcoding.  The
``seed_reference_data`` management command seeds exactly these values.
"""

# ── Reference data set names ────────────────────────────────────────
KEY_DATE_TYPE_SET = "THROUGHCARE DATE TYPE"
CUSTODY_EVENT_TYPE_SET = "CUSTODY EVENT TYPE"
CONTACT_TYPE_SET = "CONTACT TYPE"

# ── Custody event types (Custody History) ───────────────────────────
PRISON_LOCATION_CHANGE_EVENT = "CPL"
CUSTODY_STATUS_CHANGE_EVENT = "TSC"

# Detail written on the history row when a sentenced offender arrives.
CUSTODY_STATUS_CHANGE_DETAIL = "DSS auto update in custody"

# ── Contact types ───────────────────────────────────────────────────
PRISON_LOCATION_CHANGE_CONTACT = "ETCP"
BOOKING_NUMBER_UPDATE_CONTACT = "EDSS"

# ── Key date types ──────────────────────────────────────────────────
SENTENCE_EXPIRY_DATE = "SED"

# Key dates that feed the computed sentence expiry; changing one of these
# is reported to IAPS.  Overridable via ``settings.EXPIRY_AFFECTING_KEY_DATE_CODES``.
EXPIRY_AFFECTING_KEY_DATE_CODES: frozenset[str] = frozenset({SENTENCE_EXPIRY_DATE})

# ── Seed values ─────────────────────────────────────────────────────
# (set_name, code, description)
REFERENCE_DATA: list[tuple[str, str, str]] = [
    (KEY_DATE_TYPE_SET, "SED", "Sentence Expiry Date"),
    (KEY_DATE_TYPE_SET, "LED", "Licence Expiry Date"),
    (KEY_DATE_TYPE_SET, "ACR", "Automatic Conditional Release Date"),
    (KEY_DATE_TYPE_SET, "EXP", "Expected Release Date"),
    (KEY_DATE_TYPE_SET, "HDE", "HDC Eligibility Date"),
    (KEY_DATE_TYPE_SET, "PED", "Parole Eligibility Date"),
    (KEY_DATE_TYPE_SET, "POM1", "POM Handover expected start date"),
    (KEY_DATE_TYPE_SET, "POM2", "RO responsibility date"),
    (KEY_DATE_TYPE_SET, "SPD", "Suspension Date if Non Parole Eligible"),
    (CUSTODY_EVENT_TYPE_SET, PRISON_LOCATION_CHANGE_EVENT, "Prison Location Change"),
    (CUSTODY_EVENT_TYPE_SET, CUSTODY_STATUS_CHANGE_EVENT, "Custody Status Change"),
    (CONTACT_TYPE_SET, PRISON_LOCATION_CHANGE_CONTACT, "Prison Location Change"),
    (CONTACT_TYPE_SET, BOOKING_NUMBER_UPDATE_CONTACT, "Prison Number Updated"),
]

# ── Booking number matching ─────────────────────────────────────────
# A conviction matches a booking-number update when its sentence start
# date is within this many days of the date the prison reports.
SENTENCE_START_DATE_TOLERANCE_DAYS: int = 7

# ── Prison offender manager allocation ──────────────────────────────
# Staff code suffix of the "unallocated" team member used for automatic
# allocation at an institution.
UNALLOCATED_STAFF_SUFFIX = "UATU"
AUTO_ALLOCATION_REASON = "Auto allocation on prison transfer"
