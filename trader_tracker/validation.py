"""
validation.py
-------------

Field format checks for the trader profile form. Validation stops at the
first failing field so the form can re-prompt for that one value.
"""

import re
from typing import Mapping, Optional

from .errors import ValidationError
from .models import TraderProfile

# Example text shown in the empty form fields.
EMAIL_HINT = "example@gmail.com"
DOB_HINT = "DD-MM-YYYY"
PHONE_HINT = "1234567890"
COUNTRY_HINT = "Country Name"
ACCOUNT_ID_HINT = "12345678"

FORM_HINTS = {
    "email": EMAIL_HINT,
    "dob": DOB_HINT,
    "phone": PHONE_HINT,
    "country": COUNTRY_HINT,
    "account_id": ACCOUNT_ID_HINT,
}

EMAIL_SUFFIX = "@gmail.com"
ACCOUNT_ID_LENGTH = 8

_PHONE_RE = re.compile(r"[0-9]{10}")
_DOB_RE = re.compile(r"[0-9]{2}-[0-9]{2}-[0-9]{4}")


def validate_profile(
    email: str,
    dob: str,
    phone: str,
    country: str,
    account_id: str,
    placeholders: Optional[Mapping[str, str]] = None,
) -> TraderProfile:
    """Check the form values and build a profile from them.

    Raises ``ValidationError`` for the first field that fails. The date of
    birth is only checked against the DD-MM-YYYY shape, not the calendar.

    ``placeholders`` maps field names to the example text the form shows;
    a value still equal to its example is rejected as not filled in.
    """
    email = email.strip()
    dob = dob.strip()
    phone = phone.strip()
    country = country.strip()
    account_id = account_id.strip()
    placeholders = placeholders or {}

    def untouched(name: str, value: str) -> bool:
        return name in placeholders and value == placeholders[name]

    if untouched("email", email) or not email.endswith(EMAIL_SUFFIX):
        raise ValidationError(
            "email",
            f"Please enter a valid email ending with {EMAIL_SUFFIX}",
            "Invalid Email",
        )
    if untouched("phone", phone) or not _PHONE_RE.fullmatch(phone):
        raise ValidationError(
            "phone", "Phone number must be exactly 10 digits.", "Invalid Phone"
        )
    if untouched("dob", dob) or not _DOB_RE.fullmatch(dob):
        raise ValidationError(
            "dob", "DOB must be in DD-MM-YYYY format.", "Invalid DOB"
        )
    if untouched("account_id", account_id) or len(account_id) != ACCOUNT_ID_LENGTH:
        raise ValidationError(
            "account_id",
            f"Account ID must be exactly {ACCOUNT_ID_LENGTH} characters.",
            "Invalid Account ID",
        )

    return TraderProfile(
        email=email, dob=dob, phone=phone, country=country, account_id=account_id
    )
