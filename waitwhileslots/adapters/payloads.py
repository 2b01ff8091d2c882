"""
Request payloads sent to the Waitwhile API.

These models only shape the payload; field contents are passed through
as given. Empty fields are left out of the form data.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class GuestRequest(BaseModel):
    """A guest to add to the waitlist."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    birthdate: Optional[str] = None  # sent inside notes, the API has no field for it
    state: Optional[str] = "waiting"

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude={"birthdate"})

        if self.birthdate:
            payload["notes"] = f"(birthdate {self.birthdate}): {self.notes or ''}"

        return {key: value for key, value in payload.items() if value not in (None, "")}


class BookingRequest(GuestRequest):
    """A guest booked into a time slot (epoch milliseconds)."""
    time: int
    duration: Optional[int] = None  # seconds
    resource_id: Optional[str] = None
    state: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        resource_id = payload.pop("resource_id", None)
        if resource_id is not None:
            payload["resourceId"] = resource_id
        return payload


def with_country_code(phone: Optional[str], country_code: Optional[str]) -> Optional[str]:
    """
    Prefix a phone number with ``+<country_code>``.

    Numbers already starting with ``+`` and calls without a country code are
    returned unchanged.
    """
    if phone is None or not country_code or phone.startswith("+"):
        return phone
    return f"+{country_code.lstrip('+')}{phone}"
