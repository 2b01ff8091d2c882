"""
Adapters layer - External integrations (Waitwhile API, keyring, caching).
"""

from .api_key_store import ApiKeyStore
from .cached_provider import CachedScheduleProvider
from .mock_waitwhile_client import MockWaitwhileClient
from .payloads import BookingRequest, GuestRequest, with_country_code
from .waitwhile_client import WaitwhileClient

__all__ = [
    "ApiKeyStore",
    "BookingRequest",
    "CachedScheduleProvider",
    "GuestRequest",
    "MockWaitwhileClient",
    "WaitwhileClient",
    "with_country_code",
]
