"""Async REST client for the PetConnect backend."""

from typing import Any, Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from petconnect.models.adoption_request import AdoptionRequest
from petconnect.models.availability import AvailabilitySlot
from petconnect.models.medical import MedicalRecord, Vaccination
from petconnect.models.pet import Pet
from petconnect.models.user import Session, User
from petconnect.utils.cancellation import CancellationToken, check_cancelled
from petconnect.utils.errors import AuthorizationError, BackendError, ConflictError
from petconnect.utils.logging import get_correlation_id, get_structured_logger, log_timing, mask_user_id
from petconnect.utils.logging_config import LoggingConfig
from petconnect.utils.settings import Settings

logger = get_structured_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Envelope keys seen across endpoints, tried after any caller-specific keys
COLLECTION_KEYS = ("items", "requests", "listings", "pets", "slots", "logs", "organizations", "data")


def normalize_collection(payload: Any, *keys: str) -> list:
    """
    Unwrap a collection response.

    Accepts a bare array, ``{"items": [...]}`` or any of the known nested keys.
    Anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in (*keys, *COLLECTION_KEYS):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def normalize_entity(payload: Any, *keys: str) -> dict:
    """Unwrap a single-entity response that may be nested under a key."""
    if not isinstance(payload, dict):
        return {}
    for key in keys:
        value = payload.get(key)
        if isinstance(value, dict):
            return value
    return payload


def parse_many(model: Type[ModelT], items: list, strict: bool = False) -> list[ModelT]:
    """
    Parse rows, skipping ones that do not fit the model.

    With ``strict`` a row that does not fit raises BackendError instead, for
    callers that write the list back and must not lose rows.
    """
    parsed = []
    for item in items:
        if not item:
            continue
        try:
            parsed.append(model.model_validate(item))
        except (PydanticValidationError, ValueError) as e:
            if strict:
                logger.error(
                    "Malformed row from backend blocks edit",
                    model=model.__name__,
                    error=str(e)
                )
                raise BackendError(f"Backend returned an unreadable {model.__name__} row") from e
            logger.warning(
                "Skipping malformed row from backend",
                model=model.__name__,
                error=str(e)
            )
    return parsed


class AvailabilitySnapshot(BaseModel):
    """Slots as last read from the backend, with the version stamp when provided."""
    slots: list[AvailabilitySlot]
    version: Optional[str] = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"Request failed with status {response.status_code}"


def raise_for_response(response: httpx.Response) -> None:
    """Map HTTP failures onto the client error taxonomy."""
    if response.is_success:
        return
    message = _error_message(response)
    status = response.status_code
    if status in (401, 403):
        raise AuthorizationError(message, status_code=status)
    if status in (409, 412):
        raise ConflictError(message, status_code=status)
    raise BackendError(message, status_code=status)


class BackendClient:
    """
    Thin wrapper over httpx.AsyncClient.

    The session token is read on every call, so a logout between calls takes
    effect immediately. There are no retries: failures surface to the caller.
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.settings = settings or Settings.from_env()
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                timeout=self.settings.http_timeout_seconds,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Backend operation error",
                error=str(exc_val),
                error_type=exc_type.__name__
            )
        await self.aclose()
        return False

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None when empty)."""
        check_cancelled(cancel_token)

        request_headers = dict(self.session.auth_headers(self.settings.auth_header))
        correlation_id = get_correlation_id()
        if correlation_id:
            request_headers[LoggingConfig.LOG_CORRELATION_ID_HEADER] = correlation_id
        if headers:
            request_headers.update(headers)

        try:
            with log_timing(
                "backend_request",
                logger=logger,
                method=method,
                path=path,
                user_id=mask_user_id(self.session.user_id)
            ):
                response = await self._client().request(
                    method, path, json=json, params=params, headers=request_headers
                )
        except httpx.HTTPError as e:
            logger.error("Backend transport error", method=method, path=path, error=str(e))
            raise BackendError(f"Network error: {e}") from e

        # A response that arrives after the caller gave up must not be used
        check_cancelled(cancel_token)

        if not response.is_success:
            logger.warning(
                "Backend returned error status",
                method=method,
                path=path,
                status_code=response.status_code
            )
        raise_for_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    # Auth

    async def get_me(self, cancel_token: Optional[CancellationToken] = None) -> User:
        """Current user from /users/me, falling back to /auth/me."""
        try:
            payload = await self.request("GET", "/users/me", cancel_token=cancel_token)
        except AuthorizationError:
            raise
        except BackendError as e:
            logger.info("Falling back to /auth/me", error=str(e))
            payload = await self.request("GET", "/auth/me", cancel_token=cancel_token)
        user = User.model_validate(normalize_entity(payload, "user"))
        self.session.user = user
        return user

    # Pets

    async def list_pets(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        payload = await self.request("GET", "/pets", cancel_token=cancel_token)
        return parse_many(Pet, normalize_collection(payload, "pets"))

    async def list_org_pets(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        payload = await self.request("GET", "/pets/organization", cancel_token=cancel_token)
        return parse_many(Pet, normalize_collection(payload, "pets"))

    async def get_pet(self, pet_id: str, cancel_token: Optional[CancellationToken] = None) -> Pet:
        payload = await self.request("GET", f"/pets/{pet_id}", cancel_token=cancel_token)
        return Pet.model_validate(normalize_entity(payload, "pet"))

    async def update_pet_status(
        self,
        pet_id: str,
        status: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> dict:
        payload = await self.request(
            "PATCH", f"/pets/{pet_id}/status", json={"status": status}, cancel_token=cancel_token
        )
        return normalize_entity(payload, "pet")

    async def list_personal_listings(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        payload = await self.request("GET", "/pet-files/listings", cancel_token=cancel_token)
        return parse_many(Pet, normalize_collection(payload, "listings"))

    async def list_my_listings(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        payload = await self.request("GET", "/pet-files/my-listings/detailed", cancel_token=cancel_token)
        return parse_many(Pet, normalize_collection(payload, "listings"))

    async def delete_listing(self, pet_id: str, cancel_token: Optional[CancellationToken] = None) -> None:
        await self.request("DELETE", f"/pet-files/user-pet/{pet_id}", cancel_token=cancel_token)

    # Adoption requests

    async def list_adoption_requests(
        self,
        cancel_token: Optional[CancellationToken] = None
    ) -> list[AdoptionRequest]:
        payload = await self.request("GET", "/adoptions/requests", cancel_token=cancel_token)
        return parse_many(AdoptionRequest, normalize_collection(payload, "requests"))

    async def list_my_adoption_requests(
        self,
        cancel_token: Optional[CancellationToken] = None
    ) -> list[AdoptionRequest]:
        payload = await self.request("GET", "/adoptions/my-requests", cancel_token=cancel_token)
        return parse_many(AdoptionRequest, normalize_collection(payload, "requests"))

    async def update_adoption_status(
        self,
        request_id: str,
        status: str,
        meeting_date: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> dict:
        body = {"status": status}
        if meeting_date is not None:
            body["meetingDate"] = meeting_date
        payload = await self.request(
            "PATCH", f"/adoptions/{request_id}/status", json=body, cancel_token=cancel_token
        )
        return normalize_entity(payload, "request", "adoption")

    # Foster requests

    async def submit_foster_request(
        self,
        listing_id: str,
        message: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> dict:
        payload = await self.request(
            "POST",
            "/foster/request",
            json={"listingId": listing_id, "message": message},
            cancel_token=cancel_token
        )
        return normalize_entity(payload, "request", "fosterRequest")

    async def update_foster_request(
        self,
        pet_id: str,
        request_id: str,
        action: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> dict:
        payload = await self.request(
            "PATCH",
            f"/pets/{pet_id}/foster-requests/{request_id}",
            json={"action": action},
            cancel_token=cancel_token
        )
        return normalize_entity(payload, "request", "fosterRequest")

    async def start_foster_chat(
        self,
        pet_id: str,
        request_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[str]:
        payload = await self.request(
            "POST",
            f"/pet-files/{pet_id}/foster-requests/{request_id}/start-chat",
            cancel_token=cancel_token
        )
        if not isinstance(payload, dict):
            return None
        return payload.get("chatThreadId") or payload.get("chatId")

    # Staff availability

    async def get_availability(
        self,
        strict: bool = False,
        cancel_token: Optional[CancellationToken] = None
    ) -> AvailabilitySnapshot:
        """Read the slot list; ``strict`` refuses a list with unreadable rows."""
        payload = await self.request("GET", "/auth/staff/availability", cancel_token=cancel_token)
        version = payload.get("version") if isinstance(payload, dict) else None
        slots = parse_many(
            AvailabilitySlot, normalize_collection(payload, "slots", "availability"), strict=strict
        )
        return AvailabilitySnapshot(slots=slots, version=str(version) if version is not None else None)

    async def replace_availability(
        self,
        slots: list[AvailabilitySlot],
        version: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[AvailabilitySnapshot]:
        """POST the whole slot list; ``version`` goes out as If-Match."""
        headers = {"If-Match": version} if version is not None else None
        payload = await self.request(
            "POST",
            "/auth/staff/availability",
            json={"slots": [slot.to_payload() for slot in slots]},
            headers=headers,
            cancel_token=cancel_token,
        )
        if isinstance(payload, (list, dict)) and normalize_collection(payload, "slots", "availability"):
            new_version = payload.get("version") if isinstance(payload, dict) else None
            return AvailabilitySnapshot(
                slots=parse_many(AvailabilitySlot, normalize_collection(payload, "slots", "availability")),
                version=str(new_version) if new_version is not None else None,
            )
        return None

    async def delete_availability(
        self,
        slot_id: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        await self.request(
            "DELETE", "/auth/staff/availability", params={"slotId": slot_id}, cancel_token=cancel_token
        )

    # Vet

    async def list_vet_patients(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        payload = await self.request("GET", "/vet/my-patients", cancel_token=cancel_token)
        return parse_many(Pet, normalize_collection(payload, "pets"))

    async def list_overdue_vaccinations(
        self,
        cancel_token: Optional[CancellationToken] = None
    ) -> list[Vaccination]:
        payload = await self.request("GET", "/vet/overdue-vaccinations", cancel_token=cancel_token)
        return parse_many(Vaccination, normalize_collection(payload, "overdueVaccinations"))

    async def count_upcoming_checkups(self, cancel_token: Optional[CancellationToken] = None) -> int:
        payload = await self.request("GET", "/vet/upcoming-checkups", cancel_token=cancel_token)
        if isinstance(payload, dict):
            return int(payload.get("count") or 0)
        return 0

    async def get_medical_history(
        self,
        pet_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> tuple[list[MedicalRecord], list[Vaccination]]:
        payload = await self.request("GET", f"/vet/pets/{pet_id}/medical-history", cancel_token=cancel_token)
        records = parse_many(MedicalRecord, normalize_collection(payload, "medicalRecords"))
        vaccinations = parse_many(Vaccination, normalize_collection(payload, "vaccinations"))
        return records, vaccinations

    async def add_medical_record(
        self,
        pet_id: str,
        record: MedicalRecord,
        cancel_token: Optional[CancellationToken] = None
    ) -> dict:
        payload = await self.request(
            "POST",
            f"/vet/pets/{pet_id}/medical-records",
            json=record.model_dump(by_alias=True, exclude_none=True, mode="json"),
            cancel_token=cancel_token
        )
        return normalize_entity(payload, "record", "medicalRecord")

    async def add_vaccination(
        self,
        pet_id: str,
        vaccination: Vaccination,
        cancel_token: Optional[CancellationToken] = None
    ) -> dict:
        payload = await self.request(
            "POST",
            f"/vet/pets/{pet_id}/vaccinations",
            json=vaccination.model_dump(by_alias=True, exclude_none=True, mode="json"),
            cancel_token=cancel_token
        )
        return normalize_entity(payload, "vaccination")
