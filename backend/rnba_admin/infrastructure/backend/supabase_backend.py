"""
Supabase Registration Backend

Talks to the hosted Postgres database through its PostgREST endpoint.
Tables live in a dedicated schema selected per request through the
Accept-Profile / Content-Profile headers.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import structlog
from opentelemetry import trace
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...core.config import Settings
from ...domain.registration.models import (
    DashboardStats,
    FoodTypeModel,
    PersonData,
    RegistrationData,
    RegistrationSummary,
    Visitor,
    VisitorData,
    VisitTypeModel,
)
from ..storage.file_store import get_type_adapter
from .exceptions import (
    RemoteAuthorizationException,
    RemoteConnectionException,
    RemoteDecodeException,
    RemoteResponseException,
)
from .interface import RegistrationBackend

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

REST_PATH = "/rest/v1"
HEALTH_PATH = "/auth/v1/health"
VISITOR_DATA_FUNCTION = "getvisitordata"


class SupabaseBackend(RegistrationBackend):
    """PostgREST client for the registration tables."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        schema: str = "test_schema",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.schema = schema
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SupabaseBackend":
        return cls(
            base_url=settings.SUPABASE_URL,
            api_key=settings.SUPABASE_KEY,
            schema=settings.SUPABASE_SCHEMA,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
            max_retries=settings.BACKEND_MAX_RETRIES,
            retry_backoff=settings.BACKEND_RETRY_BACKOFF_SECONDS,
            transport=transport,
        )

    # Transport

    def _read_headers(self) -> Dict[str, str]:
        return {"Accept-Profile": self.schema}

    def _write_headers(self, return_rows: bool = False) -> Dict[str, str]:
        headers = {"Content-Profile": self.schema}
        if return_rows:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        idempotent: bool = True,
    ) -> Any:
        """
        Send request, retrying idempotent calls on connection failures.

        Returns:
            Decoded JSON body, or None for empty responses
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries if idempotent else 1),
            wait=wait_exponential(multiplier=self.retry_backoff),
            retry=retry_if_exception_type(RemoteConnectionException),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(operation, method, path, params, json, headers)

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]],
        json: Any,
        headers: Optional[Dict[str, str]],
    ) -> Any:
        with tracer.start_as_current_span(f"supabase.{operation}") as span:
            span.set_attribute("http.method", method)
            span.set_attribute("http.route", path)

            try:
                response = await self._client.request(
                    method, path, params=params, json=json, headers=headers
                )
            except httpx.TransportError as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                logger.warning(
                    "Backend request failed", operation=operation, error=str(e)
                )
                raise RemoteConnectionException(operation, e) from e

            span.set_attribute("http.status_code", response.status_code)

            if response.status_code in (401, 403):
                span.set_status(trace.Status(trace.StatusCode.ERROR, "unauthorized"))
                raise RemoteAuthorizationException(operation, response.status_code)

            if response.is_error:
                span.set_status(
                    trace.Status(trace.StatusCode.ERROR, str(response.status_code))
                )
                logger.warning(
                    "Backend returned error status",
                    operation=operation,
                    status_code=response.status_code,
                )
                raise RemoteResponseException(
                    operation, response.status_code, response.text[:500]
                )

            if not response.content:
                return None

            try:
                return response.json()
            except ValueError as e:
                raise RemoteDecodeException(operation, e) from e

    def _parse(self, operation: str, schema: Any, payload: Any) -> Any:
        try:
            return get_type_adapter(schema).validate_python(payload)
        except ValidationError as e:
            raise RemoteDecodeException(operation, e) from e

    def _first_id(self, operation: str, rows: Any, column: str) -> int:
        try:
            return int(rows[0][column])
        except (IndexError, KeyError, TypeError, ValueError) as e:
            raise RemoteDecodeException(operation, e) from e

    # Dashboard

    async def fetch_dashboard_stats(self, since: datetime) -> DashboardStats:
        created_since = f"gte.{since.isoformat()}"

        registrations = await self._request(
            "fetch_todays_registrations",
            "GET",
            f"{REST_PATH}/Registration",
            params={"select": "RegistrationID", "created_at": created_since},
            headers=self._read_headers(),
        )
        visitors = await self._request(
            "fetch_todays_visitors",
            "GET",
            f"{REST_PATH}/Visitors",
            params={"select": "*", "created_at": created_since},
            headers=self._read_headers(),
        )

        visitor_rows = self._parse("fetch_todays_visitors", List[Visitor], visitors or [])
        try:
            registration_ids = [int(row["RegistrationID"]) for row in registrations or []]
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteDecodeException("fetch_todays_registrations", e) from e

        stats = DashboardStats.from_records(registration_ids, visitor_rows)
        logger.info(
            "Dashboard stats fetched",
            registrations=stats.total_registrations_today,
            visitors=stats.total_visitors_today,
        )
        return stats

    # Registrations

    async def fetch_registrations(self, event_id: int) -> List[RegistrationSummary]:
        rows = await self._request(
            "fetch_registrations",
            "GET",
            f"{REST_PATH}/Registration",
            params={
                "select": "RegistrationID,Name,created_at",
                "Event": f"eq.{event_id}",
                "order": "created_at.desc",
            },
            headers=self._read_headers(),
        )
        return self._parse("fetch_registrations", List[RegistrationSummary], rows or [])

    async def create_registration(self, data: RegistrationData, event_id: int) -> int:
        with tracer.start_as_current_span("supabase.create_registration") as span:
            contacts = await self._request(
                "create_contact",
                "POST",
                f"{REST_PATH}/Contact",
                json=[data.contact_details.to_row()],
                headers=self._write_headers(return_rows=True),
                idempotent=False,
            )
            contact_id = self._first_id("create_contact", contacts, "ContactID")

            registrations = await self._request(
                "create_registration",
                "POST",
                f"{REST_PATH}/Registration",
                json=[data.to_registration_row(contact_id, event_id)],
                headers=self._write_headers(return_rows=True),
                idempotent=False,
            )
            registration_id = self._first_id(
                "create_registration", registrations, "RegistrationID"
            )
            span.set_attribute("registration.id", registration_id)

            await self._request(
                "create_visitors",
                "POST",
                f"{REST_PATH}/Visitors",
                json=[person.to_visitor_row(registration_id) for person in data.persons],
                headers=self._write_headers(),
                idempotent=False,
            )

            if data.has_payment:
                await self._request(
                    "create_payment",
                    "POST",
                    f"{REST_PATH}/Payment",
                    json=[data.to_payment_row(registration_id)],
                    headers=self._write_headers(),
                    idempotent=False,
                )

            logger.info(
                "Registration created",
                registration_id=registration_id,
                event_id=event_id,
                persons=data.number_of_persons,
            )
            return registration_id

    async def delete_registration(self, registration_id: int) -> None:
        await self._request(
            "delete_registration_visitors",
            "DELETE",
            f"{REST_PATH}/Visitors",
            params={"RegistrationID": f"eq.{registration_id}"},
            headers=self._write_headers(),
            idempotent=False,
        )
        await self._request(
            "delete_registration",
            "DELETE",
            f"{REST_PATH}/Registration",
            params={"RegistrationID": f"eq.{registration_id}"},
            headers=self._write_headers(),
            idempotent=False,
        )
        logger.info("Registration deleted", registration_id=registration_id)

    # Visitors

    async def fetch_visitor_data(self, registration_id: int) -> List[VisitorData]:
        rows = await self._request(
            "fetch_visitor_data",
            "POST",
            f"{REST_PATH}/rpc/{VISITOR_DATA_FUNCTION}",
            json={"p_registrationid": registration_id},
            headers=self._write_headers(),
        )
        return self._parse("fetch_visitor_data", List[VisitorData], rows or [])

    async def update_visitor_completion(self, visitor_id: int, completed: bool) -> None:
        await self._request(
            "update_visitor_completion",
            "PATCH",
            f"{REST_PATH}/Visitors",
            params={"VisitorID": f"eq.{visitor_id}"},
            json={"Completed": completed},
            headers=self._write_headers(),
            idempotent=False,
        )

    async def delete_visitor(self, visitor_id: int) -> None:
        await self._request(
            "delete_visitor",
            "DELETE",
            f"{REST_PATH}/Visitors",
            params={"VisitorID": f"eq.{visitor_id}"},
            headers=self._write_headers(),
            idempotent=False,
        )

    async def add_visitor(self, registration_id: int, person: PersonData) -> int:
        rows = await self._request(
            "add_visitor",
            "POST",
            f"{REST_PATH}/Visitors",
            json=[person.to_visitor_row(registration_id)],
            headers=self._write_headers(return_rows=True),
            idempotent=False,
        )
        return self._first_id("add_visitor", rows, "VisitorID")

    # Lookups

    async def fetch_visit_types(self) -> List[VisitTypeModel]:
        rows = await self._request(
            "fetch_visit_types",
            "GET",
            f"{REST_PATH}/VisitType",
            params={"select": "*", "order": "VisitID.asc"},
            headers=self._read_headers(),
        )
        return self._parse("fetch_visit_types", List[VisitTypeModel], rows or [])

    async def fetch_food_types(self) -> List[FoodTypeModel]:
        rows = await self._request(
            "fetch_food_types",
            "GET",
            f"{REST_PATH}/FoodType",
            params={"select": "*", "order": "FoodTypeID.asc"},
            headers=self._read_headers(),
        )
        return self._parse("fetch_food_types", List[FoodTypeModel], rows or [])

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(HEALTH_PATH)
        except httpx.HTTPError as e:
            logger.warning("Backend health check failed", error=str(e))
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()
