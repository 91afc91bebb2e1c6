"""
PlaceNet API client (async, httpx).

Reads go through the QueryCache; recruiter actions that change a cached
collection (move a candidate, remove a job) go through OptimisticMutation.
HTTP errors come back as the server's error types (NotFound, Conflict...),
network failures and timeouts as TransportError.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from placenet.client.cache import QueryCache
from placenet.client.mutations import DEFAULT_TIMEOUT, Notifier, OptimisticMutation, log_notifier
from placenet.core.errors import TransportError, error_for_status

logger = logging.getLogger(__name__)

APPLICATIONS_KEY = "/api/recruiter/applications"
RECRUITER_JOBS_KEY = "/api/recruiter/jobs"
PUBLIC_JOBS_KEY = "/api/jobs"
METRICS_KEY = "/api/recruiter/metrics"


class PlacenetClient:

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        cache: Optional[QueryCache] = None,
        timeout: float = DEFAULT_TIMEOUT,
        notify: Notifier = log_notifier,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cache = cache if cache is not None else QueryCache()
        self.timeout = timeout
        self.notify = notify
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self._http.headers["Authorization"] = f"Bearer {token}"

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "PlacenetClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text or None
            if not isinstance(detail, str):
                detail = None
            raise error_for_status(response.status_code, detail)
        return response.json()

    # ------------------------------------------------------------
    # Plain calls
    # ------------------------------------------------------------

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.set_token(data["accessToken"])
        return data

    async def set_application_status(self, application_id: str, status: str,
                                     version: Optional[int] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": status}
        if version is not None:
            body["version"] = version
        return await self._request("PUT", f"/api/applications/{application_id}/status", json=body)

    async def update_job(self, job_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/jobs/{job_id}", json=fields)

    async def delete_job(self, job_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/jobs/{job_id}")

    # ------------------------------------------------------------
    # Cached reads
    # ------------------------------------------------------------

    async def list_recruiter_applications(self, force: bool = False) -> List[Dict[str, Any]]:
        return await self.cache.fetch(
            APPLICATIONS_KEY, lambda: self._request("GET", APPLICATIONS_KEY), force=force,
        )

    async def list_recruiter_jobs(self, force: bool = False) -> List[Dict[str, Any]]:
        return await self.cache.fetch(
            RECRUITER_JOBS_KEY, lambda: self._request("GET", RECRUITER_JOBS_KEY), force=force,
        )

    async def fetch_metrics(self, force: bool = False) -> Dict[str, Any]:
        return await self.cache.fetch(
            METRICS_KEY, lambda: self._request("GET", METRICS_KEY), force=force,
        )

    # ------------------------------------------------------------
    # Optimistic actions
    # ------------------------------------------------------------

    async def move_candidate(self, application_id: str, status: str,
                             version: Optional[int] = None) -> Dict[str, Any]:
        """Drag-and-drop a candidate card to another pipeline column."""
        def apply(applications):
            return [
                {**a, "status": status} if a.get("id") == application_id else a
                for a in applications or []
            ]

        return await OptimisticMutation(
            self.cache,
            APPLICATIONS_KEY,
            apply=apply,
            call=lambda: self.set_application_status(application_id, status, version),
            secondary_keys=[METRICS_KEY],
            timeout=self.timeout,
            notify=self.notify,
            success_message=("Status Updated", f"Application moved to {status}"),
            failure_message=("Update Failed", "Failed to update application status."),
        ).run()

    async def remove_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Delete a job posting; an already-deleted job counts as success."""
        def apply(jobs):
            return [j for j in jobs or [] if j.get("id") != job_id]

        return await OptimisticMutation(
            self.cache,
            RECRUITER_JOBS_KEY,
            apply=apply,
            call=lambda: self.delete_job(job_id),
            secondary_keys=[PUBLIC_JOBS_KEY],
            timeout=self.timeout,
            notify=self.notify,
            success_message=("Job Deleted", "Job posting has been successfully deleted."),
            failure_message=("Error", "Failed to delete job posting."),
            not_found_is_success=True,
        ).run()
