"""HTTP client for the schema directory and the list view creation endpoint."""

from typing import Any

import httpx

from config import settings
from listview.entities import CreateListViewRequest
from listview.errors import CatalogLoadError, ListViewValidationError, ProvisioningTransportError


def _messages(items: Any) -> list[str]:
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        return []
    messages = []
    for item in items:
        if isinstance(item, dict):
            message = item.get("message")
        else:
            message = item
        if message:
            messages.append(str(message))
    return messages


def parse_error_body(body: Any, status_code: int | None = None) -> ListViewValidationError:
    """map the endpoint's error body onto a ListViewValidationError

    dict bodies carry `message` plus `output.errors` / `output.fieldErrors`,
    list bodies are plain `[{message, errorCode}]`
    """
    detail = {"status_code": status_code} if status_code is not None else {}

    if isinstance(body, list):
        return ListViewValidationError(operation_errors=_messages(body), detail=detail)

    if not isinstance(body, dict):
        return ListViewValidationError(top_message=str(body) if body else None, detail=detail)

    output = body.get("output") or {}
    field_errors = {
        str(name): _messages(errors) for name, errors in (output.get("fieldErrors") or {}).items()
    }
    return ListViewValidationError(
        top_message=body.get("message"),
        operation_errors=_messages(output.get("errors") or []),
        field_errors=field_errors,
        detail=detail,
    )


class ListViewApiClient:
    """thin async wrapper around the instance REST API"""

    def __init__(
        self,
        endpoint: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        api_version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = (endpoint or settings.API_ENDPOINT).rstrip("/")
        self.token = settings.API_TOKEN if token is None else token
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.api_version = api_version or settings.API_VERSION
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.endpoint}{path}"
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers(), transport=self.transport
        ) as client:
            return await client.request(method, url, **kwargs)

    async def fetch_catalog(self) -> Any:
        try:
            response = await self._request("GET", settings.CATALOG_PATH)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogLoadError(
                f"schema directory returned {e.response.status_code}",
                detail={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise CatalogLoadError(f"schema directory unreachable: {e}") from e
        except ValueError as e:
            raise CatalogLoadError(f"schema directory returned invalid JSON: {e}") from e

    async def create(self, request: CreateListViewRequest) -> str:
        payload = request.to_payload()
        entity = payload.pop("entityApiName")
        if "filterLogicExpression" in payload:
            payload["filterLogicString"] = payload.pop("filterLogicExpression")

        path = f"/services/data/{self.api_version}/ui-api/list-info/{entity}"
        try:
            response = await self._request("POST", path, json=payload)
        except httpx.TransportError as e:
            raise ProvisioningTransportError(f"creation endpoint unreachable: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                raise ProvisioningTransportError(
                    f"creation endpoint returned {response.status_code}",
                    detail={"status_code": response.status_code},
                )
            raise parse_error_body(body, response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None
        identifier = None
        if isinstance(body, dict):
            reference = body.get("listReference")
            identifier = body.get("id") or (
                reference.get("id") if isinstance(reference, dict) else None
            )
        if not identifier:
            raise ListViewValidationError(top_message="creation endpoint returned no identifier")
        return str(identifier)
