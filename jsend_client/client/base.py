from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, NoReturn, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from jsend_client.client.errors import EnvelopeError
from jsend_client.client.params import flatten_params
from jsend_client.core.config import settings
from jsend_client.core.request_context import request_id_var
from jsend_client.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

# Status reported for requests that never received a response.
TRANSPORT_FAILURE_CODE = 0


class BaseService:
    """Base class for API-specific clients.

    Subclasses call the protected ``_get``/``_post``/``_put``/``_delete``
    helpers; nothing outside the subclass talks to the HTTP client directly.
    Every helper is a coroutine that resolves to an :class:`Envelope` or
    raises :class:`EnvelopeError`.

    Args:
        prefix: Path segment shared by the service's endpoints, e.g. ``"auth"``.
        base_url: API root. Defaults to ``settings.API_BASE_URL`` read at creation.
        client: Shared ``httpx.AsyncClient``. When omitted, each request opens
            its own client configured with ``settings.HTTP_TIMEOUT`` that
            follows redirects.
    """

    def __init__(
        self,
        prefix: str = "",
        *,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        root = (base_url if base_url is not None else settings.API_BASE_URL).rstrip("/")
        prefix = prefix.strip("/")
        self._url = f"{root}/{prefix}" if prefix else root
        self._client = client
        self._timeout = httpx.Timeout(settings.HTTP_TIMEOUT)

    @property
    def url(self) -> str:
        return self._url

    def _endpoint_url(self, endpoint: str) -> str:
        return f"{self._url}/{endpoint.lstrip('/')}"

    async def _get(
        self,
        endpoint: str = "",
        query_params: Optional[Mapping[str, Any]] = None,
        *,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        """GET ``endpoint`` under the service URL with flattened query parameters."""
        return await self._send(
            "GET",
            self._endpoint_url(endpoint),
            params=flatten_params(query_params),
            data_type=data_type,
        )

    async def _get_external(
        self,
        url: str,
        query_params: Optional[Mapping[str, Any]] = None,
        *,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        """GET a fully qualified ``url``; the service URL is not applied."""
        return await self._send("GET", url, params=flatten_params(query_params), data_type=data_type)

    async def _post(
        self,
        endpoint: str = "",
        data: Any = None,
        *,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        """POST ``data`` as a JSON body."""
        return await self._send(
            "POST",
            self._endpoint_url(endpoint),
            json=_to_json(data),
            data_type=data_type,
        )

    async def _put(
        self,
        endpoint: str = "",
        data: Any = None,
        *,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        """PUT ``data`` as a JSON body."""
        return await self._send(
            "PUT",
            self._endpoint_url(endpoint),
            json=_to_json(data),
            data_type=data_type,
        )

    async def _delete(
        self,
        endpoint: str = "",
        query_params: Optional[Mapping[str, Any]] = None,
        *,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        """DELETE ``endpoint`` with flattened query parameters."""
        return await self._send(
            "DELETE",
            self._endpoint_url(endpoint),
            params=flatten_params(query_params),
            data_type=data_type,
        )

    def extract_data(self, response: httpx.Response, data_type: Optional[Type[Any]] = None) -> Envelope[Any]:
        """Decode a successful response into an envelope.

        Empty or unreadable bodies yield an empty envelope instead of failing,
        so callers must read missing fields as "no data".
        """
        model = _envelope_model(data_type)
        try:
            payload = response.json()
        except ValueError:
            logger.debug("api_body_not_json", extra={"status": response.status_code})
            return model.empty()
        if not isinstance(payload, dict):
            logger.debug("api_body_not_envelope", extra={"status": response.status_code})
            return model.empty()
        try:
            return model.model_validate(payload)
        except ValidationError:
            logger.debug("api_envelope_invalid", exc_info=True, extra={"status": response.status_code})
            return model.empty()

    def error_handler(self, response: httpx.Response) -> NoReturn:
        """Raise the failure envelope carried by ``response``.

        The payload is left untyped since failure replies carry error details
        rather than the requested resource. The body is decoded without a
        fallback: a non-JSON body surfaces as ``json.JSONDecodeError`` and a
        non-envelope body as ``ValidationError``.
        """
        envelope = Envelope.model_validate(response.json())
        raise EnvelopeError(envelope, response=response)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[httpx.QueryParams] = None,
        json: Any = None,
        data_type: Optional[Type[Any]] = None,
    ) -> Envelope[Any]:
        headers: dict[str, str] = {}
        req_id = request_id_var.get()
        if req_id:
            headers["X-Request-ID"] = req_id

        request_url = _merge_query(url, params)
        logger.debug("api_request", extra={"method": method, "url": str(request_url)})
        try:
            if self._client is not None:
                response = await self._client.request(method, request_url, json=json, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await client.request(method, request_url, json=json, headers=headers)
        except httpx.RequestError as exc:
            logger.debug("api_transport_error", exc_info=True, extra={"method": method, "url": url})
            envelope = Envelope(
                data=None,
                message=str(exc) or exc.__class__.__name__,
                status="error",
                status_code=TRANSPORT_FAILURE_CODE,
            )
            raise EnvelopeError(envelope) from exc

        logger.debug(
            "api_response",
            extra={"method": method, "url": url, "status": response.status_code},
        )
        if response.is_success:
            return self.extract_data(response, data_type)
        self.error_handler(response)


def _envelope_model(data_type: Optional[Type[Any]]) -> Type[Envelope[Any]]:
    if data_type is None:
        return Envelope
    return Envelope[data_type]  # type: ignore[valid-type]


def _merge_query(url: str, params: Optional[httpx.QueryParams]) -> httpx.URL:
    """Append ``params`` to any query string already present on ``url``."""
    target = httpx.URL(url)
    if not params:
        return target
    merged = target.params
    for key, value in params.multi_items():
        merged = merged.add(key, value)
    return target.copy_with(params=merged)


def _to_json(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    return data


__all__ = ["BaseService", "TRANSPORT_FAILURE_CODE"]
