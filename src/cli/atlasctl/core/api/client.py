"""HTTP client for the management API."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence
from urllib.parse import urljoin

import requests
from pydantic import TypeAdapter, ValidationError
from requests.auth import HTTPDigestAuth

from atlasctl.core.api.custom_db_roles import CustomDBRolesService
from atlasctl.core.api.global_clusters import GlobalClustersService
from atlasctl.core.api.models import APIModel, ErrorResponse
from atlasctl.core.errors import RemoteOperationError
from atlasctl.settings import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from atlasctl.utils import cli_ver

logger = logging.getLogger(__name__)


class AtlasClient:
    """Client for the management API.

    Holds a `requests.Session` configured with digest authentication and
    exposes one service object per API area.

    Parameters
    ----------
    base_url : str, optional
        Root of the versioned API. Paths are resolved relative to it.
    public_key : str, optional
        Public part of the programmatic API key.
    private_key : str, optional
        Private part of the programmatic API key.
    timeout : float, optional
        Per-request timeout in seconds.
    session : requests.Session, optional
        Session to use instead of a new one.

    Attributes
    ----------
    global_clusters : GlobalClustersService
        Global writes (managed namespaces and zone mappings).
    custom_db_roles : CustomDBRolesService
        Custom database roles.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        public_key: str = "",
        private_key: str = "",
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout = timeout
        self.session = session or requests.Session()
        if public_key or private_key:
            self.session.auth = HTTPDigestAuth(public_key, private_key)
        self.session.headers.update(
            {"Accept": "application/json", "User-Agent": f"atlasctl/{cli_ver()}"}
        )

        self.global_clusters = GlobalClustersService(self)
        self.custom_db_roles = CustomDBRolesService(self)

    def new_request(
        self,
        method: str,
        path: str,
        body: Optional[APIModel] = None,
        params: Optional[Sequence[tuple[str, str]]] = None,
    ) -> requests.PreparedRequest:
        """
        Build a request relative to the base URL.

        Parameters
        ----------
        method : str
            HTTP method.
        path : str
            Path relative to `base_url`, without a leading slash.
        body : APIModel, optional
            Model to send as the JSON body.
        params : Sequence[tuple[str, str]], optional
            Query parameters, encoded in the given order.

        Returns
        -------
        requests.PreparedRequest
            The request, with session auth and headers merged in.
        """
        url = urljoin(self.base_url, path)
        json_body = body.to_body() if body is not None else None
        request = requests.Request(method, url, json=json_body, params=params)
        return self.session.prepare_request(request)

    def do(
        self, request: requests.PreparedRequest, model: Any = None
    ) -> tuple[Any, requests.Response]:
        """
        Send a request and decode the response.

        Parameters
        ----------
        request : requests.PreparedRequest
            Request built by `new_request`.
        model : type, optional
            Pydantic model (or `list[Model]`) to decode the body into.
            If None, the body is not decoded.

        Returns
        -------
        tuple[Any, requests.Response]
            The decoded entity (or None) and the raw response.

        Raises
        ------
        RemoteOperationError
            On transport failure, non-2xx status, or a missing or
            undecodable body when `model` is given.
        """
        http = {"http_method": request.method, "http_url": request.url}
        logger.debug("Sending request", extra=http)
        try:
            response = self.session.send(request, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteOperationError(
                f"{request.method} {request.url}: {str(e)}"
            ) from e
        logger.debug(
            "Received response",
            extra={**http, "status_code": response.status_code},
        )

        check_response(response)
        if model is None:
            return None, response
        if not response.content:
            raise RemoteOperationError(
                f"{request.method} {request.url}: empty response body",
                status_code=response.status_code,
                response=response,
            )

        try:
            return TypeAdapter(model).validate_json(response.content), response
        except ValidationError as e:
            raise RemoteOperationError(
                f"{request.method} {request.url}: unable to decode response body: "
                f"{str(e)}",
                status_code=response.status_code,
                response=response,
            ) from e


def check_response(response: requests.Response) -> None:
    """
    Raise if the response does not carry a 2xx status.

    The API's error body (`detail`, `errorCode`, `reason`) is parsed when
    present and attached to the raised error.

    Raises
    ------
    RemoteOperationError
        If the status code is outside 200-299.
    """
    if 200 <= response.status_code < 300:
        return

    error = ErrorResponse()
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        pass

    request = response.request
    detail = error.detail or error.reason or response.reason or ""
    msg = f"{request.method} {request.url}: {response.status_code}"
    if error.error_code:
        msg = f"{msg} ({error.error_code})"
    if detail:
        msg = f"{msg} {detail}"
    raise RemoteOperationError(
        msg,
        status_code=response.status_code,
        error_code=error.error_code or "",
        detail=detail,
        response=response,
    )
