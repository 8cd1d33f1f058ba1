# src/perf_client/core/executor.py
"""
Executes one logical REST call against the service with retries.

Every attempt builds a brand new request (headers and body) from the
RequestSpec: a prepared request that has been sent is never reused.
"""
import base64
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Tuple

import requests
from pydantic_core import PydanticSerializationError, to_json

from .exceptions import ExitCode, HTTP_CLIENT_ERROR
from .logging.filters import clear_correlation_id, set_correlation_id
from .retry_engine import AttemptState
from .session import PerfSession

# Conventional success code per method
DEFAULT_SUCCESS_CODES = {
    "GET": 200,
    "POST": 201,
    "PUT": 201,
    "PATCH": 201,
    "DELETE": 204,
}

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})

_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class RequestSpec:
    """
    Description of one logical API call.

    Args:
        method: HTTP method
        url_suffix: Path joined to the base URL with "/"
        credentials: "user:password" for Basic auth ("" = anonymous call)
        body: None, str/bytes (sent verbatim) or any value serialized to JSON
        accepted_codes: Extra codes treated as success besides the method default
    """
    method: str
    url_suffix: str
    credentials: str = ""
    body: Any = None
    accepted_codes: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self):
        method = self.method.upper()
        if method not in DEFAULT_SUCCESS_CODES:
            raise ValueError(
                f"method must be one of {', '.join(DEFAULT_SUCCESS_CODES)}, not {self.method}"
            )
        object.__setattr__(self, 'method', method)
        object.__setattr__(self, 'accepted_codes', frozenset(self.accepted_codes or ()))

    @property
    def default_code(self) -> int:
        return DEFAULT_SUCCESS_CODES[self.method]

    def success_codes(self) -> FrozenSet[int]:
        """Accepted codes always include the method's conventional code."""
        return self.accepted_codes | {self.default_code}


@dataclass(frozen=True)
class ApiResult:
    """
    Outcome of one logical API call.

    Args:
        status_code: Final HTTP code, or HTTP_CLIENT_ERROR (598) when no
            usable response was obtained
        body: Raw response body
        value: Decoded body (None if not requested or body empty)
        attempts: Number of attempts made
        state: Final state of the attempt state machine
        accepted: status_code is in the accepted set
    """
    status_code: int
    body: bytes = b""
    value: Any = None
    attempts: int = 0
    state: AttemptState = AttemptState.ATTEMPTING
    accepted: bool = False

    @property
    def client_error(self) -> bool:
        """No response was obtained from the service."""
        return self.status_code == HTTP_CLIENT_ERROR


class _BodyEncodingFailed(Exception):
    pass


def basic_auth_header(credentials: str) -> str:
    """'user:password' -> 'Basic dXNlcjpwYXNzd29yZA=='"""
    return "Basic " + base64.b64encode(credentials.encode('utf-8')).decode('ascii')


class RequestExecutor:
    """
    Runs GET / PUT / POST / PATCH / DELETE calls with retries.

    Get and Delete failures are always reported and never abort the run.
    Mutate failures honor continue_on_failure.

    Example:
        >>> executor = RequestExecutor(session)
        >>> result = executor.get("orgs/myorg/nodes", "myorg/admin:pw", decode_as=JSON_TEXT)
        >>> result.status_code
        200
    """

    def __init__(self, session: PerfSession):
        self._session = session
        self._config = session.config
        self._logger = session.logger
        self._errors = session.errors

    # ==================== Публичные методы ====================

    def get(
        self,
        url_suffix: str,
        credentials: str = "",
        accepted_codes: Iterable[int] = (),
        decode_as: Any = None
    ) -> ApiResult:
        """
        GET a resource.

        Args:
            url_suffix: Path after the base URL
            credentials: "user:password" or "" for anonymous
            accepted_codes: Codes accepted besides 200
            decode_as: RAW_BYTES, JSON_TEXT, a type, or None

        Returns:
            ApiResult; a bad code is reported and returned, never fatal
        """
        spec = RequestSpec("GET", url_suffix, credentials, None, frozenset(accepted_codes))
        return self.execute(spec, decode_as=decode_as, continue_on_failure=True)

    def mutate(
        self,
        method: str,
        url_suffix: str,
        credentials: str = "",
        accepted_codes: Iterable[int] = (),
        body: Any = None,
        decode_as: Any = None,
        continue_on_failure: bool = False
    ) -> ApiResult:
        """
        Create or update a resource with PUT, POST or PATCH.

        Args:
            method: PUT, POST or PATCH
            url_suffix: Path after the base URL
            credentials: "user:password" or "" for anonymous
            accepted_codes: Codes accepted besides 201
            body: str/bytes sent verbatim, anything else serialized to JSON
            decode_as: RAW_BYTES, JSON_TEXT, a type, or None
            continue_on_failure: False aborts the run on failure

        Raises:
            ValueError: If method is not PUT, POST or PATCH
            PerfRunAborted: On failure in fail-fast mode
        """
        if method.upper() not in MUTATING_METHODS:
            raise ValueError(f"mutate supports PUT, POST and PATCH, not {method}")
        spec = RequestSpec(method, url_suffix, credentials, body, frozenset(accepted_codes))
        return self.execute(spec, decode_as=decode_as, continue_on_failure=continue_on_failure)

    def put(self, url_suffix: str, **kwargs: Any) -> ApiResult:
        return self.mutate("PUT", url_suffix, **kwargs)

    def post(self, url_suffix: str, **kwargs: Any) -> ApiResult:
        return self.mutate("POST", url_suffix, **kwargs)

    def patch(self, url_suffix: str, **kwargs: Any) -> ApiResult:
        return self.mutate("PATCH", url_suffix, **kwargs)

    def delete(
        self,
        url_suffix: str,
        credentials: str = "",
        accepted_codes: Iterable[int] = ()
    ) -> ApiResult:
        """
        DELETE a resource. A bad code is reported and returned, never fatal.
        """
        spec = RequestSpec("DELETE", url_suffix, credentials, None, frozenset(accepted_codes))
        return self.execute(spec, continue_on_failure=True)

    # ==================== Цикл попыток ====================

    def execute(
        self,
        spec: RequestSpec,
        decode_as: Any = None,
        continue_on_failure: bool = False
    ) -> ApiResult:
        """
        Run the retry loop for a RequestSpec and validate the final code.

        Args:
            spec: Call description
            decode_as: Destination shape for the body
            continue_on_failure: Failure mode for transport errors,
                body encoding and status validation

        Returns:
            ApiResult
        """
        url = self._build_url(spec.url_suffix)
        label = f"{spec.method} {url}"
        self._logger.verbose(label)

        set_correlation_id(f"{spec.method.lower()}-{uuid.uuid4().hex[:8]}")
        client: Optional[requests.Session] = None
        try:
            try:
                payload = self._encode_body(spec.body)
            except _BodyEncodingFailed as e:
                self._errors.maybe_fatal(
                    continue_on_failure,
                    ExitCode.JSON_PARSING_ERROR,
                    f"failed to marshal body for {label}: {e}"
                )
                return ApiResult(HTTP_CLIENT_ERROR, state=AttemptState.FAILED_CONTINUABLE)

            client = self._session.get_client()

            attempt = 0
            state = AttemptState.ATTEMPTING
            response: Optional[requests.Response] = None
            while not state.is_terminal:
                attempt += 1
                self._session.count_operation()

                try:
                    prepared = self._build_request(client, spec, url, payload)
                except requests.exceptions.RequestException as e:
                    # Malformed URL: no attempt can ever be sent
                    self._errors.maybe_fatal(
                        continue_on_failure,
                        ExitCode.HTTP_ERROR,
                        f"failed to build request for {label}: {e}"
                    )
                    return ApiResult(
                        HTTP_CLIENT_ERROR, attempts=attempt, state=AttemptState.FAILED_CONTINUABLE
                    )
                response, error = self._send(client, prepared)

                decision = self._session.classifier.decide(
                    response, error, attempt, continue_on_failure, spec.method, url
                )
                state = decision.state

            if state is not AttemptState.SUCCEEDED or response is None:
                return ApiResult(HTTP_CLIENT_ERROR, attempts=attempt, state=state)

            return self._finish(spec, response, attempt, label, decode_as, continue_on_failure)
        finally:
            if client is not None:
                self._session.release_client(client)
            clear_correlation_id()

    def _finish(
        self,
        spec: RequestSpec,
        response: requests.Response,
        attempt: int,
        label: str,
        decode_as: Any,
        continue_on_failure: bool
    ) -> ApiResult:
        """Validate the status code and decode the body."""
        body = response.content
        status_code = response.status_code
        self._logger.verbose(f"HTTP code: {status_code}")

        if status_code not in spec.success_codes():
            message = f"bad HTTP code {status_code} from {label}"
            if body:
                message += f", output: {body.decode('utf-8', errors='replace')}"
            if spec.method in MUTATING_METHODS:
                self._errors.maybe_fatal(continue_on_failure, ExitCode.HTTP_ERROR, message)
            else:
                # GET/DELETE failures never abort the run
                self._errors.error(message)
            return ApiResult(status_code, body, None, attempt, AttemptState.FAILED_CONTINUABLE, False)

        value = self._session.decoder.decode(body, decode_as, label)
        return ApiResult(status_code, body, value, attempt, AttemptState.SUCCEEDED, True)

    # ==================== Внутренние методы ====================

    def _build_url(self, url_suffix: str) -> str:
        return f"{self._config.base_url}/{url_suffix}"

    @staticmethod
    def _encode_body(body: Any) -> Optional[bytes]:
        """str/bytes are sent verbatim, anything else is serialized to JSON."""
        if body is None:
            return None
        if isinstance(body, str):
            return body.encode('utf-8')
        if isinstance(body, (bytes, bytearray)):
            return bytes(body)
        try:
            return to_json(body)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise _BodyEncodingFailed(str(e)) from e

    @staticmethod
    def _build_request(
        client: requests.Session,
        spec: RequestSpec,
        url: str,
        payload: Optional[bytes]
    ) -> requests.PreparedRequest:
        """Fresh PreparedRequest (new headers, new body) for one attempt."""
        headers = {"Accept": "application/json"}
        if spec.method in MUTATING_METHODS:
            headers["Content-Type"] = "application/json"
        if spec.credentials:
            headers["Authorization"] = basic_auth_header(spec.credentials)

        request = requests.Request(spec.method, url, headers=headers, data=payload)
        return client.prepare_request(request)

    def _send(
        self,
        client: requests.Session,
        prepared: requests.PreparedRequest
    ) -> Tuple[Optional[requests.Response], Optional[Exception]]:
        """
        Send one attempt and read the whole body within the request timeout.

        Returns:
            (response, None) or (None, error)
        """
        timeout = self._config.timeout
        deadline = time.monotonic() + timeout.request
        try:
            response = client.send(prepared, timeout=timeout.as_tuple(), stream=True)
            try:
                response._content = self._read_body(response, deadline, timeout.request)
            finally:
                response.close()
            return response, None
        except requests.exceptions.RequestException as e:
            return None, e

    @staticmethod
    def _read_body(response: requests.Response, deadline: float, limit: float) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise requests.exceptions.ReadTimeout(
                    f"request timed out after {limit}s while reading body", response=response
                )
        if time.monotonic() > deadline:
            raise requests.exceptions.ReadTimeout(
                f"request timed out after {limit}s", response=response
            )
        return b"".join(chunks)
