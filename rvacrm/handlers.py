"""WSGI handlers exposing the customer, address and opportunity services."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any
from urllib.parse import parse_qs

from .customers import Address, Customer, Opportunity
from .service import AddressService, CustomerService, OpportunityService

StartResponse = Callable[..., Any]

_DECODER = json.JSONDecoder()
_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def _status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"


def _respond(
    start_response: StartResponse,
    status: HTTPStatus,
    body: bytes,
    headers: list[tuple[str, str]],
) -> list[bytes]:
    start_response(
        _status_line(status),
        [*headers, ("Content-Length", str(len(body)))],
    )
    return [body]


def _error(start_response: StartResponse, message: str, status: HTTPStatus) -> list[bytes]:
    return _respond(
        start_response,
        status,
        (message + "\n").encode("utf-8"),
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
        ],
    )


def _encode(value: Any) -> bytes:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return (text + "\n").encode("utf-8")


def _json(start_response: StartResponse, value: Any) -> list[bytes]:
    return _respond(
        start_response,
        HTTPStatus.OK,
        _encode(value),
        [("Content-Type", "application/json")],
    )


def _query_id(environ: dict[str, Any]) -> uuid.UUID:
    """Return the ``id`` query parameter; an unparsable id raises ValueError."""
    values = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True).get("id", [""])
    text = values[0]
    try:
        return uuid.UUID(text)
    except ValueError as exc:
        raise ValueError(f"invalid UUID in id parameter: {text!r}") from exc


def _read_body(environ: dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    if stream is None or length <= 0:
        return b""
    return stream.read(length)


def _decode_json(body: bytes) -> Any:
    text = body.decode("utf-8").lstrip(" \t\r\n")
    if not text:
        raise ValueError("EOF")
    value, _ = _DECODER.raw_decode(text)
    return value


class _ResourceHandler:
    """Dispatches GET, POST, PUT and DELETE to one kind of record."""

    _model: type = object
    _label = ""

    def __init__(self, service: Any) -> None:
        self.service = service

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        actions = {
            "GET": self._get,
            "POST": self._create,
            "PUT": self._update,
            "DELETE": self._delete,
        }
        action = actions.get(environ.get("REQUEST_METHOD", ""))
        if action is None:
            return _error(start_response, "Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        return action(environ, start_response)

    def _fetch(self, record_id: uuid.UUID) -> Any:
        raise NotImplementedError

    def _store(self, record: Any) -> Any:
        raise NotImplementedError

    def _replace(self, record: Any) -> Any:
        raise NotImplementedError

    def _remove(self, record_id: uuid.UUID) -> None:
        raise NotImplementedError

    def _get(self, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        record_id = _query_id(environ)
        try:
            record = self._fetch(record_id)
        except Exception as exc:  # noqa: BLE001 - reported to the client
            return _error(start_response, str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(start_response, record.to_dict())

    def _write(
        self,
        environ: dict[str, Any],
        start_response: StartResponse,
        operation: Callable[[Any], Any],
    ) -> list[bytes]:
        try:
            record = self._model.from_dict(_decode_json(_read_body(environ)))
        except ValueError as exc:
            return _error(start_response, str(exc), HTTPStatus.BAD_REQUEST)
        try:
            result = operation(record)
        except Exception as exc:  # noqa: BLE001 - reported to the client
            return _error(start_response, str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(start_response, result.to_dict())

    def _create(self, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        return self._write(environ, start_response, self._store)

    def _update(self, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        return self._write(environ, start_response, self._replace)

    def _delete(self, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        record_id = _query_id(environ)
        try:
            self._remove(record_id)
        except Exception as exc:  # noqa: BLE001 - reported to the client
            return _error(start_response, str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(start_response, {"message": f"{self._label} deleted successfully"})


class CustomerHandler(_ResourceHandler):
    """WSGI application for customers, addressed by the ``id`` query parameter."""

    _model = Customer
    _label = "Customer"

    def __init__(self, service: CustomerService) -> None:
        super().__init__(service)

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        return super().__call__(environ, start_response)

    def _fetch(self, record_id: uuid.UUID) -> Customer:
        return self.service.get_customer_by_id(record_id)

    def _store(self, record: Customer) -> Customer:
        return self.service.create_customer(record)

    def _replace(self, record: Customer) -> Customer:
        return self.service.update_customer(record)

    def _remove(self, record_id: uuid.UUID) -> None:
        self.service.delete_customer(record_id)


class AddressHandler(_ResourceHandler):
    """WSGI application for addresses, addressed by the ``id`` query parameter."""

    _model = Address
    _label = "Address"

    def __init__(self, service: AddressService) -> None:
        super().__init__(service)

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        return super().__call__(environ, start_response)

    def _fetch(self, record_id: uuid.UUID) -> Address:
        return self.service.get_address_by_id(record_id)

    def _store(self, record: Address) -> Address:
        return self.service.create_address(record)

    def _replace(self, record: Address) -> Address:
        return self.service.update_address(record)

    def _remove(self, record_id: uuid.UUID) -> None:
        self.service.delete_address(record_id)


class OpportunityHandler(_ResourceHandler):
    """WSGI application for opportunities, addressed by the ``id`` query parameter."""

    _model = Opportunity
    _label = "Opportunity"

    def __init__(self, service: OpportunityService) -> None:
        super().__init__(service)

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        return super().__call__(environ, start_response)

    def _fetch(self, record_id: uuid.UUID) -> Opportunity:
        return self.service.get_opportunity_by_id(record_id)

    def _store(self, record: Opportunity) -> Opportunity:
        return self.service.create_opportunity(record)

    def _replace(self, record: Opportunity) -> Opportunity:
        return self.service.update_opportunity(record)

    def _remove(self, record_id: uuid.UUID) -> None:
        self.service.delete_opportunity(record_id)