from __future__ import annotations

import json
import logging

import httpx
import pytest

from misoca_invoice.clients import MisocaAPIError, MisocaInvoiceClient
from misoca_invoice.core.errors import ErrorKind
from misoca_invoice.schemas import DuplicateInvoiceRequest

SOURCE_PAYLOAD = {
    "id": 1001,
    "subject": "12月分 保守費用",
    "contact_id": 77,
    "contact_name": "Example Co.",
    "body": "Thank you.",
    "items": [{"name": "Maintenance", "quantity": 1, "unit_price": 50000}],
}


def _request() -> DuplicateInvoiceRequest:
    return DuplicateInvoiceRequest(
        subject="3月分 保守費用",
        contact_id=77,
        issue_date="2025-03-31",
        payment_due_on="2025-04-30",
        body="Thank you.",
        items=SOURCE_PAYLOAD["items"],
    )


@pytest.mark.anyio
async def test_get_invoice_uses_bearer_auth(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SOURCE_PAYLOAD)

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))
    invoice = await client.get_invoice("access-token", "1001")

    assert invoice.subject == "12月分 保守費用"
    assert invoice.items == SOURCE_PAYLOAD["items"]
    (request,) = seen
    assert request.method == "GET"
    assert str(request.url) == "https://app.misoca.jp/api/v3/invoice/1001"
    assert request.headers["authorization"] == "Bearer access-token"
    assert "Line items: 1" in caplog.text
    assert "Example Co." in caplog.text


@pytest.mark.anyio
async def test_get_invoice_non_2xx_raises_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "not_found"})

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))

    with pytest.raises(MisocaAPIError) as excinfo:
        await client.get_invoice("access-token", "404")

    error = excinfo.value
    assert error.kind is ErrorKind.UPSTREAM
    assert error.diagnostics() == {
        "status": 404,
        "status_text": "Not Found",
        "data": {"error": "not_found"},
        "message": "Fetching source invoice failed.",
    }


@pytest.mark.anyio
async def test_create_invoice_posts_json_body(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 2002, "subject": "3月分 保守費用"})

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))
    created = await client.create_invoice("access-token", _request())

    assert created.id == 2002
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://app.misoca.jp/api/v3/invoice"
    assert request.headers["authorization"] == "Bearer access-token"
    assert json.loads(request.content) == {
        "subject": "3月分 保守費用",
        "contact_id": 77,
        "issue_date": "2025-03-31",
        "payment_due_on": "2025-04-30",
        "body": "Thank you.",
        "items": SOURCE_PAYLOAD["items"],
    }
    assert "https://app.misoca.jp/invoices/2002" in caplog.text


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("status", "hint"),
    [
        (422, "Probably a validation error"),
        (401, "The access token is probably invalid"),
    ],
)
async def test_create_invoice_annotates_known_failures(
    status: int, hint: str, caplog: pytest.LogCaptureFixture
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"errors": ["rejected"]})

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))

    with pytest.raises(MisocaAPIError) as excinfo:
        await client.create_invoice("access-token", _request())

    assert excinfo.value.status_code == status
    assert hint in caplog.text


@pytest.mark.anyio
async def test_create_invoice_server_error_has_no_hint(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))

    with pytest.raises(MisocaAPIError):
        await client.create_invoice("access-token", _request())

    assert "Probably" not in caplog.text
    assert "Creating duplicate invoice failed" in caplog.text


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={**SOURCE_PAYLOAD, "subject": None}),
    ],
)
async def test_get_invoice_malformed_body_raises_upstream_error(
    response: httpx.Response, caplog: pytest.LogCaptureFixture
) -> None:
    client = MisocaInvoiceClient(transport=httpx.MockTransport(lambda request: response))

    with pytest.raises(MisocaAPIError) as excinfo:
        await client.get_invoice("access-token", "1001")

    error = excinfo.value
    assert error.kind is ErrorKind.UPSTREAM
    assert error.status_code == 200
    assert error.status_text == "OK"
    assert error.body == response.text
    assert "Fetching source invoice failed" in caplog.text


@pytest.mark.anyio
async def test_create_invoice_response_without_id_raises_upstream_error(
    caplog: pytest.LogCaptureFixture,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"subject": "3月分 保守費用"})

    client = MisocaInvoiceClient(transport=httpx.MockTransport(handler))

    with pytest.raises(MisocaAPIError) as excinfo:
        await client.create_invoice("access-token", _request())

    assert excinfo.value.status_code == 201
    assert "Creating duplicate invoice failed" in caplog.text
