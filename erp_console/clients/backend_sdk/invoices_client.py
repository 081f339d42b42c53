from __future__ import annotations

import logging

from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.http_client import HttpClient
from erp_console.clients.backend_sdk.models import Invoice, InvoiceCreate

logger = logging.getLogger(__name__)

INVOICES_PATH = "/rest/v1/invoices"


class InvoicesClient:
    def __init__(self, http_client: HttpClient, access_token: str | None = None) -> None:
        self.http_client = http_client
        self.access_token = access_token

    def list_invoices(self) -> list[Invoice]:
        response = self.http_client.request(
            "GET",
            INVOICES_PATH,
            token=self.access_token,
            params={"select": "*", "order": "id.desc"},
        )
        rows = response if isinstance(response, list) else []
        logger.info("invoices_list_success", extra={"count": len(rows)})
        return [Invoice.model_validate(row) for row in rows]

    def create_invoice(self, payload: InvoiceCreate) -> Invoice:
        response = self.http_client.request(
            "POST",
            INVOICES_PATH,
            token=self.access_token,
            json=[payload.model_dump()],
            headers={"Prefer": "return=representation"},
        )
        if not isinstance(response, list) or not response:
            raise ApiError(code="EMPTY_INSERT_RESULT", message="Invoice was not returned after insert")
        invoice = Invoice.model_validate(response[0])
        logger.info("invoice_create_success", extra={"invoice_id": invoice.id})
        return invoice

    def delete_invoice(self, invoice_id: int) -> None:
        self.http_client.request(
            "DELETE",
            INVOICES_PATH,
            token=self.access_token,
            params={"id": f"eq.{invoice_id}"},
        )
        logger.info("invoice_delete_success", extra={"invoice_id": invoice_id})
