"""
Route tests. The pooled connection is replaced by FakeConnection and the
document / payment repositories by in-memory stand-ins, so numbering and
totals run for real while no database is needed.
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from apps.api.db import get_conn
from apps.api.main import app
from apps.api.routes import documents as document_routes
from apps.api.routes import payments as payment_routes
from tests.conftest import FakeConnection

YEAR = date.today().year
VENDOR_ID = "98681ed3-d1e5-4440-b249-85f181f32b0e"
CLIENT_ID = "5b0f8a2e-1c47-4a8e-9a3f-2d6e4b7c8a90"


class MemoryDocuments:
    def __init__(self):
        self.docs = {}

    def insert_document(self, conn, *, org_id, doc_type, doc_number, payload, totals):
        doc_id = uuid.uuid4()
        self.docs[doc_id] = {
            "id": doc_id,
            "doc_type": doc_type.value,
            "doc_number": doc_number,
            "party_id": payload["party_id"],
            "doc_date": payload["doc_date"],
            "due_date": payload.get("due_date"),
            "project_name": payload.get("project_name"),
            "notes": payload.get("notes"),
            "status": "Draft",
            "discount_percent": payload.get("discount_percent", 0),
            "apply_tax": payload.get("apply_tax", False),
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "tax": totals.tax,
            "total": totals.grand_total,
            "lines": [],
        }
        return doc_id

    def replace_lines(self, conn, document_id, lines):
        self.docs[uuid.UUID(str(document_id))]["lines"] = [ln.model_dump() for ln in lines]

    def get_document_with_lines(self, conn, doc_type, document_id):
        try:
            doc = self.docs.get(uuid.UUID(str(document_id)))
        except ValueError:
            return None
        if doc is None or doc["doc_type"] != doc_type.value:
            return None
        return doc

    def list_documents(self, conn, doc_type, limit=50, offset=0):
        rows = [d for d in self.docs.values() if d["doc_type"] == doc_type.value]
        return rows[offset:offset + limit]

    def update_document(self, conn, doc_type, document_id, payload, totals):
        doc = self.get_document_with_lines(conn, doc_type, document_id)
        if doc is None:
            return False
        doc.update(
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            tax=totals.tax,
            total=totals.grand_total,
            doc_date=payload["doc_date"],
        )
        return True

    def delete_document(self, conn, doc_type, document_id):
        doc = self.get_document_with_lines(conn, doc_type, document_id)
        if doc is None:
            return False
        del self.docs[doc["id"]]
        return True


@pytest.fixture
def fake_conn(sequence_store):
    return FakeConnection(sequence_store)


@pytest.fixture
def memory(monkeypatch):
    mem = MemoryDocuments()
    for name in (
        "insert_document",
        "replace_lines",
        "get_document_with_lines",
        "list_documents",
        "update_document",
        "delete_document",
    ):
        monkeypatch.setattr(document_routes, name, getattr(mem, name))
    monkeypatch.setattr(document_routes, "get_company_name", lambda conn, org_id: "Acme Ltd")
    monkeypatch.setattr(document_routes, "get_vendor_name", lambda conn, vendor_id: "Zenith Supplies")
    monkeypatch.setattr(document_routes, "get_client_name", lambda conn, client_id: "Lagos Builders")
    return mem


@pytest.fixture
def client(fake_conn, org_id):
    def override():
        yield fake_conn

    app.dependency_overrides[get_conn] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


def po_body(**overrides):
    body = {
        "vendor_id": VENDOR_ID,
        "doc_date": "2025-05-02",
        "project_name": "Office fit-out",
        "lines": [{"description": "Desk", "quantity": 2, "unit_price": 100}],
    }
    body.update(overrides)
    return body


# =============================================================================
# Line-item documents
# =============================================================================


class TestPurchaseOrders:
    def test_create_numbers_and_totals(self, client, memory):
        resp = client.post("/purchase-orders", json=po_body())
        assert resp.status_code == 201
        data = resp.json()
        assert data["doc_number"] == f"PO-ACM-{YEAR}-0001"
        # money is a two-decimal string on the wire
        assert data["subtotal"] == "200.00"
        assert data["tax"] == "10.00"
        # withholding tax is deducted
        assert data["total"] == "190.00"
        assert data["lines"][0]["description"] == "Desk"

    def test_numbers_increase(self, client, memory):
        first = client.post("/purchase-orders", json=po_body()).json()["doc_number"]
        second = client.post("/purchase-orders", json=po_body()).json()["doc_number"]
        assert (first, second) == (f"PO-ACM-{YEAR}-0001", f"PO-ACM-{YEAR}-0002")

    def test_next_number_preview(self, client, memory):
        assert client.get("/purchase-orders/next-number").json() == {"number": f"PO-ACM-{YEAR}-0001"}
        client.post("/purchase-orders", json=po_body())
        assert client.get("/purchase-orders/next-number").json() == {"number": f"PO-ACM-{YEAR}-0002"}

    def test_negative_quantity_is_422(self, client, memory):
        body = po_body(lines=[{"description": "Desk", "quantity": -2, "unit_price": 100}])
        resp = client.post("/purchase-orders", json=body)
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["field"] == "lines[0].quantity"
        assert memory.docs == {}

    def test_missing_lines_is_422(self, client, memory):
        resp = client.post("/purchase-orders", json=po_body(lines=[]))
        assert resp.status_code == 422

    def test_get_list_update_delete(self, client, memory):
        created = client.post("/purchase-orders", json=po_body()).json()
        doc_id = created["id"]

        assert client.get(f"/purchase-orders/{doc_id}").json()["doc_number"] == created["doc_number"]
        assert len(client.get("/purchase-orders").json()["items"]) == 1

        updated = client.put(
            f"/purchase-orders/{doc_id}",
            json=po_body(lines=[{"description": "Desk", "quantity": 4, "unit_price": 100}]),
        ).json()
        assert updated["doc_number"] == created["doc_number"]
        assert Decimal(str(updated["total"])) == Decimal("380")

        assert client.delete(f"/purchase-orders/{doc_id}").status_code == 200
        assert client.get(f"/purchase-orders/{doc_id}").status_code == 404

    def test_unknown_id_is_404(self, client, memory):
        assert client.get(f"/purchase-orders/{uuid.uuid4()}").status_code == 404

    @pytest.mark.parametrize("method", ["get", "delete"])
    def test_malformed_id_is_422(self, client, memory, method):
        assert getattr(client, method)("/purchase-orders/abc").status_code == 422

    def test_list_is_paged_summaries(self, client, memory):
        client.post("/purchase-orders", json=po_body())
        page = client.get("/purchase-orders", params={"limit": 10}).json()
        assert (page["limit"], page["offset"]) == (10, 0)
        assert page["items"][0]["total"] == "190.00"
        assert "lines" not in page["items"][0]

    def test_unknown_vendor_is_404(self, client, memory, monkeypatch):
        monkeypatch.setattr(document_routes, "get_vendor_name", lambda conn, vendor_id: None)
        resp = client.post("/purchase-orders", json=po_body())
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Vendor not found"
        assert memory.docs == {}

    def test_update_to_unknown_vendor_is_404(self, client, memory, monkeypatch):
        doc_id = client.post("/purchase-orders", json=po_body()).json()["id"]
        monkeypatch.setattr(document_routes, "get_vendor_name", lambda conn, vendor_id: None)
        assert client.put(f"/purchase-orders/{doc_id}", json=po_body()).status_code == 404

    def test_discount_percent_limited_to_two_places(self, client, memory):
        resp = client.post("/purchase-orders", json=po_body(discount_percent="12.345"))
        assert resp.status_code == 422
        assert memory.docs == {}

    def test_two_place_discount_percent_accepted(self, client, memory):
        data = client.post("/purchase-orders", json=po_body(discount_percent="12.5")).json()
        assert data["discount_amount"] == "25.00"

    def test_storage_failure_is_503(self, org_id, memory):
        def override():
            yield FakeConnection(fail=True)

        app.dependency_overrides[get_conn] = override
        try:
            resp = TestClient(app).post("/purchase-orders", json=po_body())
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 503
        assert memory.docs == {}

    def test_missing_org_context_is_400(self, client, memory, monkeypatch):
        from apps.api.settings import settings

        monkeypatch.setattr(settings, "ORG_ID", None)
        assert client.post("/purchase-orders", json=po_body()).status_code == 400


class TestSalesInvoices:
    def test_vat_added_after_discount(self, client, memory):
        body = {
            "client_id": CLIENT_ID,
            "doc_date": "2025-05-02",
            "discount_percent": 10,
            "apply_tax": True,
            "lines": [{"description": "Consulting", "quantity": 2, "unit_price": 100}],
        }
        data = client.post("/sales-invoices", json=body).json()
        assert data["doc_number"] == f"INV-ACM-{YEAR}-0001"
        assert Decimal(str(data["discount_amount"])) == Decimal("20")
        assert Decimal(str(data["tax"])) == Decimal("13.5")
        assert Decimal(str(data["total"])) == Decimal("193.5")

    def test_separate_series_from_purchase_orders(self, client, memory):
        client.post("/purchase-orders", json=po_body())
        body = {
            "client_id": CLIENT_ID,
            "doc_date": "2025-05-02",
            "lines": [{"quantity": 1, "unit_price": 50}],
        }
        assert client.post("/sales-invoices", json=body).json()["doc_number"] == f"INV-ACM-{YEAR}-0001"

    def test_unknown_client_is_404(self, client, memory, monkeypatch):
        monkeypatch.setattr(document_routes, "get_client_name", lambda conn, client_id: None)
        body = {
            "client_id": CLIENT_ID,
            "doc_date": "2025-05-02",
            "lines": [{"quantity": 1, "unit_price": 50}],
        }
        resp = client.post("/sales-invoices", json=body)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Client not found"
        assert memory.docs == {}


class TestVendorInvoices:
    def test_numbered_in_vendor_series_with_inclusive_tax(self, client, memory):
        body = {
            "vendor_id": VENDOR_ID,
            "doc_date": "2025-05-02",
            "lines": [{"description": "Toner", "quantity": 1, "unit_price": "107.5", "taxable": True}],
        }
        data = client.post("/vendor-invoices", json=body).json()
        assert data["doc_number"] == f"VINV-ZEN-{YEAR}-0001"
        assert data["subtotal"] == "100.00"
        assert data["tax"] == "7.50"
        assert data["total"] == "107.50"

    def test_unknown_vendor_is_404(self, client, memory, monkeypatch):
        monkeypatch.setattr(document_routes, "get_vendor_name", lambda conn, vendor_id: None)
        body = {
            "vendor_id": VENDOR_ID,
            "doc_date": "2025-05-02",
            "lines": [{"quantity": 1, "unit_price": 10}],
        }
        assert client.post("/vendor-invoices", json=body).status_code == 404

    def test_document_discount_percent_rejected(self, client, memory):
        body = {
            "vendor_id": VENDOR_ID,
            "doc_date": "2025-05-02",
            "discount_percent": 5,
            "lines": [{"quantity": 1, "unit_price": 10, "discount": 1}],
        }
        resp = client.post("/vendor-invoices", json=body)
        assert resp.status_code == 422
        assert "per-line discounts" in resp.text
        assert memory.docs == {}


# =============================================================================
# Payments
# =============================================================================


def receipt_body(**overrides):
    body = {
        "client_id": CLIENT_ID,
        "payment_date": "2025-06-01",
        "amount": "400.00",
        "payment_method": "Bank Transfer",
        "payment_type": "Part Payment",
        "total_amount": "1000.00",
    }
    body.update(overrides)
    return body


class TestPaymentReceipts:
    def test_create_computes_balance_due(self, client, monkeypatch):
        captured = {}

        def insert_receipt(conn, org_id, receipt_number, fields):
            captured.update(fields)
            return {"id": uuid.uuid4(), "receipt_number": receipt_number, **fields}

        monkeypatch.setattr(payment_routes, "get_company_name", lambda conn, org_id: "Acme Ltd")
        monkeypatch.setattr(payment_routes, "insert_receipt", insert_receipt)
        monkeypatch.setattr(payment_routes, "get_client_name", lambda conn, client_id: "Lagos Builders")
        resp = client.post("/payment-receipts", json=receipt_body())
        assert resp.status_code == 201
        data = resp.json()
        assert data["receipt_number"] == f"RCPT-ACM-{YEAR}-0001"
        assert data["amount_due"] == "600.00"
        assert captured["payment_type"] == "Part Payment"

    def test_unknown_client_is_404(self, client, monkeypatch):
        inserted = []
        monkeypatch.setattr(payment_routes, "get_client_name", lambda conn, client_id: None)
        monkeypatch.setattr(payment_routes, "insert_receipt", lambda *args: inserted.append(args))
        resp = client.post("/payment-receipts", json=receipt_body())
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Client not found"
        assert inserted == []

    def test_update_to_unknown_client_is_404(self, client, monkeypatch):
        monkeypatch.setattr(payment_routes, "get_client_name", lambda conn, client_id: None)
        resp = client.put(f"/payment-receipts/{uuid.uuid4()}", json=receipt_body())
        assert resp.status_code == 404

    def test_malformed_id_is_422(self, client):
        assert client.get("/payment-receipts/not-a-uuid").status_code == 422


def voucher_row(voucher_id, **overrides):
    row = {
        "id": voucher_id,
        "voucher_number": "PV-ACM-2025-0001",
        "payee_name": "Zenith Supplies",
        "voucher_date": date(2025, 6, 1),
        "amount": Decimal("1234.56"),
        "payment_method": "Cheque",
    }
    row.update(overrides)
    return row


class TestPaymentVouchers:
    def test_get_includes_amount_in_words(self, client, monkeypatch):
        voucher_id = uuid.uuid4()
        monkeypatch.setattr(payment_routes, "get_voucher", lambda conn, vid: voucher_row(voucher_id))
        data = client.get(f"/payment-vouchers/{voucher_id}").json()
        assert data["amount"] == "1234.56"
        assert data["amount_display"] == "₦1,234.56"
        assert data["amount_in_words"].startswith("One thousand two hundred and thirty-four naira")

    def test_list_is_paged(self, client, monkeypatch):
        monkeypatch.setattr(
            payment_routes,
            "list_vouchers",
            lambda conn, limit, offset: [voucher_row(uuid.uuid4(), amount=Decimal("250"))],
        )
        page = client.get("/payment-vouchers").json()
        assert page["limit"] == 50
        assert page["items"][0]["amount"] == "250.00"

    def test_create_uses_voucher_series(self, client, monkeypatch):
        monkeypatch.setattr(payment_routes, "get_company_name", lambda conn, org_id: "Acme Ltd")
        monkeypatch.setattr(
            payment_routes,
            "insert_voucher",
            lambda conn, org_id, number, fields: {"id": uuid.uuid4(), "voucher_number": number, **fields},
        )
        body = {
            "payee_name": "Zenith Supplies",
            "voucher_date": "2025-06-01",
            "amount": "250.00",
            "payment_method": "Cheque",
        }
        data = client.post("/payment-vouchers", json=body).json()
        assert data["voucher_number"] == f"PV-ACM-{YEAR}-0001"

    def test_malformed_id_is_422(self, client):
        assert client.delete("/payment-vouchers/42").status_code == 422


# =============================================================================
# Totals preview
# =============================================================================


class TestTotalsPreview:
    def test_preview(self, client):
        body = {
            "doc_type": "sales_invoice",
            "discount_percent": 10,
            "apply_tax": True,
            "lines": [{"quantity": 2, "unit_price": 100}],
        }
        data = client.post("/totals/preview", json=body).json()
        assert data["grand_total"] == "193.50"
        assert data["grand_total_display"] == "₦193.50"

    def test_empty_preview_is_zero(self, client):
        data = client.post("/totals/preview", json={"doc_type": "purchase_order"}).json()
        assert data["subtotal"] == "0.00"
        assert data["grand_total"] == "0.00"
        assert data["grand_total_in_words"] == "zero naira only"

    def test_payment_documents_rejected(self, client):
        resp = client.post("/totals/preview", json={"doc_type": "payment_voucher"})
        assert resp.status_code == 400

    def test_negative_price_is_422(self, client):
        body = {"doc_type": "purchase_order", "lines": [{"quantity": 1, "unit_price": -5}]}
        resp = client.post("/totals/preview", json=body)
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["code"] == "INVALID_LINE_ITEM"


# =============================================================================
# Parties, company profile and dashboard
# =============================================================================


class TestVendors:
    def test_create_and_missing(self, client, monkeypatch):
        from apps.api.routes import vendors as vendor_routes

        monkeypatch.setattr(
            vendor_routes,
            "create_vendor",
            lambda conn, org_id, fields: {"id": uuid.UUID(VENDOR_ID), **fields},
        )
        monkeypatch.setattr(vendor_routes, "get_vendor", lambda conn, vendor_id: None)

        resp = client.post("/vendors", json={"company_name": "Zenith Supplies", "tin": "1234-0001"})
        assert resp.status_code == 201
        assert resp.json()["id"] == VENDOR_ID
        assert resp.json()["tin"] == "1234-0001"

        assert client.get(f"/vendors/{uuid.uuid4()}").status_code == 404

    def test_blank_name_rejected(self, client):
        assert client.post("/vendors", json={"company_name": ""}).status_code == 422

    def test_malformed_id_is_422(self, client):
        assert client.get("/vendors/abc").status_code == 422
        assert client.delete("/clients/abc").status_code == 422


def profile_body(**overrides):
    body = {
        "name": "Bright Star Logistics",
        "address": "12 Marina, Lagos",
        "tin": "12345678-0001",
        "email": "accounts@brightstar.ng",
        "phone": "+234 800 000 0000",
        "signatories": [{"name": "Ada Obi", "title": "Managing Director"}],
        "bank_accounts": [
            {"bank_name": "Zenith Bank", "account_name": "Bright Star Logistics", "account_number": "1012345678"},
        ],
    }
    body.update(overrides)
    return body


class TestCompanyProfile:
    @pytest.fixture
    def profiles(self, monkeypatch, org_id):
        from apps.api.routes import company as company_routes

        stored = {}

        def get_company_profile(conn, oid):
            return stored.get(oid)

        def update_company_profile(conn, oid, fields):
            if oid != org_id:
                return False
            stored[oid] = {"id": uuid.UUID(org_id), **fields}
            return True

        monkeypatch.setattr(company_routes, "get_company_profile", get_company_profile)
        monkeypatch.setattr(company_routes, "update_company_profile", update_company_profile)
        return stored

    def test_missing_profile_is_404(self, client, profiles):
        assert client.get("/company-profile").status_code == 404

    def test_put_then_get(self, client, profiles):
        resp = client.put("/company-profile", json=profile_body())
        assert resp.status_code == 200
        data = client.get("/company-profile").json()
        assert data["name"] == "Bright Star Logistics"
        assert data["signatories"] == [{"name": "Ada Obi", "title": "Managing Director"}]
        assert data["bank_accounts"][0]["account_number"] == "1012345678"

    def test_unknown_org_is_404(self, client, profiles, monkeypatch):
        from apps.api.settings import settings

        monkeypatch.setattr(settings, "ORG_ID", str(uuid.uuid4()))
        assert client.put("/company-profile", json=profile_body()).status_code == 404

    def test_blank_name_rejected(self, client, profiles):
        assert client.put("/company-profile", json=profile_body(name="")).status_code == 422

    def test_signatory_needs_title(self, client, profiles):
        body = profile_body(signatories=[{"name": "Ada Obi", "title": ""}])
        assert client.put("/company-profile", json=body).status_code == 422
        assert profiles == {}

    def test_renamed_company_numbers_in_new_series(self, client, memory, profiles, monkeypatch):
        client.put("/company-profile", json=profile_body(name="Kestrel Works"))
        monkeypatch.setattr(
            document_routes,
            "get_company_name",
            lambda conn, org_id: profiles[org_id]["name"],
        )
        assert client.post("/purchase-orders", json=po_body()).json()["doc_number"] == f"PO-KES-{YEAR}-0001"


class TestDashboard:
    def test_overview_money_is_two_decimal_strings(self, client, monkeypatch):
        from apps.api.routes import dashboard as dashboard_routes

        monkeypatch.setattr(dashboard_routes, "document_stats", lambda conn: [{
            "doc_type": "sales_invoice",
            "count": 2,
            "total": Decimal("300.00"),
            "tax": Decimal("20.00"),
            "unpaid_count": 1,
            "unpaid_total": Decimal("100.00"),
        }])
        monkeypatch.setattr(dashboard_routes, "payment_stats", lambda conn: {
            "payment_voucher": {"count": 0, "total": Decimal("0")},
            "payment_receipt": {"count": 1, "total": Decimal("200.00")},
        })
        data = client.get("/dashboard").json()
        assert data["receivables"] == {"count": 1, "total": "100.00"}
        assert data["payables"] == {"count": 0, "total": "0.00"}
        assert data["taxes"] == {"vat_on_sales": "20.00", "vat_on_purchases": "0.00", "withholding": "0.00"}
        assert data["payments"]["payment_voucher"] == {"count": 0, "total": "0.00"}
        assert data["documents"]["purchase_order"]["count"] == 0

    def test_financial_summary(self, client, monkeypatch):
        from apps.api.routes import dashboard as dashboard_routes

        monkeypatch.setattr(dashboard_routes, "income_rows", lambda conn: [
            {"created_at": date(2025, 1, 3), "amount": Decimal("10.50")},
        ])
        monkeypatch.setattr(dashboard_routes, "expense_rows", lambda conn: [])
        assert client.get("/dashboard/financial-summary").json() == [
            {"name": "2025-01", "income": "10.50", "expenses": "0.00"},
        ]


class TestLifespan:
    def test_pool_closed_on_shutdown(self, monkeypatch):
        from apps.api import main

        closed = []
        monkeypatch.setattr(main, "close_pool", lambda: closed.append(True))
        with TestClient(app):
            assert closed == []
        assert closed == [True]
