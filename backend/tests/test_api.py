"""
Tests degli endpoint HTTP (httpx + ASGITransport, SQLite in memoria).
"""

import threading
import uuid

import pytest

from goldsmith.api.v1 import bills
from goldsmith.core.exceptions import StorageError
from goldsmith.main import app

API = "/api/v1"


async def post_client(api_client, client_name="John Smith", shop_name="Gold Palace", phone="555-0101"):
    response = await api_client.post(
        f"{API}/clients",
        json={
            "shopName": shop_name,
            "clientName": client_name,
            "phoneNumber": phone,
            "address": "12 Market Street",
        },
    )
    assert response.status_code == 201
    return response.json()


async def post_receipt(api_client, client_id, **overrides):
    payload = {
        "clientId": client_id,
        "metalType": "Gold",
        "issueDate": "2024-03-15",
        "items": [
            {"itemName": "Ring", "tag": "R1", "grossWt": "10", "stoneWt": "2", "meltingTouch": "91.6", "stoneAmt": "150"},
            {"itemName": "", "tag": "", "grossWt": "", "stoneWt": "", "meltingTouch": "", "stoneAmt": ""},
        ],
    }
    payload.update(overrides)
    return await api_client.post(f"{API}/receipts", json=payload)


class TestHealth:

    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestClientsApi:
    """Tests per gli endpoint /clients."""

    async def test_create_returns_camel_case(self, api_client):
        body = await post_client(api_client)

        assert uuid.UUID(body["id"])
        assert body["shopName"] == "Gold Palace"
        assert body["clientName"] == "John Smith"
        assert "createdAt" in body and "updatedAt" in body
        assert "client_name" not in body

    async def test_missing_field_is_400(self, api_client):
        response = await api_client.post(f"{API}/clients", json={"shopName": "Gold Palace"})

        assert response.status_code == 400
        body = response.json()
        assert body["errorCode"] == "VALIDATION_ERROR"
        assert "clientName" in body["detail"]

    async def test_search_by_name_case_insensitive(self, api_client):
        await post_client(api_client, client_name="John Smith")
        await post_client(api_client, client_name="Anna SMITHSON")
        await post_client(api_client, client_name="Mary Jones")

        response = await api_client.get(f"{API}/clients", params={"clientName": "smith"})

        assert response.status_code == 200
        names = sorted(c["clientName"] for c in response.json())
        assert names == ["Anna SMITHSON", "John Smith"]

    async def test_get_update_delete(self, api_client):
        created = await post_client(api_client)
        url = f"{API}/clients/{created['id']}"

        assert (await api_client.get(url)).json()["clientName"] == "John Smith"

        updated = await api_client.put(url, json={"phoneNumber": "555-9999"})
        assert updated.status_code == 200
        assert updated.json()["phoneNumber"] == "555-9999"
        assert updated.json()["clientName"] == "John Smith"

        deleted = await api_client.delete(url)
        assert deleted.status_code == 200
        assert deleted.json() == {"id": created["id"], "deleted": True}

        missing = await api_client.get(url)
        assert missing.status_code == 404
        assert missing.json()["errorCode"] == "RESOURCE_NOT_FOUND"

    async def test_malformed_id_is_400(self, api_client):
        response = await api_client.get(f"{API}/clients/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"


class TestReceiptsApi:
    """Tests per gli endpoint /receipts e /bills."""

    async def test_create_and_read_back(self, api_client):
        client = await post_client(api_client)

        response = await post_receipt(api_client, client["id"])

        assert response.status_code == 201
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["netWt"] == 8.0
        assert body["items"][0]["finalWt"] == 7.328
        assert body["totals"] == {"grossWt": 10.0, "stoneWt": 2.0, "netWt": 8.0, "finalWt": 7.328, "stoneAmt": 150.0}
        assert body["clientInfo"]["clientName"] == "John Smith"
        assert body["clientId"] == client["id"]

        fetched = await api_client.get(f"{API}/receipts/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == body

    async def test_client_totals_are_ignored(self, api_client):
        client = await post_client(api_client)

        response = await post_receipt(api_client, client["id"], totals={"grossWt": 999})

        assert response.json()["totals"]["grossWt"] == 10.0

    async def test_no_items_is_400(self, api_client):
        client = await post_client(api_client)

        response = await post_receipt(api_client, client["id"], items=[])

        assert response.status_code == 400

    async def test_unknown_client_is_400(self, api_client):
        response = await post_receipt(api_client, str(uuid.uuid4()))

        assert response.status_code == 400

    async def test_deleted_client_receipt_still_readable(self, api_client):
        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()

        await api_client.delete(f"{API}/clients/{client['id']}")
        response = await api_client.get(f"{API}/receipts/{receipt['id']}")

        assert response.status_code == 200
        assert response.json()["clientId"] is None
        assert response.json()["clientInfo"]["clientName"] == "John Smith"

    async def test_search_to_date_includes_whole_day(self, api_client):
        client = await post_client(api_client)
        await post_receipt(api_client, client["id"], issueDate="2024-01-31T18:30:00Z")
        await post_receipt(api_client, client["id"], issueDate="2024-02-01")

        response = await api_client.get(f"{API}/receipts", params={"toDate": "2024-01-31"})

        assert response.status_code == 200
        assert len(response.json()) == 1

    async def test_update_recomputes(self, api_client):
        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()

        response = await api_client.put(
            f"{API}/receipts/{receipt['id']}",
            json={"items": [{"itemName": "Bangle", "grossWt": "20", "meltingTouch": "75"}]},
        )

        assert response.status_code == 200
        assert response.json()["totals"]["finalWt"] == 15.0

    async def test_bills_list_and_delete(self, api_client):
        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()

        listed = await api_client.get(f"{API}/bills", params={"shopName": "gold", "issueDate": "2024-03-15"})
        assert [b["id"] for b in listed.json()] == [receipt["id"]]

        deleted = await api_client.delete(f"{API}/bills/{receipt['id']}")
        assert deleted.json()["deleted"] is True
        assert (await api_client.delete(f"{API}/bills/{receipt['id']}")).status_code == 404

    async def test_pdf_download(self, api_client):
        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()

        class FakePdfService:
            def generate_receipt_pdf(self, bill):
                return b"%PDF-1.7 fake"

        app.dependency_overrides[bills.get_pdf_service] = lambda: FakePdfService()
        response = await api_client.get(f"{API}/bills/{receipt['id']}/download")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "attachment" in response.headers["content-disposition"]
        assert response.content == b"%PDF-1.7 fake"

    async def test_pdf_rendered_off_event_loop(self, api_client):
        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()
        render_threads = []

        class RecordingPdfService:
            def generate_receipt_pdf(self, bill):
                render_threads.append(threading.current_thread())
                return b"%PDF-1.7 fake"

        app.dependency_overrides[bills.get_pdf_service] = lambda: RecordingPdfService()
        response = await api_client.get(f"{API}/bills/{receipt['id']}/download")

        assert response.status_code == 200
        assert len(render_threads) == 1
        assert render_threads[0] is not threading.current_thread()

    async def test_out_of_range_number_is_400(self, api_client):
        client = await post_client(api_client)
        items = [{"itemName": "Ring", "grossWt": "1e30", "stoneWt": "0", "meltingTouch": "100"}]

        response = await post_receipt(api_client, client["id"], items=items)

        assert response.status_code == 400
        body = response.json()
        assert body["errorCode"] == "VALIDATION_ERROR"
        assert "grossWt" in body["detail"]

    async def test_receipts_newest_issue_date_first(self, api_client):
        client = await post_client(api_client)
        older = (await post_receipt(api_client, client["id"], issueDate="2024-01-10")).json()
        newer = (await post_receipt(api_client, client["id"], issueDate="2024-02-01")).json()

        response = await api_client.get(f"{API}/receipts", params={"clientId": client["id"]})

        assert [r["id"] for r in response.json()] == [newer["id"], older["id"]]


class TestAdminReceiptsApi:
    """Tests per gli endpoint /admin-receipts e /admin-bills."""

    async def test_two_sided_flow(self, api_client):
        client = await post_client(api_client)

        created = await api_client.post(
            f"{API}/admin-receipts",
            json={
                "clientId": client["id"],
                "given": {
                    "date": "2024-03-10",
                    "items": [{"productName": "Gold bar", "pureWeight": "10", "purePercent": "92", "melting": "0"}],
                },
            },
        )
        assert created.status_code == 201
        body = created.json()
        assert body["status"] == "incomplete"
        assert body["given"]["items"][0]["total"] == 0.0

        updated = await api_client.put(
            f"{API}/admin-receipts/{body['id']}",
            json={
                "received": {
                    "date": "2024-03-20",
                    "items": [{"productName": "Necklace", "finalOrnamentsWt": "12.5", "stoneWeight": "0.5", "makingChargePercent": "10"}],
                }
            },
        )
        assert updated.status_code == 200
        data = updated.json()
        assert data["status"] == "complete"
        assert data["given"]["items"] == body["given"]["items"]
        assert data["received"]["totals"]["total"] == 13.2
        assert data["balance"] == pytest.approx(-13.2)

        listed = await api_client.get(f"{API}/admin-bills", params={"date": "2024-03-20"})
        assert [b["id"] for b in listed.json()] == [body["id"]]

        by_status = await api_client.get(f"{API}/admin-receipts", params={"status": "complete"})
        assert len(by_status.json()) == 1

        deleted = await api_client.delete(f"{API}/admin-bills/{body['id']}")
        assert deleted.status_code == 200
        assert (await api_client.get(f"{API}/admin-receipts/{body['id']}")).status_code == 404

    async def test_client_required(self, api_client):
        response = await api_client.post(f"{API}/admin-receipts", json={"given": {"items": []}})

        assert response.status_code == 400

    async def test_invalid_status_filter_is_400(self, api_client):
        response = await api_client.get(f"{API}/admin-receipts", params={"status": "done"})

        assert response.status_code == 400


class TestErrorMapping:
    """Tests per la conversione delle eccezioni in risposte HTTP."""

    async def test_storage_error_is_generic_500(self, api_client):
        class BrokenReceiptService:
            async def search(self, db, **filters):
                raise StorageError()

        app.dependency_overrides[bills.get_receipt_service] = lambda: BrokenReceiptService()
        response = await api_client.get(f"{API}/bills")

        assert response.status_code == 500
        assert response.json() == {"detail": "Errore del database", "errorCode": "STORAGE_ERROR"}

    async def test_unhandled_error_is_500(self, api_client):
        class FailingPdfService:
            def generate_receipt_pdf(self, bill):
                raise RuntimeError("pango missing")

        client = await post_client(api_client)
        receipt = (await post_receipt(api_client, client["id"])).json()
        app.dependency_overrides[bills.get_pdf_service] = lambda: FailingPdfService()

        response = await api_client.get(f"{API}/bills/{receipt['id']}/download")

        assert response.status_code == 500
        assert response.json()["detail"] == "Errore interno del server"
        assert "pango" not in response.text
