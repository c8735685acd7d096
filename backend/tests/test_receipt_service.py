"""
Tests round-trip di ReceiptService su SQLite in memoria.
"""

import datetime
import uuid

import pytest

from goldsmith.core.exceptions import BusinessValidationError, NotFoundError
from goldsmith.schemas.admin_receipt import AdminReceiptCreate
from goldsmith.schemas.client import ClientCreate, ClientUpdate
from goldsmith.schemas.receipt import ReceiptCreate, ReceiptRead, ReceiptUpdate
from goldsmith.services.admin_receipt_service import AdminReceiptService
from goldsmith.services.client_service import ClientService
from goldsmith.services.receipt_service import ReceiptService


async def create_client(db, client_name="John Smith", shop_name="Gold Palace", phone="555-0101"):
    return await ClientService().create(
        db,
        ClientCreate(
            shop_name=shop_name,
            client_name=client_name,
            phone_number=phone,
            address="12 Market Street",
        ),
    )


def receipt_payload(client_id, **overrides):
    payload = {
        "clientId": str(client_id),
        "metalType": "Gold",
        "issueDate": "2024-03-15",
        "items": [
            {"itemName": "Ring", "tag": "R1", "grossWt": "10", "stoneWt": "2", "meltingTouch": "91.6", "stoneAmt": "150"},
        ],
    }
    payload.update(overrides)
    return ReceiptCreate.model_validate(payload)


@pytest.fixture
def service():
    return ReceiptService()


class TestCreate:
    """Tests per la creazione delle ricevute."""

    async def test_derived_fields_and_totals(self, service, db_session):
        client = await create_client(db_session)

        bill = await service.create(db_session, receipt_payload(client.id))

        assert bill.items == [
            {
                "itemName": "Ring",
                "tag": "R1",
                "grossWt": 10.0,
                "stoneWt": 2.0,
                "meltingTouch": 91.6,
                "stoneAmt": 150.0,
                "netWt": 8.0,
                "finalWt": 7.328,
            }
        ]
        assert bill.totals == {
            "grossWt": 10.0,
            "stoneWt": 2.0,
            "netWt": 8.0,
            "finalWt": 7.328,
            "stoneAmt": 150.0,
        }
        assert bill.client_id == client.id
        assert bill.client_info == {
            "clientName": "John Smith",
            "shopName": "Gold Palace",
            "phoneNumber": "555-0101",
        }

    async def test_blank_rows_are_dropped(self, service, db_session):
        client = await create_client(db_session)
        items = [
            {"itemName": "", "tag": "", "grossWt": "", "stoneWt": "", "meltingTouch": "", "stoneAmt": ""},
            {"itemName": "Chain", "grossWt": "5"},
            {},
        ]

        bill = await service.create(db_session, receipt_payload(client.id, items=items))

        assert len(bill.items) == 1
        assert bill.items[0]["itemName"] == "Chain"
        assert bill.items[0]["finalWt"] == 0.0
        assert bill.totals["grossWt"] == 5.0

    async def test_at_least_one_item_required(self, service, db_session):
        client = await create_client(db_session)

        with pytest.raises(BusinessValidationError):
            await service.create(db_session, receipt_payload(client.id, items=[{"itemName": " "}]))

    async def test_unknown_client_rejected(self, service, db_session):
        with pytest.raises(BusinessValidationError):
            await service.create(db_session, receipt_payload(uuid.uuid4()))


class TestReadUpdateDelete:
    """Tests per lettura, aggiornamento e cancellazione."""

    async def test_round_trip(self, service, db_session, session_factory):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))
        await db_session.commit()
        created = ReceiptRead.model_validate(bill).model_dump(mode="json")

        async with session_factory() as other_session:
            fetched = await service.get_by_id(other_session, str(bill.id))
            read_back = ReceiptRead.model_validate(fetched).model_dump(mode="json")

        assert read_back == created
        assert read_back["issue_date"].startswith("2024-03-15T00:00:00")

    async def test_get_malformed_and_missing(self, service, db_session):
        with pytest.raises(BusinessValidationError):
            await service.get_by_id(db_session, "12345")
        with pytest.raises(NotFoundError):
            await service.get_by_id(db_session, uuid.uuid4())

    async def test_update_items_recomputes_totals(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))

        updated = await service.update(
            db_session,
            bill.id,
            ReceiptUpdate.model_validate(
                {
                    "items": [
                        {"itemName": "Ring", "grossWt": "10", "stoneWt": "2", "meltingTouch": "91.6"},
                        {"itemName": "Bangle", "grossWt": "20", "meltingTouch": "75"},
                    ]
                }
            ),
        )

        assert updated.totals["grossWt"] == 30.0
        assert updated.totals["finalWt"] == 22.328
        assert updated.totals["stoneAmt"] == 0.0
        assert updated.metal_type == "Gold"

    async def test_saving_twice_keeps_totals(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))
        totals = dict(bill.totals)

        updated = await service.update(db_session, bill.id, ReceiptUpdate.model_validate({"metalType": "Silver"}))

        assert updated.metal_type == "Silver"
        assert updated.totals == totals

    async def test_update_to_unknown_client_rejected(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))

        with pytest.raises(BusinessValidationError):
            await service.update(db_session, bill.id, ReceiptUpdate(client_id=uuid.uuid4()))

    async def test_delete(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))

        deleted_id = await service.delete(db_session, str(bill.id))

        assert deleted_id == bill.id
        with pytest.raises(NotFoundError):
            await service.get_by_id(db_session, bill.id)


class TestClientLink:
    """Tests sul legame tra ricevute e clienti."""

    async def test_deleting_client_keeps_receipt(self, service, db_session, session_factory):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))
        await db_session.commit()

        await ClientService().delete(db_session, client.id)
        await db_session.commit()

        async with session_factory() as other_session:
            orphan = await service.get_by_id(other_session, bill.id)

        assert orphan.client_id is None
        assert orphan.client_name == "John Smith"
        assert ReceiptRead.model_validate(orphan).client_info.client_name == "John Smith"

    async def test_client_update_propagates_to_receipts(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))

        await ClientService().update(db_session, client.id, ClientUpdate(client_name="Johnny Smith"))
        refreshed = await service.get_by_id(db_session, bill.id)

        assert refreshed.client_name == "Johnny Smith"

    async def test_client_update_refreshes_bill_timestamps(self, service, db_session, set_timestamps):
        old = datetime.datetime(2020, 1, 1)
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))
        admin_bill = await AdminReceiptService().create(db_session, AdminReceiptCreate(client_id=client.id))
        for record in (bill, admin_bill):
            await set_timestamps(record, created_at=old, updated_at=old)

        await ClientService().update(db_session, client.id, ClientUpdate(shop_name="Gold Empire"))

        for record in (bill, admin_bill):
            await db_session.refresh(record)
            assert record.shop_name == "Gold Empire"
            assert record.updated_at.replace(tzinfo=None) > old

        today = datetime.datetime.now(datetime.timezone.utc).date().isoformat()
        found = await AdminReceiptService().search(db_session, date=today)
        assert [b.id for b in found] == [admin_bill.id]

    async def test_sync_client_info(self, service, db_session):
        client = await create_client(db_session)
        bill = await service.create(db_session, receipt_payload(client.id))
        bill.client_name = "Outdated"
        await db_session.flush()

        updated = await service.sync_client_info(db_session)

        assert updated == 1
        assert bill.client_name == "John Smith"
        assert await service.sync_client_info(db_session) == 0


class TestSearch:
    """Tests per la ricerca ricevute."""

    async def test_filters(self, service, db_session):
        smith = await create_client(db_session)
        other = await create_client(db_session, client_name="Mary Jones", shop_name="Silver Star", phone="555-0202")
        await service.create(db_session, receipt_payload(smith.id, issueDate="2024-01-10"))
        await service.create(db_session, receipt_payload(smith.id, metalType="Silver", issueDate="2024-01-31T18:00:00Z"))
        await service.create(db_session, receipt_payload(other.id, issueDate="2024-02-01"))

        by_name = await service.search(db_session, client_name="SMITH")
        assert {b.client_name for b in by_name} == {"John Smith"}
        assert [b.metal_type for b in by_name] == ["Silver", "Gold"]

        by_metal = await service.search(db_session, metal_type="silv")
        assert len(by_metal) == 1

        january = await service.search(db_session, from_date="2024-01-01", to_date="2024-01-31")
        assert len(january) == 2

        by_client = await service.search(db_session, client_id=str(other.id))
        assert [b.client_name for b in by_client] == ["Mary Jones"]

        by_day = await service.search(db_session, issue_date="2024-01-31")
        assert [b.metal_type for b in by_day] == ["Silver"]

        by_phone = await service.search(db_session, phone_number="0202", shop_name="star")
        assert len(by_phone) == 1

    async def test_ordering(self, service, db_session, set_timestamps):
        client = await create_client(db_session)
        january = await service.create(db_session, receipt_payload(client.id, issueDate="2024-01-10"))
        february_first = await service.create(db_session, receipt_payload(client.id, issueDate="2024-02-01"))
        february_second = await service.create(db_session, receipt_payload(client.id, issueDate="2024-02-01"))
        await set_timestamps(january, created_at=datetime.datetime(2024, 3, 1, 9, 0))
        await set_timestamps(february_first, created_at=datetime.datetime(2024, 2, 1, 10, 0))
        await set_timestamps(february_second, created_at=datetime.datetime(2024, 2, 1, 11, 0))

        by_issue_date = await service.search(db_session)
        assert [b.id for b in by_issue_date] == [february_second.id, february_first.id, january.id]

        by_creation = await service.search(db_session, newest_created_first=True)
        assert [b.id for b in by_creation] == [january.id, february_second.id, february_first.id]

    async def test_invalid_filters(self, service, db_session):
        with pytest.raises(BusinessValidationError):
            await service.search(db_session, client_id="abc")
        with pytest.raises(BusinessValidationError):
            await service.search(db_session, from_date="yesterday")
