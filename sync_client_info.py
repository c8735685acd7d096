import asyncio
import sys
import os

# Aggiungi backend/ alla PYTHONPATH per importare goldsmith.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from goldsmith.core.database import AsyncSessionLocal, engine
from goldsmith.services.receipt_service import ReceiptService

async def sync():
    print("Riallineamento dati cliente sulle ricevute...")
    async with AsyncSessionLocal() as session:
        updated = await ReceiptService().sync_client_info(session)
        await session.commit()
    await engine.dispose()
    print(f"Ricevute aggiornate: {updated}")

if __name__ == "__main__":
    asyncio.run(sync())
