"""
API v1 Routes
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from goldsmith.api.v1 import admin_bills, admin_receipts, bills, clients, receipts

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(clients.router)
api_v1_router.include_router(receipts.router)
api_v1_router.include_router(bills.router)
api_v1_router.include_router(admin_receipts.router)
api_v1_router.include_router(admin_bills.router)

# Esportazione
__all__ = ["api_v1_router"]
