"""
API Routes
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Modulo per l'aggregazione dei router versionati.
"""

from goldsmith.api.v1 import api_v1_router

# Esportazione router
__all__ = ["api_v1_router"]
