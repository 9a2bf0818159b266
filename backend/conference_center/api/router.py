"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from conference_center.api.routes import customers, facilities, bookings, contracts

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(customers.router)
api_router.include_router(facilities.router)
api_router.include_router(bookings.router)
api_router.include_router(contracts.router)
