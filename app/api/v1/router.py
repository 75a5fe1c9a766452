# app/api/v1/router.py
from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    plans,
    companies,
    company,
    professionals,
    clients,
    services,
    appointments,
    tasks,
    coupons,
    support,
)

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(plans.router)
api_router.include_router(companies.router)
api_router.include_router(company.router)
api_router.include_router(professionals.router)
api_router.include_router(clients.router)
api_router.include_router(services.router)
api_router.include_router(appointments.router)
api_router.include_router(tasks.router)
api_router.include_router(coupons.router)
api_router.include_router(support.router)
api_router.include_router(support.admin_router)
