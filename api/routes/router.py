from fastapi import APIRouter

from api.routes import health
from packages.billing.routes import orders, payments
from packages.generations.routes import history
from packages.membership.routes import membership
from packages.quota.routes import quota
from packages.users.routes import me

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Membership catalog is public; the subscription endpoint checks auth itself
api_router.include_router(membership.router, prefix="/membership", tags=["membership"])

# Gateway notifications and the mock confirmation are unauthenticated;
# /pay checks auth itself
api_router.include_router(payments.router, prefix="/payment", tags=["payment"])

# Authenticated routes (auth enforced per endpoint)
api_router.include_router(me.router, prefix="/auth", tags=["auth"])
api_router.include_router(orders.router, prefix="/order", tags=["order"])
api_router.include_router(quota.router, prefix="/quota", tags=["quota"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
