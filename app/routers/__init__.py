from app.routers.gateway_router import router as gateway_router
from app.routers.endpoint_router import router as endpoint_router
from app.routers.transfer_router import router as transfer_router
from app.routers.health_router import router as health_router

__all__ = ["gateway_router", "endpoint_router", "transfer_router", "health_router"]
