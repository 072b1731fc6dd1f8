from app.models.gateway_config import GatewayConfig
from app.models.gateway_endpoint import GatewayEndpoint
from app.models.export_cache import ExportCache
from app.models.import_history import ImportHistory, ImportStatus

__all__ = [
    "GatewayConfig",
    "GatewayEndpoint",
    "ExportCache",
    "ImportHistory",
    "ImportStatus",
]
