from app.schemas.gateway_config import (
    GatewayConfigCreate,
    GatewayConfigUpdate,
    GatewayConfigResponse,
    GatewayConfigDetailResponse,
)
from app.schemas.endpoint import (
    EndpointCreate,
    EndpointUpdate,
    EndpointResponse,
    ReorderEndpointsRequest,
)
from app.schemas.transfer import (
    ImportResult,
    ImportHistoryResponse,
    ExportStatusResponse,
)
from app.schemas.common import (
    ResponseBase,
    ErrorResponse,
    PaginatedResponse,
)

__all__ = [
    "GatewayConfigCreate",
    "GatewayConfigUpdate",
    "GatewayConfigResponse",
    "GatewayConfigDetailResponse",
    "EndpointCreate",
    "EndpointUpdate",
    "EndpointResponse",
    "ReorderEndpointsRequest",
    "ImportResult",
    "ImportHistoryResponse",
    "ExportStatusResponse",
    "ResponseBase",
    "ErrorResponse",
    "PaginatedResponse",
]
