from app.services.gateway_config_service import GatewayConfigService
from app.services.endpoint_service import EndpointService
from app.services.sequence_service import SequenceService
from app.services.import_service import ImportService
from app.services.export_service import ExportService

__all__ = [
    "GatewayConfigService",
    "EndpointService",
    "SequenceService",
    "ImportService",
    "ExportService",
]
