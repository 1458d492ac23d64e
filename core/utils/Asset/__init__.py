# Asset utilities
from .asset_export_service import AssetExportService, build_asset_rows
from .qr_utils import build_qr_payload, parse_qr_payload, generate_qr_png

__all__ = [
    'AssetExportService',
    'build_asset_rows',
    'build_qr_payload',
    'parse_qr_payload',
    'generate_qr_png',
]
