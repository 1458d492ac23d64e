from .analysis import analyze_asset, suggest_category
from .reports import generate_report

__all__ = ['analyze_asset', 'suggest_category', 'generate_report']
