"""
Utility functions for Company Management
"""
import logging

from AssetManagement.models import AssetCategory

logger = logging.getLogger(__name__)

DEFAULT_ASSET_CATEGORIES = [
    ("Mobiliário", "Móveis e utensílios"),
    ("TI", "Equipamentos de tecnologia da informação"),
    ("Maquinário", "Máquinas e equipamentos industriais"),
    ("Veículos", "Veículos e meios de transporte"),
    ("Ferramentas", "Ferramentas e instrumentos"),
]


def create_default_company_resources(company):
    """
    Create default resources (asset categories) for a newly registered company.

    Args:
        company: Company instance

    Returns:
        list of the AssetCategory rows that were created
    """
    created = []
    for name, description in DEFAULT_ASSET_CATEGORIES:
        category, was_created = AssetCategory.objects.get_or_create(
            company=company,
            name=name,
            defaults={'description': description, 'is_active': True}
        )
        if was_created:
            created.append(category)

    logger.info(f"Created {len(created)} default asset categories for company {company.id}")
    return created
