"""
Report generator: keyword-matched aggregation over the company's data plus
an LLM-written title and insights
"""

import json
import logging
from decimal import Decimal

from AIAssistant.exceptions import LLMServiceError
from AssetManagement.models import Asset
from MaintenanceControl.models import AssetMaintenance
from .llm_client import chat_completion, parse_json_content

logger = logging.getLogger(__name__)

INSIGHTS_SYSTEM_PROMPT = (
    'Você é um analista de dados especializado em gestão de ativos. '
    'Gere insights valiosos e títulos informativos.'
)

DEFAULT_TITLE = "Relatório de Ativos"
DEFAULT_INSIGHTS = ["Dados processados com sucesso"]
MAINTENANCE_REPORT_LIMIT = 50

INSIGHTS_PROMPT = """
Baseado nos dados do relatório abaixo e no prompt original do usuário, gere:
1. Um título apropriado para o relatório
2. 2-3 insights principais sobre os dados

Prompt original: "{prompt}"

Dados do relatório:
{data}

Responda em formato JSON:
{{
  "title": "título do relatório",
  "insights": ["insight 1", "insight 2", "insight 3"]
}}
"""


def _group(rows, empty_label):
    """rows: iterable of (name, value) -> [{name, value, total}] in first-seen order"""
    grouped = {}
    for name, value in rows:
        bucket = grouped.setdefault(name or empty_label, {'value': Decimal('0'), 'total': 0})
        bucket['value'] += value or Decimal('0')
        bucket['total'] += 1
    return [
        {'name': name, 'value': str(bucket['value'].quantize(Decimal('0.01'))), 'total': bucket['total']}
        for name, bucket in grouped.items()
    ]


def pick_report_kind(prompt):
    text = prompt.lower()
    if 'categoria' in text or 'category' in text:
        return 'category'
    if 'manutenção' in text or 'manutencao' in text or 'maintenance' in text:
        return 'maintenance'
    return 'status'


def aggregate_report_data(company, kind):
    assets = Asset.objects.filter(company_id=company.id, is_active=True)

    if kind == 'category':
        rows = assets.order_by('category__name').values_list('category__name', 'purchase_value')
        return _group(rows, 'Sem categoria')

    if kind == 'maintenance':
        latest = AssetMaintenance.objects.filter(
            asset__company_id=company.id, asset__is_active=True
        ).order_by('-created_at')[:MAINTENANCE_REPORT_LIMIT]
        rows = [(m.maintenance_type, m.cost) for m in latest.only('maintenance_type', 'cost')]
        return _group(rows, 'Outro')

    rows = assets.order_by('status').values_list('status', 'purchase_value')
    return _group(rows, 'Indefinido')


def generate_insights(prompt, data):
    """Title and insights from the model; defaults when it fails or answers badly"""
    metadata = {'title': DEFAULT_TITLE, 'insights': list(DEFAULT_INSIGHTS)}
    try:
        content = chat_completion(
            INSIGHTS_SYSTEM_PROMPT,
            INSIGHTS_PROMPT.format(prompt=prompt, data=json.dumps(data, indent=2, ensure_ascii=False)),
            max_tokens=500,
            temperature=0.3,
        )
    except LLMServiceError as e:
        logger.warning(f"Insights unavailable, using defaults: {str(e)}")
        return metadata

    parsed = parse_json_content(content)
    if not parsed:
        logger.info("Could not parse insights, using defaults")
        return metadata

    if parsed.get('title'):
        metadata['title'] = str(parsed['title'])
    if isinstance(parsed.get('insights'), list) and parsed['insights']:
        metadata['insights'] = [str(item) for item in parsed['insights']]
    return metadata


def generate_report(company, prompt):
    kind = pick_report_kind(prompt)
    data = aggregate_report_data(company, kind)
    metadata = generate_insights(prompt, data)
    logger.info(f"Report '{kind}' generated for company {company.id} with {len(data)} rows")
    return {
        'kind': kind,
        'data': data,
        'title': metadata['title'],
        'insights': metadata['insights'],
    }
