"""
Asset analysis and category suggestion prompts
"""

import logging

from .llm_client import chat_completion, parse_json_content

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    'Você é um especialista em gestão de ativos e depreciação no Brasil. '
    'Forneça análises precisas baseadas nas normas contábeis brasileiras e práticas industriais.'
)

DEFAULT_ANALYSIS = {
    "categoria": "Geral",
    "vidaUtil": 5,
    "valorResidualPercentual": 10,
    "tipoManutencao": "preventiva",
    "intervaloManutencaoMeses": 6,
    "justificativa": "Análise padrão aplicada devido a erro no processamento da resposta da IA",
}

DEFAULT_CATEGORY = "Geral"
DEFAULT_USEFUL_LIFE = 5

ANALYSIS_PROMPT = """
Analise o seguinte ativo e forneça sugestões baseadas em práticas industriais brasileiras:

Nome do Ativo: {asset_name}
{description_line}

Com base no nome e descrição do ativo, forneça as seguintes informações:

1. CATEGORIA: Sugira uma categoria apropriada (ex: Tecnologia, Mobiliário, Veículos, Equipamentos, Maquinário, etc.)

2. VIDA ÚTIL: Sugira a vida útil em anos baseada nas taxas de depreciação brasileiras e práticas do setor

3. VALOR RESIDUAL: Sugira uma porcentagem do valor de compra que o ativo manterá ao final da vida útil (0-30%)

4. TIPO DE MANUTENÇÃO: Sugira o tipo de manutenção mais apropriado (preventiva, corretiva, ou preditiva)

5. INTERVALO DE MANUTENÇÃO: Sugira intervalos de manutenção em meses

Responda APENAS em formato JSON válido:
{{
  "categoria": "string",
  "vidaUtil": number,
  "valorResidualPercentual": number,
  "tipoManutencao": "preventiva" | "corretiva" | "preditiva",
  "intervaloManutencaoMeses": number,
  "justificativa": "string explicando brevemente as escolhas"
}}
"""

CATEGORY_PROMPT = """
Escolha a categoria mais adequada para o ativo abaixo entre as categorias disponíveis.

Nome do Ativo: {asset_name}
Categorias disponíveis: {categories}

Sugira também a vida útil em anos baseada nas taxas de depreciação brasileiras.

Responda APENAS em formato JSON válido:
{{
  "categoria": "uma das categorias disponíveis",
  "vidaUtil": number,
  "justificativa": "string explicando brevemente a escolha"
}}
"""


def analyze_asset(asset_name, description=None):
    """
    Suggested category, useful life, residual %, maintenance type/interval.
    Transport errors propagate as LLMServiceError; an unparseable answer
    falls back to DEFAULT_ANALYSIS.
    """
    prompt = ANALYSIS_PROMPT.format(
        asset_name=asset_name,
        description_line=f"Descrição: {description}" if description else "",
    )
    logger.info(f"Analyzing asset: {asset_name}")
    content = chat_completion(SYSTEM_PROMPT, prompt, max_tokens=1000, temperature=0.3)

    analysis = parse_json_content(content)
    if analysis is None:
        return dict(DEFAULT_ANALYSIS)
    return analysis


def _positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def suggest_category(asset_name, categories):
    """
    Best-fit category among `categories`. A suggestion outside the list is
    replaced by the first provided category ("Geral" when none).
    """
    fallback = categories[0] if categories else DEFAULT_CATEGORY
    prompt = CATEGORY_PROMPT.format(
        asset_name=asset_name,
        categories=", ".join(categories) if categories else DEFAULT_CATEGORY,
    )
    logger.info(f"Suggesting category for asset: {asset_name}")
    content = chat_completion(SYSTEM_PROMPT, prompt, max_tokens=500, temperature=0.3)

    suggestion = parse_json_content(content) or {}
    by_lower_name = {name.lower(): name for name in categories}
    suggested = str(suggestion.get("categoria") or "").strip()
    category = by_lower_name.get(suggested.lower(), fallback if categories else (suggested or fallback))

    return {
        "categoria": category,
        "vidaUtil": _positive_int(suggestion.get("vidaUtil"), DEFAULT_USEFUL_LIFE),
        "justificativa": suggestion.get("justificativa") or DEFAULT_ANALYSIS["justificativa"],
    }
