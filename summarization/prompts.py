"""
Prompt templates for chunk summarization and aggregation.
"""
from typing import List

from .schemas import SummaryMode

# =========================
# Chunk summarization prompts
# =========================
CHUNK_PROMPTS = {
    SummaryMode.SHORT: (
        "Resuma em português o trecho ({index}/{total}) em 3–5 frases objetivas, "
        "focando ideias principais e dados importantes:\n"
        '"""{content}"""'
    ),
    SummaryMode.DETAILED: (
        "Resuma em português o trecho ({index}/{total}). Produza:\n"
        "- 1 parágrafo curto (3–5 frases)\n"
        "- 3 bullets com fatos/dados\n"
        "- 3–5 palavras-chave (se existirem)\n"
        "\n"
        "Trecho:\n"
        '"""{content}"""'
    ),
}


# =========================
# Aggregation prompts
# =========================
AGGREGATE_PROMPTS = {
    SummaryMode.SHORT: (
        "Faça um único resumo em português, 5–8 frases, claro e objetivo, "
        "cobrindo os pontos essenciais do documento inteiro.\n"
        "Resumos parciais:\n"
        "{combined_content}"
    ),
    SummaryMode.DETAILED: (
        "Você é um assistente que sintetiza relatórios.\n"
        "Junte os resumos parciais abaixo em um ÚNICO resumo claro, em português, com:\n"
        "- 5 a 8 tópicos principais (bullets)\n"
        '- seção "Pontos-chave" (3–5 bullets)\n'
        '- seção "Ações/Próximos passos" se aplicável\n'
        "Mantenha 200–300 palavras.\n"
        "\n"
        "RESUMOS PARCIAIS:\n"
        "{combined_content}"
    ),
}

PART_LABEL = "[Parte {position}]"


def get_chunk_prompt(content: str, index: int, total: int, mode: SummaryMode) -> str:
    """Prompt for one chunk; index is 1-based."""
    return CHUNK_PROMPTS[mode].format(index=index, total=total, content=content)


def combine_partials(summaries: List[str]) -> str:
    """Label each partial summary with its 1-based position, blank line between parts."""
    return "\n\n".join(
        f"{PART_LABEL.format(position=i + 1)}\n{summary}"
        for i, summary in enumerate(summaries)
    )


def get_aggregate_prompt(summaries: List[str], mode: SummaryMode) -> str:
    return AGGREGATE_PROMPTS[mode].format(combined_content=combine_partials(summaries))
