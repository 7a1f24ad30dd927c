"""Heuristic category suggestion for transaction descriptions."""

from datetime import UTC
from typing import Optional, Sequence

from orbis.domain.entities import Transaction


MIN_TERM_LENGTH = 3

# Keyword substrings per default category id. Order is priority: the first
# category with a matching keyword wins.
KEYWORD_MAP: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("cat_4", (  # Alimentação
        "mercado", "supermercado", "açougue", "padaria", "ifood", "restaurante",
        "burger", "pizza", "lanche", "almoço", "jantar", "cafe", "assai",
        "carrefour", "pão",
    )),
    ("cat_6", (  # Transporte
        "uber", "99", "taxi", "onibus", "metro", "posto", "gasolina",
        "abastecimento", "estacionamento", "pedagio", "ipva", "mechanico",
    )),
    ("cat_11", (  # Assinaturas
        "netflix", "spotify", "prime", "disney", "hbo", "globo", "youtube",
        "apple", "google", "aws", "chatgpt", "tv", "assinatura", "cloud",
    )),
    ("cat_8", (  # Saúde
        "farmacia", "drogaria", "medico", "consulta", "exame", "laboratorio",
        "dentista", "psicologo", "hospital", "remedio",
    )),
    ("cat_5", (  # Moradia
        "aluguel", "condominio", "luz", "agua", "energia", "enel", "internet",
        "vivo", "claro", "tim", "oi", "net", "manutenção", "casa",
    )),
    ("cat_7", (  # Lazer
        "cinema", "ingresso", "show", "teatro", "bar", "cerveja", "steam",
        "playstation", "xbox", "jogo", "viagem", "hotel",
    )),
    ("cat_9", (  # Educação
        "curso", "faculdade", "escola", "mensalidade", "livro", "papelaria",
        "udemy", "alura", "ingles",
    )),
    ("cat_3", (  # Investimentos
        "investimento", "cdb", "fii", "ação", "tesouro", "bitcoin", "crypto",
        "corretora",
    )),
    ("cat_1", (  # Salário
        "salario", "pagamento", "remuneração", "empresa",
    )),
)


def _recency_key(transaction: Transaction) -> float:
    # Naive values come back from SQLite and are UTC
    created_at = transaction.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return created_at.timestamp()


def match_history(term: str, history: Sequence[Transaction]) -> Optional[str]:
    """Return the category of the most recent history entry matching ``term``.

    A history entry matches when its lowercased description contains the
    term or is contained in it. ``history`` is not reordered.
    """
    for transaction in sorted(history, key=_recency_key, reverse=True):
        previous = transaction.description.lower()
        if not previous or not transaction.category_id:
            continue
        if term in previous or previous in term:
            return transaction.category_id
    return None


def match_keywords(term: str) -> Optional[str]:
    """Return the first category whose keyword list matches ``term``."""
    for category_id, keywords in KEYWORD_MAP:
        if any(keyword in term for keyword in keywords):
            return category_id
    return None


def suggest_category(
    description: str, history: Sequence[Transaction]
) -> Optional[str]:
    """Suggest a category id for a description.

    Priority:
    1. The user's own history, most recently created entry first
    2. The keyword dictionary

    Args:
        description: Free text from the user or the bank
        history: Previously recorded transactions

    Returns:
        A category id, or None when the description is too short or nothing
        matches
    """
    term = description.strip().lower()
    if len(term) < MIN_TERM_LENGTH:
        return None

    category_id = match_history(term, history)
    if category_id is not None:
        return category_id

    return match_keywords(term)
