# src/compor_orcamento/fetchers/planilha.py
"""
Leitura do catálogo e dos kits a partir do web-app da planilha da empresa.

O web-app responde `GET <url>?sheet=<aba>` com a aba inteira como lista de
linhas (a primeira é o cabeçalho).
"""
from __future__ import annotations

import logging
from typing import Any, List

import requests

from ..adapters.catalogo import produtos_from_rows
from ..adapters.kits import kits_from_rows
from ..config import SCRIPT_API_URL, SCRIPT_TIMEOUT
from ..models import Kit, Produto
from .http import fetch_json

logger = logging.getLogger(__name__)

ABA_PRODUTOS = "produtos"
ABA_KITS = "kits"


def fetch_aba(url: str, aba: str, *, timeout: float = SCRIPT_TIMEOUT,
              session: requests.Session | None = None) -> List[List[Any]]:
    if not url:
        logger.info("URL da planilha não configurada; aba %r vazia.", aba)
        return []
    data = fetch_json(url, params={"sheet": aba}, timeout=timeout, session=session)
    if not isinstance(data, list):
        logger.warning("Aba %r: resposta não é uma lista; ignorando.", aba)
        return []
    rows = [r for r in data if isinstance(r, list)]
    logger.info("Aba %r: %d linha(s).", aba, len(rows))
    return rows


def fetch_catalogo(url: str = SCRIPT_API_URL, **kw) -> List[Produto]:
    return produtos_from_rows(fetch_aba(url, ABA_PRODUTOS, **kw))


def fetch_kits(url: str = SCRIPT_API_URL, **kw) -> List[Kit]:
    return kits_from_rows(fetch_aba(url, ABA_KITS, **kw))
