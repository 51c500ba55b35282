# src/compor_orcamento/adapters/catalogo.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from ..models import Produto
from ..utils.utils_chaves import to_snake_keys
from ..utils.utils_num import parse_preco_br
from ..utils.utils_planilha import cell_text, find_header_row, pick_col, read_raw

logger = logging.getLogger(__name__)

# ---------- Mapeamento de colunas ----------

_COL_CANDIDATES = {
    "nome":   ("nome produto", "nome do produto", "produto", "nome", "descricao"),
    "preco":  ("preco", "preço", "valor unit", "valor unitario", "valor"),
    "imagem": ("imagem", "foto"),
    "id":     ("id", "codigo", "código"),
}


def _dedup(produtos: List[Produto]) -> List[Produto]:
    # a busca por nome usa a primeira ocorrência; mantemos a mesma regra
    out: List[Produto] = []
    vistos: set[str] = set()
    dup = 0
    for p in produtos:
        if p["nome"] in vistos:
            dup += 1
            logger.warning("Produto duplicado no catálogo: %r (mantendo o primeiro).", p["nome"])
            continue
        vistos.add(p["nome"])
        out.append(p)
    if dup:
        logger.warning("Catálogo: %d nome(s) duplicado(s) descartado(s).", dup)
    return out


def produtos_from_raw(df_raw: pd.DataFrame) -> List[Produto]:
    """
    Converte a planilha de produtos (sem cabeçalho definido) em Produtos.
    Cabeçalho detectado nas primeiras linhas; preços em pt-BR ("R$ 1.234,56") aceitos;
    linhas sem nome são descartadas; preço ilegível vira 0.
    """
    if df_raw.empty:
        return []

    header_row = find_header_row(df_raw, [_COL_CANDIDATES["nome"], _COL_CANDIDATES["preco"]])
    if header_row is None:
        header_row = 0
        logger.warning("Cabeçalho do catálogo não detectado; usando a primeira linha.")

    headers = [cell_text(h) for h in df_raw.iloc[header_row].tolist()]
    col_nome = pick_col(headers, _COL_CANDIDATES["nome"])
    col_preco = pick_col(headers, _COL_CANDIDATES["preco"])
    col_img = pick_col(headers, _COL_CANDIDATES["imagem"], required=False)
    col_id = pick_col(headers, _COL_CANDIDATES["id"], required=False)

    produtos: List[Produto] = []
    sem_preco = 0
    for idx, row in enumerate(df_raw.iloc[header_row + 1:].itertuples(index=False)):
        nome = cell_text(row[col_nome])
        if not nome:
            continue
        preco = parse_preco_br(row[col_preco])
        if preco is None:
            sem_preco += 1
            preco = 0.0
        prod = Produto(
            id=(cell_text(row[col_id]) if col_id is not None else "") or f"p-{idx}",
            nome=nome,
            preco=float(preco),
        )
        if col_img is not None and cell_text(row[col_img]):
            prod["imagem"] = cell_text(row[col_img])
        produtos.append(prod)

    if sem_preco:
        logger.warning("Catálogo: %d produto(s) sem preço legível; usando 0.", sem_preco)
    return _dedup(produtos)


def produtos_from_rows(rows: Sequence[Sequence[Any]]) -> List[Produto]:
    """Mesma conversão para linhas já em memória (ex.: vindas da planilha web)."""
    if not rows:
        return []
    return produtos_from_raw(pd.DataFrame(list(rows), dtype=object))


def produtos_from_records(records: List[dict]) -> List[Produto]:
    produtos: List[Produto] = []
    for idx, rec in enumerate(to_snake_keys(records)):
        nome = cell_text(rec.get("nome"))
        if not nome:
            continue
        prod = Produto(
            id=cell_text(rec.get("id")) or f"p-{idx}",
            nome=nome,
            preco=float(parse_preco_br(rec.get("preco")) or 0.0),
        )
        if rec.get("imagem"):
            prod["imagem"] = str(rec["imagem"])
        produtos.append(prod)
    return _dedup(produtos)


def load_catalogo(path: str | Path, sheet: str | int | None = None) -> List[Produto]:
    """
    Lê o catálogo de produtos de .xlsx, .csv ou .json (lista de objetos).
    """
    p = Path(path)
    if p.suffix.lower() == ".json":
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise RuntimeError(f"{p.name}: esperado uma lista de produtos.")
        produtos = produtos_from_records(data)
    else:
        produtos = produtos_from_raw(read_raw(p, sheet))

    logger.info("Catálogo %s: %d produto(s).", p.name, len(produtos))
    return produtos
