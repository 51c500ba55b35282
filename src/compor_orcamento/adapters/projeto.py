# src/compor_orcamento/adapters/projeto.py
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from ..config import (
    DEFAULT_CONDICOES_PAGAMENTO,
    DEFAULT_CRONOGRAMA,
    DEFAULT_VALIDADE_DIAS,
)
from ..financeiro import novo_resumo_financeiro, resolver_financeiro
from ..models import (
    InfraMetragem,
    ItemManual,
    ItemOrcamento,
    Pavimento,
    Projeto,
    StatusProjeto,
    TipoPavimento,
)
from ..utils.utils_chaves import to_snake_keys
from ..utils.utils_num import to_num
from ..utils.utils_planilha import cell_text

logger = logging.getLogger(__name__)


def _pavimento(d: dict, idx: int) -> Pavimento:
    itens: List[ItemManual] = []
    for it in d.get("itens_centrais") or []:
        nome = cell_text(it.get("produto_nome"))
        if not nome:
            continue
        item = ItemManual(produto_nome=nome, quantidade=to_num(it.get("quantidade")))
        if it.get("id"):
            item["id"] = str(it["id"])
        itens.append(item)

    infras: List[InfraMetragem] = [
        InfraMetragem(tipo=cell_text(i.get("tipo")), metragem=to_num(i.get("metragem")))
        for i in d.get("infraestruturas") or []
    ]

    pav = Pavimento(
        id=cell_text(d.get("id")) or f"pav-{idx}",
        nome=cell_text(d.get("nome")) or f"Pavimento {idx + 1}",
        tipo=cell_text(d.get("tipo")) or TipoPavimento.TIPO.value,
        itens_centrais=itens,
        infraestruturas=infras,
    )
    for campo in ("largura", "comprimento", "altura"):
        if campo in d:
            pav[campo] = to_num(d.get(campo))
    if d.get("referencia_prancha"):
        pav["referencia_prancha"] = str(d["referencia_prancha"])
    return pav


def _item_orcamento(d: dict) -> ItemOrcamento:
    qtd_final = to_num(d.get("qtd_final"))
    unit = to_num(d.get("custo_unitario"))
    return ItemOrcamento(
        id=cell_text(d.get("id")),
        produto_nome=cell_text(d.get("produto_nome")),
        origem=cell_text(d.get("origem")),
        qtd_sistema=to_num(d.get("qtd_sistema")),
        qtd_final=qtd_final,
        custo_unitario=unit,
        # total sempre reconstituído a partir da quantidade e do unitário
        custo_total=qtd_final * unit,
    )


def projeto_from_dict(d: dict) -> Projeto:
    """
    Normaliza um registro de projeto (camelCase ou snake_case).
    Campos numéricos vindos de formulário (strings vazias, lixo) viram 0.
    """
    d = to_snake_keys(d)
    fin_raw = d.get("financeiro")
    financeiro = resolver_financeiro({**novo_resumo_financeiro(), **fin_raw}) if fin_raw else novo_resumo_financeiro()

    validade = to_num(d.get("validade_dias"), default=DEFAULT_VALIDADE_DIAS)
    proj = Projeto(
        id=cell_text(d.get("id")),
        cliente=cell_text(d.get("cliente")),
        obra=cell_text(d.get("obra")),
        endereco=cell_text(d.get("endereco")),
        status=cell_text(d.get("status")) or StatusProjeto.RASCUNHO.value,
        pavimentos=[_pavimento(p, i) for i, p in enumerate(d.get("pavimentos") or [])],
        condicoes_pagamento=cell_text(d.get("condicoes_pagamento")) or DEFAULT_CONDICOES_PAGAMENTO,
        cronograma=cell_text(d.get("cronograma")) or DEFAULT_CRONOGRAMA,
        observacoes=cell_text(d.get("observacoes")),
        validade_dias=int(validade),
        orcamento_itens=[_item_orcamento(i) for i in d.get("orcamento_itens") or []],
        financeiro=financeiro,
        data_criacao=cell_text(d.get("data_criacao")) or datetime.now().isoformat(),
    )
    if d.get("cliente_id"):
        proj["cliente_id"] = str(d["cliente_id"])
    if d.get("proposta_url"):
        proj["proposta_url"] = str(d["proposta_url"])
    return proj


def load_projeto(path: str | Path) -> Projeto:
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)
    # arquivo exportado com avisos/meta: {"projeto": {...}, ...}
    if isinstance(data, dict) and isinstance(data.get("projeto"), dict):
        data = data["projeto"]
    if not isinstance(data, dict):
        raise RuntimeError(f"{p.name}: esperado um objeto de projeto.")
    proj = projeto_from_dict(data)
    logger.info(
        "Projeto %s (%s): %d pavimento(s).",
        proj["id"] or p.stem, proj["obra"] or "-", len(proj["pavimentos"]),
    )
    return proj
