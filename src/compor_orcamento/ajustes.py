# src/compor_orcamento/ajustes.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .financeiro import resolver_financeiro
from .models import (
    Aviso,
    ItemOrcamento,
    Kit,
    Produto,
    Projeto,
    ResumoFinanceiro,
    StatusProjeto,
)
from .processor import compor_orcamento
from .utils.utils_num import to_num

logger = logging.getLogger(__name__)


def recalcular_custo_materiais(itens: List[ItemOrcamento]) -> float:
    return sum(to_num(it.get("custo_total")) for it in itens)


def ajustar_item(
    itens: List[ItemOrcamento],
    resumo: ResumoFinanceiro,
    item_id: str,
    *,
    qtd_final: Optional[object] = None,
    custo_unitario: Optional[object] = None,
) -> Tuple[List[ItemOrcamento], ResumoFinanceiro]:
    """
    Edição manual de uma linha já calculada (quantidade e/ou custo unitário).

    Recalcula o total da linha, a soma dos materiais e o preço final.
    Não refaz a composição: um novo `calcular_projeto` descarta estes ajustes.
    Devolve cópias; `itens` e `resumo` não são alterados.
    """
    if not any(it["id"] == item_id for it in itens):
        raise KeyError(f"Item {item_id!r} não existe no orçamento.")

    novos: List[ItemOrcamento] = []
    for it in itens:
        if it["id"] != item_id:
            novos.append(dict(it))  # type: ignore[arg-type]
            continue
        linha = dict(it)
        if qtd_final is not None:
            linha["qtd_final"] = to_num(qtd_final)
        if custo_unitario is not None:
            linha["custo_unitario"] = to_num(custo_unitario)
        linha["custo_total"] = linha["qtd_final"] * linha["custo_unitario"]
        logger.info(
            "Ajuste manual em %r: qtd %g (sistema %g), unitário %.2f.",
            linha["produto_nome"], linha["qtd_final"], linha["qtd_sistema"], linha["custo_unitario"],
        )
        novos.append(linha)  # type: ignore[arg-type]

    fin = resolver_financeiro({**resumo, "custo_materiais": recalcular_custo_materiais(novos)})
    return novos, fin


def totais_por_origem(itens: List[ItemOrcamento]) -> Dict[str, float]:
    """Custo de materiais separado por origem da linha (manual / calculado / mista)."""
    out: Dict[str, float] = {}
    for it in itens:
        out[it["origem"]] = out.get(it["origem"], 0.0) + to_num(it.get("custo_total"))
    return out


def calcular_projeto(
    projeto: Projeto,
    catalogo: List[Produto],
    kits: List[Kit],
    *,
    marcar_origem_mista: bool = False,
) -> Tuple[Projeto, List[Aviso]]:
    """
    Ação "calcular": refaz a lista de materiais a partir dos pavimentos
    (perdendo ajustes manuais anteriores) e marca o projeto como Calculado.
    """
    comp = compor_orcamento(projeto, catalogo, kits, marcar_origem_mista=marcar_origem_mista)
    novo = dict(projeto)
    novo["orcamento_itens"] = comp["itens"]
    novo["financeiro"] = comp["financeiro"]
    novo["status"] = StatusProjeto.CALCULADO.value
    return novo, comp["avisos"]  # type: ignore[return-value]
