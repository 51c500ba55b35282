# src/compor_orcamento/processor.py
from __future__ import annotations

import logging
import math
import random
import string
from typing import Dict, Iterable, List, Optional, Set

from .config import CASAS_QUANTIDADE
from .financeiro import novo_resumo_financeiro, resolver_financeiro
from .models import (
    ORIGEM_CALCULADO,
    ORIGEM_MANUAL,
    ORIGEM_MISTA,
    Aviso,
    Composicao,
    ItemOrcamento,
    Kit,
    Pavimento,
    Produto,
    Projeto,
)
from .utils.utils_num import to_num
from .utils.utils_text import norm_text

logger = logging.getLogger(__name__)

_ID_CHARS = string.ascii_lowercase + string.digits


def _novo_id() -> str:
    return "".join(random.choices(_ID_CHARS, k=9))


# ---------- Buscas (junção por nome / tipo) ----------

def buscar_produto_por_nome(catalogo: Iterable[Produto], nome: str) -> Optional[Produto]:
    """Primeiro produto cujo nome é exatamente `nome` (sem normalização)."""
    for p in catalogo:
        if p.get("nome") == nome:
            return p
    return None


def buscar_kit_ativo(kits: Iterable[Kit], tipo_infra: str) -> Optional[Kit]:
    """Primeiro kit ATIVO cujo tipo_infra é exatamente `tipo_infra`."""
    for k in kits:
        if k.get("tipo_infra") == tipo_infra and k.get("ativo"):
            return k
    return None


def _sugerir_nome(catalogo: Iterable[Produto], nome: str) -> Optional[str]:
    alvo = norm_text(nome)
    if not alvo:
        return None
    for p in catalogo:
        if norm_text(p.get("nome")) == alvo:
            return p.get("nome")
    return None


# ---------- Quantidades ----------

def totalizar_infraestrutura(pavimentos: Iterable[Pavimento]) -> Dict[str, float]:
    """Soma a metragem por tipo de infraestrutura em todos os pavimentos (ordem de 1ª aparição)."""
    totais: Dict[str, float] = {}
    for pav in pavimentos:
        for infra in pav.get("infraestruturas") or []:
            tipo = infra.get("tipo", "")
            totais[tipo] = totais.get(tipo, 0.0) + to_num(infra.get("metragem"))
    return totais


def calcular_quantidade_kit(metros: float, fator_conversao: float, percentual_perda: float) -> int:
    """
    metros * fator, acrescido da perda, arredondado PARA CIMA.
    A perda entra antes do arredondamento. Ex.: 37 m, fator 0.25, perda 10% -> 10.175 -> 11.
    """
    base = to_num(metros) * to_num(fator_conversao)
    com_perda = base * (1 + to_num(percentual_perda) / 100)
    # teto sobre o valor arredondado, intencionalmente: 10 m x 0.3 = 3.0000000000000004 dá 3, não 4
    return math.ceil(round(com_perda, CASAS_QUANTIDADE))


# ---------- Consolidação ----------

class _Consolidador:
    """Mapa nome do produto -> linha, com a regra de fusão da lista de materiais."""

    def __init__(self, catalogo: List[Produto], marcar_origem_mista: bool) -> None:
        self.catalogo = catalogo
        self.marcar_origem_mista = marcar_origem_mista
        self.linhas: Dict[str, ItemOrcamento] = {}
        self.avisos: List[Aviso] = []
        self._sem_preco: Set[str] = set()

    def _preco(self, nome: str) -> float:
        produto = buscar_produto_por_nome(self.catalogo, nome)
        if produto is not None:
            return to_num(produto.get("preco"))

        if nome not in self._sem_preco:
            self._sem_preco.add(nome)
            sugestao = _sugerir_nome(self.catalogo, nome)
            msg = f"Produto {nome!r} não encontrado no catálogo; custo unitário 0."
            if sugestao:
                msg += f" Você quis dizer {sugestao!r}?"
            logger.warning(msg)
            self.avisos.append(Aviso(tipo="PRODUTO_NAO_ENCONTRADO", chave=nome, mensagem=msg))
        return 0.0

    def somar(self, nome: str, qtd: float, origem: str) -> None:
        existente = self.linhas.get(nome)
        if existente is not None:
            existente["qtd_sistema"] += qtd
            existente["qtd_final"] += qtd
            existente["custo_total"] = existente["qtd_final"] * existente["custo_unitario"]
            if self.marcar_origem_mista and existente["origem"] != origem:
                existente["origem"] = ORIGEM_MISTA
            return

        preco = self._preco(nome)
        self.linhas[nome] = ItemOrcamento(
            id=_novo_id(),
            produto_nome=nome,
            origem=origem,
            qtd_sistema=qtd,
            qtd_final=qtd,
            custo_unitario=preco,
            custo_total=qtd * preco,
        )


def compor_orcamento(
    projeto: Projeto,
    catalogo: List[Produto],
    kits: List[Kit],
    *,
    marcar_origem_mista: bool = False,
) -> Composicao:
    """
    Gera a lista de materiais consolidada e o resumo financeiro de um projeto.

    1. Itens centrais (manuais) de todos os pavimentos, somados por nome de produto,
       sem arredondamento.
    2. Metragem de infraestrutura somada por tipo; para cada tipo com total > 0 usa o
       primeiro kit ativo do tipo. Cada componente gera ceil(metros * fator * (1 + perda%)).
       Tipos sem kit ativo não geram linha (apenas aviso).
    3. custo_materiais = soma dos custos das linhas; BDI/margem/desconto do projeto
       são mantidos e o preço final é recalculado.

    Um produto que aparece como item manual e como componente de kit vira UMA linha,
    com a origem de quem a criou primeiro (ou "manual+calculado" se
    `marcar_origem_mista=True`). Preço ausente no catálogo -> custo 0.

    Não altera nenhum dos argumentos.
    """
    pavimentos = projeto.get("pavimentos") or []
    cons = _Consolidador(list(catalogo), marcar_origem_mista)

    # 1) itens centrais
    for pav in pavimentos:
        for item in pav.get("itens_centrais") or []:
            cons.somar(item["produto_nome"], to_num(item.get("quantidade")), ORIGEM_MANUAL)

    # 2) infraestrutura via kits
    for tipo, metros in totalizar_infraestrutura(pavimentos).items():
        if metros <= 0:
            continue

        kit = buscar_kit_ativo(kits, tipo)
        if kit is None:
            msg = f"Infraestrutura {tipo!r} ({metros:g} m) sem kit ativo; metragem ignorada."
            logger.warning(msg)
            cons.avisos.append(Aviso(tipo="INFRA_SEM_KIT", chave=tipo, mensagem=msg))
            continue

        n_ativos = sum(1 for k in kits if k.get("tipo_infra") == tipo and k.get("ativo"))
        if n_ativos > 1:
            msg = (
                f"{n_ativos} kits ativos para {tipo!r}; usando "
                f"{kit.get('nome_kit')!r} (id={kit.get('id')})."
            )
            logger.warning(msg)
            cons.avisos.append(Aviso(tipo="KIT_DUPLICADO", chave=tipo, mensagem=msg))

        perda = to_num(kit.get("percentual_perda"))
        for comp in kit.get("componentes") or []:
            qtd = calcular_quantidade_kit(metros, comp.get("fator_conversao"), perda)
            logger.debug("[%s] %s: %g m -> %d", tipo, comp["produto_nome"], metros, qtd)
            cons.somar(comp["produto_nome"], qtd, ORIGEM_CALCULADO)

    # 3) custo e preço
    itens = list(cons.linhas.values())
    custo_materiais = sum(it["custo_total"] for it in itens)
    financeiro = resolver_financeiro({
        **(projeto.get("financeiro") or novo_resumo_financeiro()),
        "custo_materiais": custo_materiais,
    })

    logger.info(
        "Composição: %d linha(s), custo de materiais %.2f, preço final %.2f.",
        len(itens), custo_materiais, financeiro["preco_venda_final"],
    )
    return Composicao(itens=itens, financeiro=financeiro, avisos=cons.avisos)
