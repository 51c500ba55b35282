# src/compor_orcamento/financeiro.py
"""
Formação do preço de venda: custo de materiais -> BDI -> margem -> desconto.

Todas as funções são puras: recebem um ResumoFinanceiro e devolvem um novo,
sem alterar o original.
"""
from __future__ import annotations

from typing import Optional

from .config import DEFAULT_BDI, DEFAULT_MARGEM_LUCRO
from .models import ResumoFinanceiro
from .utils.utils_num import to_num

_CAMPOS = (
    "custo_materiais",
    "bdi_percentual",
    "bdi_valor",
    "margem_lucro_percentual",
    "margem_lucro_valor",
    "desconto_percentual",
    "desconto_valor",
    "preco_venda_final",
)


def novo_resumo_financeiro(
    bdi: float = DEFAULT_BDI,
    margem: float = DEFAULT_MARGEM_LUCRO,
) -> ResumoFinanceiro:
    return ResumoFinanceiro(
        custo_materiais=0.0,
        bdi_percentual=to_num(bdi),
        bdi_valor=0.0,
        margem_lucro_percentual=to_num(margem),
        margem_lucro_valor=0.0,
        desconto_percentual=0.0,
        desconto_valor=0.0,
        preco_venda_final=0.0,
    )


def _sanear(resumo: ResumoFinanceiro) -> ResumoFinanceiro:
    """Copia o resumo com todos os campos numéricos finitos (lixo -> 0)."""
    out = dict(resumo)
    for campo in _CAMPOS:
        out[campo] = to_num(resumo.get(campo))
    return out  # type: ignore[return-value]


def resolver_financeiro(resumo: ResumoFinanceiro) -> ResumoFinanceiro:
    """
    Recalcula bdi_valor, margem_lucro_valor e preco_venda_final.

      bdi_valor          = custo * bdi% / 100
      subtotal           = custo + bdi_valor
      margem_lucro_valor = subtotal * margem% / 100
      preco_venda_final  = max(0, subtotal + margem_lucro_valor - desconto_valor)

    Os campos de desconto NÃO são reconciliados aqui: quem chama decide qual
    das duas representações foi a última editada (ver aplicar_desconto_*).
    """
    fin = _sanear(resumo)
    bdi_valor = fin["custo_materiais"] * (fin["bdi_percentual"] / 100)
    subtotal = fin["custo_materiais"] + bdi_valor
    margem_valor = subtotal * (fin["margem_lucro_percentual"] / 100)
    preco_base = subtotal + margem_valor
    preco_final = preco_base - fin["desconto_valor"]

    fin["bdi_valor"] = bdi_valor
    fin["margem_lucro_valor"] = margem_valor
    fin["preco_venda_final"] = preco_final if preco_final > 0 else 0.0
    return fin


def base_desconto(resumo: ResumoFinanceiro) -> float:
    """Preço antes do desconto: custo + BDI + margem (recalculados)."""
    fin = resolver_financeiro(resumo)
    return fin["custo_materiais"] + fin["bdi_valor"] + fin["margem_lucro_valor"]


def aplicar_desconto_por_valor(resumo: ResumoFinanceiro, valor: object) -> ResumoFinanceiro:
    """Desconto digitado em R$; o percentual é derivado (base zero -> 0%)."""
    desconto = to_num(valor)
    base = base_desconto(resumo)
    percentual = (desconto / base) * 100 if base > 0 else 0.0
    return resolver_financeiro({
        **resumo,
        "desconto_valor": desconto,
        "desconto_percentual": percentual,
    })


def aplicar_desconto_por_percentual(resumo: ResumoFinanceiro, percentual: object) -> ResumoFinanceiro:
    """Desconto digitado em %; o valor em R$ é derivado da mesma base."""
    pct = to_num(percentual)
    base = base_desconto(resumo)
    return resolver_financeiro({
        **resumo,
        "desconto_percentual": pct,
        "desconto_valor": base * (pct / 100),
    })


def definir_custo_materiais(resumo: ResumoFinanceiro, valor: object) -> ResumoFinanceiro:
    """Custo de materiais informado à mão (projeto sem lista de materiais)."""
    return resolver_financeiro({**resumo, "custo_materiais": to_num(valor)})


def ajustar_percentuais(
    resumo: ResumoFinanceiro,
    *,
    bdi: Optional[object] = None,
    margem: Optional[object] = None,
) -> ResumoFinanceiro:
    # o desconto em R$ é mantido; o percentual fica como estava
    novo = dict(resumo)
    if bdi is not None:
        novo["bdi_percentual"] = to_num(bdi)
    if margem is not None:
        novo["margem_lucro_percentual"] = to_num(margem)
    return resolver_financeiro(novo)  # type: ignore[arg-type]
