# src/compor_orcamento/models.py
from __future__ import annotations

from enum import Enum
from typing import TypedDict, NotRequired, Dict, List, Literal


# =========================
# Enumerações
# =========================
class StatusProjeto(str, Enum):
    RASCUNHO = "Rascunho"
    CALCULADO = "Calculado"
    ENVIADO = "Enviado"
    APROVADO = "Aprovado"


class TipoPavimento(str, Enum):
    GARAGEM = "Garagem"
    PILOTIS = "Pilotis"
    TIPO = "Tipo"
    COBERTURA = "Cobertura"
    SUBSOLO = "Subsolo"
    TERREO = "Térreo"


class Unidade(str, Enum):
    UN = "UN"   # contagem discreta
    M = "M"     # metro linear


ORIGEM_MANUAL = "manual"
ORIGEM_CALCULADO = "calculado"
ORIGEM_MISTA = "manual+calculado"

Origem = Literal["manual", "calculado", "manual+calculado"]


# =========================
# Catálogo e kits
# =========================
class Produto(TypedDict):
    """
    Item do catálogo. A chave de junção com kits e itens manuais é o `nome`
    (igualdade exata de string), não o `id`.
    """
    id: str
    nome: str
    preco: float
    imagem: NotRequired[str]


class KitComponente(TypedDict):
    produto_nome: str
    # quantidade do componente por 1 metro de infraestrutura
    fator_conversao: float
    # apenas documental; não entra no cálculo
    unidade: str


class Kit(TypedDict):
    id: str
    nome_kit: str
    tipo_infra: str
    percentual_perda: float
    componentes: List[KitComponente]
    ativo: bool


# =========================
# Estrutura do prédio
# =========================
class ItemManual(TypedDict):
    produto_nome: str
    quantidade: float
    id: NotRequired[str]


class InfraMetragem(TypedDict):
    tipo: str
    metragem: float


class Pavimento(TypedDict):
    id: str
    nome: str
    tipo: str
    # dimensões são apenas informativas
    largura: NotRequired[float]
    comprimento: NotRequired[float]
    altura: NotRequired[float]
    referencia_prancha: NotRequired[str]
    itens_centrais: List[ItemManual]
    infraestruturas: List[InfraMetragem]


# =========================
# Saídas do cálculo
# =========================
class ItemOrcamento(TypedDict):
    """
    Linha consolidada da lista de materiais.
    Invariante: custo_total == qtd_final * custo_unitario.
    """
    id: str
    produto_nome: str
    origem: Origem
    qtd_sistema: float
    qtd_final: float
    custo_unitario: float
    custo_total: float


class ResumoFinanceiro(TypedDict):
    custo_materiais: float
    bdi_percentual: float
    bdi_valor: float
    margem_lucro_percentual: float
    margem_lucro_valor: float
    desconto_percentual: float
    desconto_valor: float
    preco_venda_final: float


class Aviso(TypedDict):
    """Diagnóstico não bloqueante produzido pelo cálculo."""
    tipo: str      # "INFRA_SEM_KIT" | "PRODUTO_NAO_ENCONTRADO" | "KIT_DUPLICADO"
    chave: str     # tipo de infra ou nome do produto
    mensagem: str


class Composicao(TypedDict):
    itens: List[ItemOrcamento]
    financeiro: ResumoFinanceiro
    avisos: List[Aviso]


class Projeto(TypedDict):
    id: str
    cliente: str
    obra: str
    endereco: str
    status: str
    pavimentos: List[Pavimento]
    condicoes_pagamento: str
    cronograma: str
    observacoes: str
    validade_dias: int
    orcamento_itens: List[ItemOrcamento]
    financeiro: ResumoFinanceiro
    data_criacao: str
    cliente_id: NotRequired[str]
    proposta_url: NotRequired[str]


# Layout do registro persistido (camelCase) -> nomes internos
CAMEL_TO_SNAKE: Dict[str, str] = {
    "produtoNome": "produto_nome",
    "produtoId": "produto_id",
    "fatorConversao": "fator_conversao",
    "nomeKit": "nome_kit",
    "tipoInfra": "tipo_infra",
    "percentualPerda": "percentual_perda",
    "referenciaPrancha": "referencia_prancha",
    "itensCentrais": "itens_centrais",
    "qtdSistema": "qtd_sistema",
    "qtdFinal": "qtd_final",
    "custoUnitario": "custo_unitario",
    "custoTotal": "custo_total",
    "custoMateriais": "custo_materiais",
    "bdiPercentual": "bdi_percentual",
    "bdiValor": "bdi_valor",
    "margemLucroPercentual": "margem_lucro_percentual",
    "margemLucroValor": "margem_lucro_valor",
    "descontoPercentual": "desconto_percentual",
    "descontoValor": "desconto_valor",
    "precoVendaFinal": "preco_venda_final",
    "clienteId": "cliente_id",
    "condicoesPagamento": "condicoes_pagamento",
    "validadeDias": "validade_dias",
    "orcamentoItens": "orcamento_itens",
    "dataCriacao": "data_criacao",
    "propostaUrl": "proposta_url",
    "isLocal": "is_local",
}
SNAKE_TO_CAMEL: Dict[str, str] = {v: k for k, v in CAMEL_TO_SNAKE.items()}


__all__ = [
    "StatusProjeto",
    "TipoPavimento",
    "Unidade",
    "ORIGEM_MANUAL",
    "ORIGEM_CALCULADO",
    "ORIGEM_MISTA",
    "Origem",
    "Produto",
    "KitComponente",
    "Kit",
    "ItemManual",
    "InfraMetragem",
    "Pavimento",
    "ItemOrcamento",
    "ResumoFinanceiro",
    "Aviso",
    "Composicao",
    "Projeto",
    "CAMEL_TO_SNAKE",
    "SNAKE_TO_CAMEL",
]
