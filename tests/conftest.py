"""
Fixtures compartilhadas: catálogo, kits e um construtor de projetos.

Os testes são unitários puros; nada de rede nem de banco.
"""
import copy

import pytest

from compor_orcamento.financeiro import novo_resumo_financeiro


@pytest.fixture
def catalogo():
    return [
        {"id": "p1", "nome": "Sirene", "preco": 50.0},
        {"id": "p2", "nome": "Central de Alarme", "preco": 1200.0},
        {"id": "p3", "nome": "Tubo Zincado 3/4", "preco": 10.0},
        {"id": "p4", "nome": "Conexão Tê 3/4", "preco": 4.0},
        {"id": "p5", "nome": "Cabo 2x1,5mm", "preco": 2.5},
    ]


@pytest.fixture
def kits():
    return [
        {
            "id": "k1",
            "nome_kit": "Kit Infra Alarme",
            "tipo_infra": "alarme",
            "percentual_perda": 10.0,
            "ativo": True,
            "componentes": [
                {"produto_nome": "Tubo Zincado 3/4", "fator_conversao": 1.2, "unidade": "M"},
                {"produto_nome": "Conexão Tê 3/4", "fator_conversao": 0.25, "unidade": "UN"},
            ],
        },
        {
            "id": "k2",
            "nome_kit": "Kit Cabeamento",
            "tipo_infra": "cabeamento",
            "percentual_perda": 0.0,
            "ativo": True,
            "componentes": [
                {"produto_nome": "Cabo 2x1,5mm", "fator_conversao": 1.0, "unidade": "M"},
            ],
        },
    ]


@pytest.fixture
def make_projeto():
    """
    Constrói um projeto mínimo. Cada pavimento é (itens, infras):
      itens  = [(nome, quantidade), ...]
      infras = [(tipo, metragem), ...]
    """
    def _make(*pavimentos, financeiro=None):
        pavs = []
        for i, (itens, infras) in enumerate(pavimentos):
            pavs.append({
                "id": f"f{i}",
                "nome": f"Pavimento {i + 1}",
                "tipo": "Tipo",
                "itens_centrais": [{"produto_nome": n, "quantidade": q} for n, q in itens],
                "infraestruturas": [{"tipo": t, "metragem": m} for t, m in infras],
            })
        return {
            "id": "proj-1",
            "cliente": "Condomínio Teste",
            "obra": "Torre A",
            "endereco": "",
            "status": "Rascunho",
            "pavimentos": pavs,
            "condicoes_pagamento": "",
            "cronograma": "",
            "observacoes": "",
            "validade_dias": 30,
            "orcamento_itens": [],
            "financeiro": copy.deepcopy(financeiro) if financeiro else novo_resumo_financeiro(),
            "data_criacao": "2026-01-01T00:00:00",
        }
    return _make


@pytest.fixture
def resumo_base():
    """custo 1000, BDI 25%, margem 15%, sem desconto."""
    fin = novo_resumo_financeiro(bdi=25, margem=15)
    fin["custo_materiais"] = 1000.0
    return fin
