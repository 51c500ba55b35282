import json

import pytest
from openpyxl import Workbook

from compor_orcamento.adapters.catalogo import load_catalogo, produtos_from_rows
from compor_orcamento.adapters.kits import default_kits, kit_from_dict, kits_from_rows, load_kits
from compor_orcamento.adapters.projeto import load_projeto, projeto_from_dict


def _xlsx(path, rows):
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    wb.save(path)
    return path


# ---------- catálogo ----------

def test_catalogo_xlsx_detecta_cabecalho(tmp_path):
    path = _xlsx(tmp_path / "produtos.xlsx", [
        ["Catálogo de produtos 2026"],
        [None],
        ["ID", "NOME PRODUTO", "PREÇO", "IMAGEM"],
        ["a1", "Sirene", 50, "http://img/sirene.png"],
        ["a2", "Central de Alarme", "R$ 1.200,00", None],
        [None, None, None, None],
        ["a3", "Sirene", 99, None],
        ["a4", "Detector", "-", None],
    ])
    cat = load_catalogo(path)

    assert [p["nome"] for p in cat] == ["Sirene", "Central de Alarme", "Detector"]
    assert cat[0] == {"id": "a1", "nome": "Sirene", "preco": 50.0, "imagem": "http://img/sirene.png"}
    assert cat[1]["preco"] == pytest.approx(1200.0)
    assert "imagem" not in cat[1]
    assert cat[2]["preco"] == 0.0


def test_catalogo_csv_ponto_e_virgula(tmp_path):
    path = tmp_path / "produtos.csv"
    path.write_text(
        "NOME PRODUTO;PRECO\n"
        "Sirene;R$ 50,00\n"
        "Cabo 2x1,5mm;2,5\n",
        encoding="utf-8",
    )
    cat = load_catalogo(path)
    assert [(p["nome"], p["preco"]) for p in cat] == [("Sirene", 50.0), ("Cabo 2x1,5mm", 2.5)]
    assert cat[0]["id"] == "p-0"


def test_catalogo_json(tmp_path):
    path = tmp_path / "produtos.json"
    path.write_text(json.dumps([
        {"id": "x", "nome": "Sirene", "preco": "10,5", "isLocal": True},
        {"id": "y", "nome": "", "preco": 3},
    ]), encoding="utf-8")
    assert load_catalogo(path) == [{"id": "x", "nome": "Sirene", "preco": 10.5}]


def test_catalogo_linhas_da_planilha_web():
    rows = [
        ["NOME PRODUTO", "PRECO", "IMAGEM"],
        ["Sirene", "R$ 50,00", ""],
        ["Tubo Zincado 3/4", 10, ""],
    ]
    cat = produtos_from_rows(rows)
    assert [p["id"] for p in cat] == ["p-0", "p-1"]
    assert cat[1]["preco"] == 10.0


def test_catalogo_sem_coluna_de_preco():
    with pytest.raises(KeyError):
        produtos_from_rows([["NOME PRODUTO", "FORNECEDOR"], ["Sirene", "ACME"]])


def test_formato_nao_suportado(tmp_path):
    path = tmp_path / "produtos.txt"
    path.write_text("x", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_catalogo(path)


# ---------- kits ----------

def test_kit_camel_case():
    kit = kit_from_dict({
        "id": "k9",
        "nomeKit": "Kit Hidrante",
        "tipoInfra": "hidrante",
        "percentualPerda": "5",
        "ativo": True,
        "componentes": [
            {"produtoNome": "Tubo 2", "fatorConversao": 1, "unidade": "m"},
            {"produtoNome": "", "fatorConversao": 3},
        ],
    })
    assert kit["tipo_infra"] == "hidrante"
    assert kit["percentual_perda"] == 5.0
    assert kit["componentes"] == [{"produto_nome": "Tubo 2", "fator_conversao": 1.0, "unidade": "M"}]


def test_kit_sem_flag_ativo_fica_inativo():
    assert kit_from_dict({"tipoInfra": "alarme"})["ativo"] is False
    assert kit_from_dict({"tipoInfra": "alarme", "ativo": "sim"})["ativo"] is True


def test_kits_json(tmp_path, kits):
    path = tmp_path / "kits.json"
    path.write_text(json.dumps(kits), encoding="utf-8")
    assert load_kits(path) == kits


def test_kits_planilha_dados_json(tmp_path, kits):
    path = _xlsx(tmp_path / "kits.xlsx", [
        ["ID", "NOME_KIT", "TIPO_INFRA", "DADOS_JSON"],
        ["k1", "Kit Infra Alarme", "alarme", json.dumps(kits[0])],
        ["k2", "quebrado", "x", "{não é json"],
        ["k3", "Kit Cabeamento", "cabeamento", json.dumps(kits[1])],
    ])
    assert load_kits(path) == kits


def test_kits_linhas_sem_coluna_json():
    with pytest.raises(KeyError):
        kits_from_rows([["ID", "NOME_KIT"], ["k1", "x"]])


def test_default_kits_sao_copias():
    a = default_kits()
    a[0]["ativo"] = False
    assert default_kits()[0]["ativo"] is True
    assert default_kits()[0]["tipo_infra"] == "alarme"


# ---------- projeto ----------

def test_projeto_camel_case_com_campos_de_formulario():
    proj = projeto_from_dict({
        "id": "p1",
        "cliente": "ACME",
        "obra": "Galpão",
        "status": "Rascunho",
        "validadeDias": "",
        "pavimentos": [{
            "id": "f1",
            "nome": "Térreo",
            "tipo": "Térreo",
            "largura": "",
            "itensCentrais": [{"id": "i1", "produtoNome": "Sirene", "quantidade": "2"}],
            "infraestruturas": [{"tipo": "alarme", "metragem": ""}],
        }],
        "financeiro": {"custoMateriais": 1000, "bdiPercentual": "25", "margemLucroPercentual": 15,
                       "descontoValor": ""},
    })
    pav = proj["pavimentos"][0]
    assert pav["itens_centrais"] == [{"produto_nome": "Sirene", "quantidade": 2.0, "id": "i1"}]
    assert pav["infraestruturas"] == [{"tipo": "alarme", "metragem": 0.0}]
    assert pav["largura"] == 0.0
    assert proj["validade_dias"] == 30
    assert proj["financeiro"]["preco_venda_final"] == pytest.approx(1437.5)
    assert proj["orcamento_itens"] == []


def test_projeto_itens_persistidos_recompoem_total():
    proj = projeto_from_dict({
        "orcamentoItens": [{"id": "a", "produtoNome": "Sirene", "origem": "manual", "qtdSistema": 2,
                            "qtdFinal": 3, "custoUnitario": 50, "custoTotal": 1}],
    })
    assert proj["orcamento_itens"][0]["custo_total"] == 150.0
    assert proj["financeiro"]["bdi_percentual"] == 25.0
    assert proj["status"] == "Rascunho"


def test_load_projeto_aceita_arquivo_com_avisos(tmp_path):
    path = tmp_path / "p.json"
    path.write_text(json.dumps({"projeto": {"id": "p7", "obra": "X"}, "avisos": []}), encoding="utf-8")
    assert load_projeto(path)["id"] == "p7"


def test_load_projeto_invalido(tmp_path):
    path = tmp_path / "p.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_projeto(path)


def test_catalogo_xls_usa_read_excel(tmp_path, monkeypatch):
    import pandas as pd
    from compor_orcamento.utils import utils_planilha

    chamadas = []

    def fake_read_excel(path, **kw):
        chamadas.append((path.suffix, kw))
        return pd.DataFrame([["NOME PRODUTO", "PRECO"], ["Sirene", "R$ 50,00"]], dtype=object)

    monkeypatch.setattr(utils_planilha.pd, "read_excel", fake_read_excel)
    p = tmp_path / "produtos.xls"
    p.write_bytes(b"")

    produtos = load_catalogo(p)

    assert chamadas[0][0] == ".xls"
    assert chamadas[0][1]["header"] is None
    assert produtos[0]["nome"] == "Sirene"
    assert produtos[0]["preco"] == 50.0
