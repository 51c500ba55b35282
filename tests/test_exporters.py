import json

import pytest
from openpyxl import load_workbook

from compor_orcamento.adapters.projeto import load_projeto
from compor_orcamento.ajustes import calcular_projeto
from compor_orcamento.exporters.excel import export_composicao_excel
from compor_orcamento.exporters.json_projeto import export_projeto_json, projeto_to_record


@pytest.fixture
def calculado(make_projeto, catalogo, kits, resumo_base):
    proj = make_projeto(([("Sirene", 2)], [("alarme", 37)]), financeiro=resumo_base)
    projeto, _ = calcular_projeto(proj, catalogo, kits)
    return projeto


def test_registro_camel_case_embute_calculo(calculado):
    rec = projeto_to_record(calculado)
    assert rec["orcamentoItens"][0]["produtoNome"] == "Sirene"
    assert "qtdFinal" in rec["orcamentoItens"][0]
    assert rec["financeiro"]["precoVendaFinal"] == pytest.approx(calculado["financeiro"]["preco_venda_final"])
    assert rec["pavimentos"][0]["infraestruturas"] == [{"tipo": "alarme", "metragem": 37}]
    assert rec["pavimentos"][0]["itensCentrais"][0]["produtoNome"] == "Sirene"


def test_registro_snake_case(calculado):
    rec = projeto_to_record(calculado, camel_case=False)
    assert "orcamento_itens" in rec
    assert rec["status"] == "Calculado"


def test_json_relido_sem_recalcular(calculado, tmp_path):
    out = export_projeto_json(calculado, tmp_path / "sub" / "projeto.json")
    relido = load_projeto(out)
    assert relido["orcamento_itens"] == calculado["orcamento_itens"]
    assert relido["financeiro"] == pytest.approx(calculado["financeiro"])


def test_json_com_avisos_e_meta(calculado, tmp_path):
    aviso = {"tipo": "INFRA_SEM_KIT", "chave": "x", "mensagem": "m"}
    out = export_projeto_json(calculado, tmp_path / "p.json", avisos=[aviso], meta={"origem": "teste"})
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["avisos"] == [aviso]
    assert data["meta"] == {"origem": "teste"}
    assert data["projeto"]["id"] == "proj-1"


def test_excel_composicao(calculado, tmp_path):
    out = export_composicao_excel(calculado, tmp_path / "composicao.xlsx")
    wb = load_workbook(out)
    assert wb.sheetnames == ["composicao", "financeiro"]

    ws = wb["composicao"]
    header = [c.value for c in ws[1]]
    assert header == ["produto_nome", "origem", "qtd_sistema", "qtd_final", "custo_unitario", "custo_total"]
    nomes = [ws.cell(row=r, column=1).value for r in range(2, ws.max_row + 1)]
    assert nomes == ["Sirene", "Tubo Zincado 3/4", "Conexão Tê 3/4"]
    assert "R$" in ws.cell(row=2, column=6).number_format

    fin = {r[0].value: r[1].value for r in wb["financeiro"].iter_rows(min_row=2)}
    assert fin["Preço de venda final"] == pytest.approx(round(calculado["financeiro"]["preco_venda_final"], 2))


def test_excel_sem_itens(make_projeto, tmp_path):
    out = export_composicao_excel(make_projeto(), tmp_path / "vazio.xlsx")
    ws = load_workbook(out)["composicao"]
    assert ws.max_row == 1
