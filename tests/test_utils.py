import pytest

from compor_orcamento.utils.utils_num import parse_preco_br, to_num


@pytest.mark.parametrize("entrada, esperado", [
    ("R$ 1.234,56", 1234.56),
    ("r$50,00", 50.0),
    ("12,5", 12.5),
    ("1234.56", 1234.56),
    ("1.234.567", 1234567.0),
    ("1e5", 100000.0),
    (" 7 ", 7.0),
    ("-3,5", -3.5),
    (42, 42.0),
])
def test_parse_preco_br(entrada, esperado):
    assert parse_preco_br(entrada) == pytest.approx(esperado)


@pytest.mark.parametrize("entrada", ["abc12", "12abc", "12-3", "US$ 5", "-", "", "nan", "inf", None, True])
def test_parse_preco_br_lixo(entrada):
    assert parse_preco_br(entrada) is None


@pytest.mark.parametrize("entrada", ["abc12", "12abc", "12-3", float("nan"), float("-inf"), 10**400])
def test_to_num_malformado_vira_default(entrada):
    assert to_num(entrada) == 0.0
    assert to_num(entrada, default=30) == 30


def test_to_num_notacao_cientifica():
    assert to_num("1e5") == 100000.0
    assert to_num("2,5") == 2.5
