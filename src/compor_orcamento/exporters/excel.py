# src/compor_orcamento/exporters/excel.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..models import Projeto

_COLS_COMPOSICAO = ["produto_nome", "origem", "qtd_sistema", "qtd_final", "custo_unitario", "custo_total"]

_LINHAS_FINANCEIRO = [
    ("Custo de materiais", "custo_materiais"),
    ("BDI (%)", "bdi_percentual"),
    ("BDI (R$)", "bdi_valor"),
    ("Margem de lucro (%)", "margem_lucro_percentual"),
    ("Margem de lucro (R$)", "margem_lucro_valor"),
    ("Desconto (%)", "desconto_percentual"),
    ("Desconto (R$)", "desconto_valor"),
    ("Preço de venda final", "preco_venda_final"),
]


def _autofit_columns(ws) -> None:
    """Ajusta largura das colunas com base no conteúdo (openpyxl worksheet)."""
    from openpyxl.utils import get_column_letter
    for i, col in enumerate(ws.columns, start=1):
        max_len = 0
        for cell in col:
            val = cell.value
            val_str = str(val) if val is not None else ""
            if len(val_str) > max_len:
                max_len = len(val_str)
        ws.column_dimensions[get_column_letter(i)].width = min(max_len + 2, 80)


def export_composicao_excel(
    projeto: Projeto,
    path: str | Path,
    *,
    round_decimals: int = 2,
    number_format_currency: str = '"R$" #,##0.00',
    number_format_qty: str = '#,##0.##',
) -> Path:
    """
    Gera um Excel com:
      - aba 'composicao' (linhas da lista de materiais)
      - aba 'financeiro' (formação do preço)
    Retorna o Path do arquivo gerado.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    itens = projeto.get("orcamento_itens") or []
    df_comp = pd.DataFrame(itens, columns=["id", *_COLS_COMPOSICAO])[_COLS_COMPOSICAO]
    for col in ("custo_unitario", "custo_total"):
        df_comp[col] = pd.to_numeric(df_comp[col], errors="coerce").round(round_decimals)

    fin = projeto.get("financeiro") or {}
    df_fin = pd.DataFrame(
        [(rotulo, fin.get(campo, 0.0)) for rotulo, campo in _LINHAS_FINANCEIRO],
        columns=["item", "valor"],
    )
    df_fin["valor"] = pd.to_numeric(df_fin["valor"], errors="coerce").round(round_decimals)

    with pd.ExcelWriter(path, engine="openpyxl") as xlw:
        df_comp.to_excel(xlw, sheet_name="composicao", index=False)
        df_fin.to_excel(xlw, sheet_name="financeiro", index=False)

        wb = xlw.book

        ws_c = wb["composicao"]
        _autofit_columns(ws_c)
        headers = [c.value for c in next(ws_c.iter_rows(min_row=1, max_row=1))]

        def col_idx(hdr: str) -> Optional[int]:
            try:
                return headers.index(hdr) + 1
            except ValueError:
                return None

        moeda: List[Optional[int]] = [col_idx("custo_unitario"), col_idx("custo_total")]
        qtd: List[Optional[int]] = [col_idx("qtd_sistema"), col_idx("qtd_final")]
        for r in ws_c.iter_rows(min_row=2):
            for c in moeda:
                if c:
                    r[c - 1].number_format = number_format_currency
            for c in qtd:
                if c:
                    r[c - 1].number_format = number_format_qty

        ws_f = wb["financeiro"]
        _autofit_columns(ws_f)
        for r, (rotulo, _campo) in zip(ws_f.iter_rows(min_row=2), _LINHAS_FINANCEIRO):
            if "(%)" not in rotulo:
                r[1].number_format = number_format_currency

    return path
