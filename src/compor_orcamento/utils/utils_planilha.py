# src/compor_orcamento/utils/utils_planilha.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .utils_text import norm_header

_EXCEL_EXT = {".xlsx", ".xlsm", ".xls"}  # .xls via xlrd


def read_raw(path: str | Path, sheet: str | int | None = None) -> pd.DataFrame:
    """
    Lê planilha (xlsx/xls/csv) SEM cabeçalho, tudo como texto bruto,
    para que a linha de cabeçalho seja detectada depois.
    """
    p = Path(path)
    ext = p.suffix.lower()
    if ext in _EXCEL_EXT:
        return pd.read_excel(p, sheet_name=0 if sheet is None else sheet, header=None, dtype=object)
    if ext == ".csv":
        # sep=None: detecta ',' ou ';' (planilhas pt-BR)
        return pd.read_csv(p, header=None, dtype=str, sep=None, engine="python", encoding="utf-8-sig")
    raise RuntimeError(f"Formato de planilha não suportado: {p.name}")


def _matches(cell: str, candidates: Iterable[str]) -> bool:
    return any(cell == c or cell.startswith(c) for c in candidates)


def find_header_row(
    df_raw: pd.DataFrame,
    required: Iterable[Iterable[str]],
    max_scan: int = 20,
) -> Optional[int]:
    """Primeira linha em que cada grupo de candidatos tem ao menos uma célula compatível."""
    groups = [tuple(norm_header(c) for c in g) for g in required]
    for i in range(min(max_scan, len(df_raw))):
        row = [norm_header(v) for v in df_raw.iloc[i].tolist()]
        if all(any(_matches(cell, g) for cell in row if cell) for g in groups):
            return i
    return None


def pick_col(headers: List[str], candidates: Iterable[str], required: bool = True) -> Optional[int]:
    """
    Índice da coluna cujo cabeçalho bate com um dos candidatos:
    primeiro igualdade, depois prefixo (ex.: "PRECO" == "PRECO UNITARIO").
    """
    norm = [norm_header(h) for h in headers]
    for c in candidates:
        c_norm = norm_header(c)
        if c_norm in norm:
            return norm.index(c_norm)
        for idx, h in enumerate(norm):
            if c_norm and h.startswith(c_norm):
                return idx
    if required:
        raise KeyError(f"Não encontrei nenhuma coluna compatível com: {tuple(candidates)}")
    return None


def cell_text(v: object) -> str:
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return ""
    return str(v).strip()
