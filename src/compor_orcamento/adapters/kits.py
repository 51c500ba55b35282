# src/compor_orcamento/adapters/kits.py
from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from ..models import Kit, KitComponente, Unidade
from ..utils.utils_chaves import to_snake_keys
from ..utils.utils_num import to_num
from ..utils.utils_planilha import cell_text, find_header_row, pick_col, read_raw

logger = logging.getLogger(__name__)

DEFAULT_KITS: List[Kit] = [
    Kit(
        id="k1",
        nome_kit="Kit Infra Alarme Padrão",
        tipo_infra="alarme",
        percentual_perda=10.0,
        ativo=True,
        componentes=[
            KitComponente(produto_nome="Tubo Zincado 3/4", fator_conversao=1.2, unidade=Unidade.M.value),
            KitComponente(produto_nome="Conexão Tê 3/4", fator_conversao=0.25, unidade=Unidade.UN.value),
        ],
    ),
]


def default_kits() -> List[Kit]:
    return copy.deepcopy(DEFAULT_KITS)


def _to_bool(x: object) -> bool:
    if isinstance(x, str):
        return x.strip().casefold() in ("true", "1", "sim", "s", "yes", "ativo")
    return bool(x)


def kit_from_dict(d: dict) -> Kit:
    """
    Kit a partir do registro persistido (camelCase ou snake_case).
    tipo_infra e produto_nome NÃO são normalizados: a junção é por igualdade exata.
    """
    d = to_snake_keys(d)
    componentes: List[KitComponente] = []
    for c in d.get("componentes") or []:
        nome = cell_text(c.get("produto_nome"))
        if not nome:
            logger.warning("Kit %r: componente sem produto ignorado.", d.get("nome_kit"))
            continue
        componentes.append(KitComponente(
            produto_nome=nome,
            fator_conversao=to_num(c.get("fator_conversao")),
            unidade=(cell_text(c.get("unidade")) or Unidade.UN.value).upper(),
        ))
    return Kit(
        id=cell_text(d.get("id")),
        nome_kit=cell_text(d.get("nome_kit")),
        tipo_infra=cell_text(d.get("tipo_infra")),
        percentual_perda=to_num(d.get("percentual_perda")),
        componentes=componentes,
        ativo=_to_bool(d.get("ativo", False)),
    )


def kits_from_raw(df_raw: pd.DataFrame) -> List[Kit]:
    """Planilha de kits: uma linha por kit, com o JSON completo na coluna DADOS_JSON."""
    if df_raw.empty:
        return []
    header_row = find_header_row(df_raw, [("dados_json", "dados json")])
    if header_row is None:
        raise KeyError("Planilha de kits sem coluna DADOS_JSON.")
    headers = [cell_text(h) for h in df_raw.iloc[header_row].tolist()]
    col_json = pick_col(headers, ("dados_json", "dados json"))

    kits: List[Kit] = []
    invalidos = 0
    for row in df_raw.iloc[header_row + 1:].itertuples(index=False):
        raw = cell_text(row[col_json])
        if not raw:
            continue
        try:
            kits.append(kit_from_dict(json.loads(raw)))
        except (json.JSONDecodeError, AttributeError, TypeError) as e:
            invalidos += 1
            logger.warning("Linha de kit com JSON inválido ignorada: %s", e)
    if invalidos:
        logger.warning("Kits: %d linha(s) inválida(s) ignorada(s).", invalidos)
    return kits


def kits_from_rows(rows: Sequence[Sequence[Any]]) -> List[Kit]:
    if not rows:
        return []
    return kits_from_raw(pd.DataFrame(list(rows), dtype=object))


def load_kits(path: str | Path, sheet: str | int | None = None) -> List[Kit]:
    """Lê kits de um .json (lista) ou de uma planilha com coluna DADOS_JSON."""
    p = Path(path)
    if p.suffix.lower() == ".json":
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise RuntimeError(f"{p.name}: esperado uma lista de kits.")
        kits = [kit_from_dict(k) for k in data]
    else:
        kits = kits_from_raw(read_raw(p, sheet))

    ativos = sum(1 for k in kits if k["ativo"])
    logger.info("Kits %s: %d kit(s), %d ativo(s).", p.name, len(kits), ativos)
    return kits
