# src/compor_orcamento/exporters/json_projeto.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Aviso, Projeto
from ..utils.utils_chaves import to_camel_keys


def projeto_to_record(projeto: Projeto, *, camel_case: bool = True) -> Dict[str, Any]:
    """Registro persistível: dados brutos dos pavimentos + itens e financeiro calculados."""
    rec: Dict[str, Any] = json.loads(json.dumps(projeto, default=str))
    return to_camel_keys(rec) if camel_case else rec


def export_projeto_json(
    projeto: Projeto,
    path: str | Path,
    *,
    camel_case: bool = True,
    avisos: Optional[List[Aviso]] = None,
    meta: Optional[Dict[str, Any]] = None,
    indent: int = 2,
    ensure_ascii: bool = False,
) -> Path:
    """
    Salva o projeto calculado. Com `avisos` ou `meta`, o arquivo vira:
    {
      "projeto": { ... },
      "avisos": [ ... ],            # opcional
      "meta": { ... }               # opcional
    }
    Sem eles, grava só o registro do projeto (mesmo formato que load_projeto lê).
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, Any] = projeto_to_record(projeto, camel_case=camel_case)
    if avisos or meta:
        payload = {"projeto": payload}
        if avisos:
            payload["avisos"] = list(avisos)
        if meta:
            payload["meta"] = meta

    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=ensure_ascii, indent=indent)

    return out
