from __future__ import annotations

import logging
import random
import time
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "compor-orcamento/0.1 (+requests)",
    "Accept": "application/json, */*",
    "Connection": "keep-alive",
}


def make_session(headers: dict | None = None) -> requests.Session:
    s = requests.Session()
    s.headers.update(DEFAULT_HEADERS)
    if headers:
        s.headers.update(headers)
    return s


def fetch_json(url: str, params: dict | None = None, timeout: float = 15.0,
               retries: int = 3, backoff: float = 1.6,
               headers: dict | None = None,
               session: requests.Session | None = None) -> Any:
    """
    GET com retries e devolve o JSON decodificado.
    Status 4xx não é repetido (não vai mudar); 5xx/timeout/rede são.
    Esgotadas as tentativas -> RuntimeError.
    """
    sess = session or make_session(headers)
    last: Exception | None = None

    for attempt in range(retries):
        try:
            r = sess.get(url, params=params, allow_redirects=True, timeout=timeout)
            if 400 <= r.status_code < 500:
                raise RuntimeError(f"HTTP {r.status_code} em {url}")
            r.raise_for_status()
            return r.json()
        except RuntimeError:
            raise
        except (requests.RequestException, ValueError) as e:
            last = e
            logger.debug("Tentativa %d/%d falhou para %s: %s", attempt + 1, retries, url, e)
            if attempt + 1 < retries:
                time.sleep((backoff ** attempt) + random.uniform(0, 0.5))

    raise RuntimeError(f"Falha ao buscar {url}: {last}")
