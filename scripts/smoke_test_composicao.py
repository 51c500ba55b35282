#!/usr/bin/env python3
import sys, logging, traceback
from pathlib import Path

# permitir "python scripts/..." sem instalar o pacote
sys.path.append("src")

from compor_orcamento.adapters.catalogo import load_catalogo
from compor_orcamento.adapters.kits import default_kits, load_kits
from compor_orcamento.adapters.projeto import load_projeto
from compor_orcamento.processor import compor_orcamento

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

def main():
    # ajuste os caminhos se necessário
    proj_path = Path("data/projeto.json")
    cat_path = Path("data/produtos.xlsx")
    kits_path = Path("data/kits.json")

    for p in (proj_path, cat_path):
        if not p.exists():
            print(f"[ERRO] Arquivo não encontrado: {p}")
            sys.exit(1)

    print("== Testando composição ==")
    try:
        projeto = load_projeto(proj_path)
        catalogo = load_catalogo(cat_path)
        kits = load_kits(kits_path) if kits_path.exists() else default_kits()
        comp = compor_orcamento(projeto, catalogo, kits)
    except Exception:
        print("\n[ERRO] Falha na composição:\n")
        traceback.print_exc()
        sys.exit(2)

    print(f"\nLinhas: {len(comp['itens'])}")
    for it in comp["itens"][:15]:
        print(f"- {it['produto_nome'][:50]!r} | {it['origem']} | qtd={it['qtd_final']:g} "
              f"| unit={it['custo_unitario']:.2f} | total={it['custo_total']:.2f}")

    fin = comp["financeiro"]
    print(f"\nMateriais: {fin['custo_materiais']:.2f} | Preço final: {fin['preco_venda_final']:.2f}")

    if comp["avisos"]:
        print(f"\n[AVISO] {len(comp['avisos'])} aviso(s):")
        for av in comp["avisos"]:
            print(f"  [{av['tipo']}] {av['mensagem']}")

    print("\nOK ✅")

if __name__ == "__main__":
    main()
