# src/cli.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

# permite "python src/cli.py" rodar sem instalar o pacote
sys.path.append(str(Path(__file__).resolve().parent))

from compor_orcamento.adapters.catalogo import load_catalogo
from compor_orcamento.adapters.kits import default_kits, load_kits
from compor_orcamento.adapters.projeto import load_projeto
from compor_orcamento.ajustes import ajustar_item, calcular_projeto, totais_por_origem
from compor_orcamento.config import SCRIPT_API_URL
from compor_orcamento.exporters.excel import export_composicao_excel
from compor_orcamento.exporters.json_projeto import export_projeto_json
from compor_orcamento.fetchers.planilha import fetch_catalogo, fetch_kits
from compor_orcamento.financeiro import (
    ajustar_percentuais,
    aplicar_desconto_por_percentual,
    aplicar_desconto_por_valor,
    definir_custo_materiais,
)

app = typer.Typer(no_args_is_help=True, add_completion=False, help="""
Composição de materiais e formação de preço de propostas de incêndio — saída em JSON/Excel.
""")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado (DEBUG).")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


# -----------------------------------------
# Helpers
# -----------------------------------------
def _fmt_brl(v: float) -> str:
    s = f"{v:,.2f}"
    return "R$ " + s.replace(",", "_").replace(".", ",").replace("_", ".")


def _salvar(projeto, out: Path, snake: bool) -> None:
    export_projeto_json(projeto, out, camel_case=not snake)
    typer.secho(f">> OK! JSON salvo em {out}", fg=typer.colors.GREEN)


def _carregar_projeto(path: Path):
    try:
        return load_projeto(path)
    except (KeyError, RuntimeError, ValueError) as e:
        # JSONDecodeError é ValueError
        typer.secho(f"[PROJETO] Falhou: {e}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _mostrar_financeiro(fin) -> None:
    typer.echo(f"  Custo de materiais : {_fmt_brl(fin['custo_materiais'])}")
    typer.echo(f"  BDI                : {fin['bdi_percentual']:g}% = {_fmt_brl(fin['bdi_valor'])}")
    typer.echo(f"  Margem de lucro    : {fin['margem_lucro_percentual']:g}% = {_fmt_brl(fin['margem_lucro_valor'])}")
    typer.echo(f"  Desconto           : {fin['desconto_percentual']:.2f}% = {_fmt_brl(fin['desconto_valor'])}")
    typer.secho(f"  Preço de venda     : {_fmt_brl(fin['preco_venda_final'])}", bold=True)


# =====================================================================
# CÁLCULO
# =====================================================================

@app.command("calcular")
def calcular(
    projeto: Path = typer.Option(..., exists=True, readable=True, help="JSON do projeto (pavimentos, itens, infra)."),
    catalogo: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Catálogo (.xlsx/.csv/.json)."),
    kits: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Kits (.json ou planilha com DADOS_JSON)."),
    url: str = typer.Option(SCRIPT_API_URL, help="Web-app da planilha (usado quando --catalogo/--kits faltam)."),
    origem_mista: bool = typer.Option(False, help="Marca linhas manuais+kit como 'manual+calculado'."),
    bdi: Optional[float] = typer.Option(None, help="Sobrescreve o BDI (%)."),
    margem: Optional[float] = typer.Option(None, help="Sobrescreve a margem de lucro (%)."),
    out: Path = typer.Option(Path("output/projeto_calculado.json"), help="JSON de saída."),
    excel: Optional[Path] = typer.Option(None, help="Também gera a composição em Excel."),
    snake: bool = typer.Option(False, help="Grava chaves em snake_case (padrão: camelCase do registro)."),
):
    """
    Recalcula a lista de materiais e o preço de venda (descarta ajustes manuais anteriores).
    """
    typer.secho(">> Lendo PROJETO…", fg=typer.colors.CYAN)
    proj = _carregar_projeto(projeto)

    if not catalogo and not url:
        raise typer.BadParameter("Informe --catalogo ou --url (ou COMPOR_ORCAMENTO_SCRIPT_URL).")

    try:
        typer.secho(">> Lendo CATÁLOGO…", fg=typer.colors.CYAN)
        cat = load_catalogo(catalogo) if catalogo else fetch_catalogo(url)

        typer.secho(">> Lendo KITS…", fg=typer.colors.CYAN)
        if kits:
            lista_kits = load_kits(kits)
        elif url:
            lista_kits = fetch_kits(url)
        else:
            typer.secho("[KITS] Nenhuma fonte informada; usando kits padrão.", err=True, fg=typer.colors.YELLOW)
            lista_kits = default_kits()
    except (KeyError, RuntimeError, ValueError) as e:
        typer.secho(f"[ENTRADA] Falhou: {e}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if bdi is not None or margem is not None:
        proj["financeiro"] = ajustar_percentuais(proj["financeiro"], bdi=bdi, margem=margem)

    typer.secho(">> Compondo ORÇAMENTO…", fg=typer.colors.CYAN)
    calculado, avisos = calcular_projeto(proj, cat, lista_kits, marcar_origem_mista=origem_mista)

    for av in avisos:
        typer.secho(f"[{av['tipo']}] {av['mensagem']}", err=True, fg=typer.colors.YELLOW)

    typer.echo(f">> {len(calculado['orcamento_itens'])} linha(s) de material.")
    _mostrar_financeiro(calculado["financeiro"])

    _salvar(calculado, out, snake)
    if excel:
        export_composicao_excel(calculado, excel)
        typer.secho(f">> OK! Excel salvo em {excel}", fg=typer.colors.GREEN)


# =====================================================================
# AJUSTES
# =====================================================================

@app.command("ajustar")
def ajustar(
    projeto: Path = typer.Option(..., exists=True, readable=True, help="JSON do projeto já calculado."),
    item: str = typer.Option(..., help="Id da linha ou nome exato do produto."),
    qtd: Optional[float] = typer.Option(None, help="Nova quantidade final."),
    unitario: Optional[float] = typer.Option(None, help="Novo custo unitário."),
    out: Optional[Path] = typer.Option(None, help="JSON de saída (padrão: sobrescreve --projeto)."),
    snake: bool = typer.Option(False, help="Grava chaves em snake_case."),
):
    """
    Ajuste manual de uma linha (quantidade e/ou custo unitário) sem refazer a composição.
    """
    if qtd is None and unitario is None:
        raise typer.BadParameter("Informe --qtd e/ou --unitario.")

    proj = _carregar_projeto(projeto)
    itens = proj["orcamento_itens"]
    alvo = next((it for it in itens if it["id"] == item), None) \
        or next((it for it in itens if it["produto_nome"] == item), None)
    if alvo is None:
        raise typer.BadParameter(f"Linha {item!r} não encontrada no orçamento.")

    proj["orcamento_itens"], proj["financeiro"] = ajustar_item(
        itens, proj["financeiro"], alvo["id"], qtd_final=qtd, custo_unitario=unitario,
    )
    _mostrar_financeiro(proj["financeiro"])
    _salvar(proj, out or projeto, snake)


@app.command("desconto")
def desconto(
    projeto: Path = typer.Option(..., exists=True, readable=True, help="JSON do projeto."),
    valor: Optional[float] = typer.Option(None, help="Desconto em R$."),
    percentual: Optional[float] = typer.Option(None, help="Desconto em %."),
    out: Optional[Path] = typer.Option(None, help="JSON de saída (padrão: sobrescreve --projeto)."),
    snake: bool = typer.Option(False, help="Grava chaves em snake_case."),
):
    """
    Aplica desconto especial em R$ ou em % (o outro campo é derivado).
    """
    if (valor is None) == (percentual is None):
        raise typer.BadParameter("Informe exatamente um entre --valor e --percentual.")

    proj = _carregar_projeto(projeto)
    if valor is not None:
        proj["financeiro"] = aplicar_desconto_por_valor(proj["financeiro"], valor)
    else:
        proj["financeiro"] = aplicar_desconto_por_percentual(proj["financeiro"], percentual)

    _mostrar_financeiro(proj["financeiro"])
    _salvar(proj, out or projeto, snake)


@app.command("financeiro")
def financeiro(
    projeto: Path = typer.Option(..., exists=True, readable=True, help="JSON do projeto."),
    bdi: Optional[float] = typer.Option(None, help="BDI (%)."),
    margem: Optional[float] = typer.Option(None, help="Margem de lucro (%)."),
    custo: Optional[float] = typer.Option(None, help="Custo de materiais informado (só sem lista de materiais)."),
    out: Optional[Path] = typer.Option(None, help="JSON de saída (padrão: sobrescreve --projeto)."),
    snake: bool = typer.Option(False, help="Grava chaves em snake_case."),
):
    """
    Edita BDI, margem ou o custo de materiais avulso e recalcula o preço.
    """
    proj = _carregar_projeto(projeto)
    if custo is not None:
        if proj["orcamento_itens"]:
            raise typer.BadParameter("O projeto tem lista de materiais; o custo vem da soma das linhas.")
        proj["financeiro"] = definir_custo_materiais(proj["financeiro"], custo)
    proj["financeiro"] = ajustar_percentuais(proj["financeiro"], bdi=bdi, margem=margem)

    _mostrar_financeiro(proj["financeiro"])
    _salvar(proj, out or projeto, snake)


@app.command("resumo")
def resumo(
    projeto: Path = typer.Option(..., exists=True, readable=True, help="JSON do projeto."),
):
    """
    Mostra a lista de materiais e a formação do preço.
    """
    proj = _carregar_projeto(projeto)
    typer.secho(f"{proj['obra'] or proj['id']} — {proj['cliente']} [{proj['status']}]", bold=True)
    for it in proj["orcamento_itens"]:
        ajuste = "" if it["qtd_final"] == it["qtd_sistema"] else f" (sistema {it['qtd_sistema']:g})"
        typer.echo(
            f"  {it['produto_nome']:<40} {it['origem']:<17} "
            f"{it['qtd_final']:>8g}{ajuste} x {_fmt_brl(it['custo_unitario'])} = {_fmt_brl(it['custo_total'])}"
        )
    for origem, total in totais_por_origem(proj["orcamento_itens"]).items():
        typer.echo(f"  Subtotal {origem}: {_fmt_brl(total)}")
    _mostrar_financeiro(proj["financeiro"])


if __name__ == "__main__":
    app(prog_name="cli.py")
