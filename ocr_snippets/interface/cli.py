# ocr_snippets/interface/cli.py

from typing import List, Tuple
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt
from rich import box
from rich.text import Text

from ocr_snippets.domain.output import OutputTree


DEFAULT_PRE_TAG = "<em>"
DEFAULT_POST_TAG = "</em>"

console = Console()


def split_highlighted(
    text: str,
    pre_tag: str = DEFAULT_PRE_TAG,
    post_tag: str = DEFAULT_POST_TAG,
) -> List[Tuple[str, bool]]:
    """
    Split snippet text into (segment, is_highlighted) pairs.
    An unterminated highlight runs to the end of the text.
    """
    segments: List[Tuple[str, bool]] = []
    position = 0
    while position < len(text):
        start = text.find(pre_tag, position)
        if start < 0:
            segments.append((text[position:], False))
            break
        if start > position:
            segments.append((text[position:start], False))
        start += len(pre_tag)
        end = text.find(post_tag, start)
        if end < 0:
            segments.append((text[start:], True))
            break
        segments.append((text[start:end], True))
        position = end + len(post_tag)
    return [(segment, flag) for segment, flag in segments if segment]


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]🔍 OCR Snippet Viewer[/bold cyan]\n"
        "[dim]Ranked, highlighted passages from scanned documents[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_loading_status(document_stats: List[dict]) -> None:
    total = sum(stat["count"] for stat in document_stats)
    console.print(
        f"\n[green]✓[/green] Loaded [bold]{len(document_stats)}[/bold] documents — "
        f"[bold]{total}[/bold] snippets ready.\n"
    )


def display_documents(document_stats: List[dict]) -> None:
    table = Table(title="Documents", box=box.SIMPLE_HEAVY)
    table.add_column("Document", style="bold white")
    table.add_column("Snippets", justify="right")
    for stat in document_stats:
        table.add_row(stat["document_id"], str(stat["count"]))
    console.print(table)


def prompt_for_document() -> str:
    return Prompt.ask("\n[bold yellow]📄 Document id[/bold yellow]")


def display_snippets(
    document_id: str,
    response: OutputTree,
    pre_tag: str = DEFAULT_PRE_TAG,
    post_tag: str = DEFAULT_POST_TAG,
) -> None:
    snippets = response["snippets"]
    console.print(
        f"\n[bold]Snippets for:[/bold] [italic]\"{document_id}\"[/italic] "
        f"[dim]({len(snippets)} of {response['numTotal']})[/dim]\n"
    )

    for rank, tree in enumerate(snippets, start=1):
        score_color = _score_to_color(tree["score"])

        panel_content = Text()
        page_ids = ", ".join(str(page["id"]) for page in tree.get("pages", [])) or "—"
        panel_content.append("📄 Pages: ", style="dim")
        panel_content.append(page_ids, style="bold white")
        panel_content.append("\n🎯 Score: ")
        panel_content.append(f"{tree['score']:.4f}", style=score_color)
        panel_content.append(
            f"\n🔲 Regions: {len(tree['regions'])}"
            f"  ✨ Highlights: {_count_highlights(tree)}\n\n",
            style="dim",
        )
        for segment, highlighted in split_highlighted(tree["text"], pre_tag, post_tag):
            panel_content.append(segment, style="bold black on yellow" if highlighted else None)

        console.print(Panel(
            panel_content,
            title=f"[bold]#{rank}[/bold]",
            border_style=score_color,
            box=box.ROUNDED,
            padding=(1, 2),
        ))


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Show another document?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _count_highlights(tree: OutputTree) -> str:
    if "highlights" not in tree:
        return "n/a"
    return str(len(tree["highlights"]))


def _score_to_color(score: float) -> str:
    # NaN fails every comparison and falls through to red
    if score >= 2.0:
        return "green"
    elif score >= 1.0:
        return "yellow"
    else:
        return "red"
