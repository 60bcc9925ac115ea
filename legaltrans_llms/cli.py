"""
Command-line interface for LegalTrans-LLMs.

Provides commands for:
- Translating legal documents (with chunk progress and quality report)
- Scoring an existing translation section by section
- Inspecting the classifier, terminology table, corpus and prompts
- Managing API keys

Usage:
    legaltrans translate --input deed.txt --target hindi --backend openai
    legaltrans score --source deed.txt --translated deed.hi.txt
    legaltrans classify --text "This AGREEMENT is made between ..."
    legaltrans terms --source english --target marathi
    legaltrans corpus stats
    legaltrans keys list
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from legaltrans_llms import __version__
from legaltrans_llms.classify import classify as classify_text
from legaltrans_llms.config import APP_NAME, CORPUS_DIR, DEFAULT_BACKEND, LOG_LEVEL, TERMINOLOGY_FILE
from legaltrans_llms.languages import display_name
from legaltrans_llms.models import QualityReport, TranslationRequest
from legaltrans_llms.pipeline import PipelineConfig, TranslationPipeline
from legaltrans_llms.refine.prompting import PromptComposer
from legaltrans_llms.translate.base import TranslationFailed
from legaltrans_llms.translate.corpus import CorpusError, CorpusIndex
from legaltrans_llms.translate.glossary import load_glossary
from legaltrans_llms.translate.terminology import TerminologyError, TerminologyStore

app = typer.Typer(
    name="legaltrans",
    help="LegalTrans-LLMs: grounded LLM translation of Indian legal documents",
    add_completion=False,
)
console = Console()

# Failures reported as a red message and exit code 1
HANDLED_ERRORS = (TerminologyError, CorpusError, TranslationFailed, ValueError, OSError)


def version_callback(value: bool):
    if value:
        console.print(f"{APP_NAME} v{__version__}")
        raise typer.Exit()


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: str = typer.Option(
        LOG_LEVEL, "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """LegalTrans-LLMs: legal document translation for Indian languages."""
    setup_logging(log_level)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/] {error}", style="bold")
    raise typer.Exit(1)


def _read_input(text: Optional[str], path: Optional[Path]) -> str:
    if text:
        return text
    if path:
        return path.read_text(encoding="utf-8")
    console.print("[red]Error:[/] Provide either --text or --input", style="bold")
    raise typer.Exit(1)


def _print_report(report: QualityReport) -> None:
    table = Table(title="Section Quality")
    table.add_column("#", justify="right")
    table.add_column("Section", style="cyan", max_width=50)
    table.add_column("Score", justify="right")
    table.add_column("Confidence")
    table.add_column("Review")

    colors = {"high": "green", "medium": "yellow", "low": "red"}
    for i, section in enumerate(report.sections, 1):
        confidence = section.score.confidence.value
        preview = section.text if len(section.text) <= 60 else section.text[:57] + "..."
        table.add_row(
            str(i),
            preview,
            str(section.score.overall),
            f"[{colors[confidence]}]{confidence}[/]",
            "[red]yes[/]" if section.needs_review else "no",
        )
    console.print(table)

    overall = report.overall
    factors = overall.factors
    console.print(
        f"\n[bold]Overall:[/] {overall.overall} ({overall.confidence.value})  "
        f"terminology {factors.terminology_match}, corpus {factors.corpus_similarity}, "
        f"complexity {factors.complexity}"
    )
    console.print(f"[dim]{overall.details}[/]")
    if report.mismatched_sections:
        console.print(
            f"[yellow]Warning:[/] section counts differ by {report.mismatched_sections}; "
            "unpaired sections were not scored"
        )


@app.command()
def translate(
    input_text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to translate"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Input text file (UTF-8)"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
    source_lang: str = typer.Option("english", "--source", "-s", help="Source language name or code"),
    target_lang: str = typer.Option("hindi", "--target", "-l", help="Target language name or code"),
    backend: str = typer.Option(DEFAULT_BACKEND, "--backend", "-b", help="Backend: openai, deepseek, anthropic, dummy"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model name for LLM backends"),
    glossary_file: Optional[Path] = typer.Option(None, "--glossary", "-g", help="Glossary CSV or tab-separated file"),
    document_type: Optional[str] = typer.Option(None, "--type", "-d", help="Document type (classified when omitted)"),
    score: bool = typer.Option(True, "--score/--no-score", help="Show the section quality report"),
    transliterate: bool = typer.Option(
        False, "--transliterate",
        help="Phonetically repair leftover Latin words in the output",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Translate a legal document."""
    text = _read_input(input_text, input_file)

    try:
        glossary = load_glossary(glossary_file).as_tuple() if glossary_file else ()
        if glossary:
            console.print(f"[green]Loaded glossary:[/] {len(glossary)} terms from {glossary_file}")

        config = PipelineConfig(backend=backend, model=model, transliterate_residuals=transliterate)
        pipeline = TranslationPipeline(config)
        request = TranslationRequest(text, source_lang, target_lang, document_type, glossary)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            console=console,
            transient=as_json,
        ) as progress:
            task = progress.add_task(f"Translating to {display_name(target_lang)}...", total=100)
            outcome = pipeline.translate_large(
                request, on_progress=lambda pct: progress.update(task, completed=pct),
            )
            if score:
                progress.update(task, description="Scoring...")
                outcome.quality = pipeline.assess(text, outcome.translated_text, source_lang, target_lang)
            progress.update(task, description="[green]Complete!", completed=100)
    except HANDLED_ERRORS as e:
        _fail(e)

    if output_file:
        output_file.write_text(outcome.translated_text, encoding="utf-8")

    if as_json:
        console.print_json(json.dumps(outcome.to_dict(), ensure_ascii=False))
        return

    table = Table(title="Translation Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Document Type", outcome.document_type)
    table.add_row("Chunks", str(outcome.chunk_count))
    table.add_row("Confidence", str(outcome.confidence))
    table.add_row("Residual Words", ", ".join(outcome.residual_words) or "-")
    console.print(table)

    if output_file:
        console.print(f"\n[green]Saved to:[/] {output_file}")
    else:
        console.print("\n[bold]Translated text:[/]\n")
        console.print(outcome.translated_text, markup=False)

    if outcome.quality is not None:
        console.print()
        _print_report(outcome.quality)


@app.command()
def score(
    source_file: Path = typer.Option(..., "--source-file", "-S", help="Source text file"),
    translated_file: Path = typer.Option(..., "--translated", "-T", help="Translated text file"),
    source_lang: str = typer.Option("english", "--source", "-s", help="Source language"),
    target_lang: str = typer.Option("hindi", "--target", "-l", help="Target language"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Score an existing translation section by section."""
    try:
        source = source_file.read_text(encoding="utf-8")
        translated = translated_file.read_text(encoding="utf-8")
        pipeline = TranslationPipeline(PipelineConfig(backend="dummy"))
        report = pipeline.assess(source, translated, source_lang, target_lang)
    except HANDLED_ERRORS as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(report.to_dict(), ensure_ascii=False))
    else:
        _print_report(report)


@app.command()
def classify(
    input_text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to classify"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Input text file"),
):
    """Detect the legal document type."""
    doc_type = classify_text(_read_input(input_text, input_file))
    console.print(f"Document type: [bold cyan]{doc_type.value}[/] ({doc_type.label})")


@app.command()
def terms(
    source_lang: str = typer.Option("english", "--source", "-s", help="Source language"),
    target_lang: str = typer.Option("hindi", "--target", "-l", help="Target language"),
    count: int = typer.Option(10, "--count", "-n", help="Number of term pairs"),
    path: Path = typer.Option(TERMINOLOGY_FILE, "--file", "-f", help="Terminology JSON file"),
):
    """Show the terminology pairs offered to the model."""
    try:
        pairs = TerminologyStore(path).top_terms(source_lang, target_lang, n=count)
    except TerminologyError as e:
        _fail(e)

    table = Table(title=f"Legal Terminology: {display_name(source_lang)} → {display_name(target_lang)}")
    table.add_column(display_name(source_lang), style="cyan")
    table.add_column(display_name(target_lang), style="green")
    for src, tgt in pairs:
        table.add_row(src, tgt)
    console.print(table)


@app.command()
def corpus(
    action: str = typer.Argument("stats", help="Action: stats, search, examples"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Search text"),
    language: str = typer.Option("english", "--language", "-l", help="Document language"),
    document_type: Optional[str] = typer.Option(None, "--type", "-d", help="Document type filter"),
    limit: int = typer.Option(5, "--limit", "-n", help="Maximum results"),
    directory: Path = typer.Option(CORPUS_DIR, "--dir", help="Corpus directory"),
):
    """Show corpus statistics, search or list reference documents."""
    index = CorpusIndex(directory)
    try:
        if action == "stats":
            stats = index.stats()
            table = Table(title="Reference Corpus")
            table.add_column("Group", style="cyan")
            table.add_column("Documents", justify="right", style="green")
            for lang, n in sorted(stats["language_counts"].items()):
                table.add_row(f"language: {lang}", str(n))
            for doc_type, n in sorted(stats["type_counts"].items()):
                table.add_row(f"type: {doc_type}", str(n))
            table.add_row("[bold]total[/]", str(stats["total_documents"]))
            console.print(table)
        elif action == "search":
            if not query:
                console.print("[red]Error:[/] --query is required for search")
                raise typer.Exit(1)
            results = index.search_scored(query, language, document_type, limit=limit)
            if not results:
                console.print("[yellow]No documents found.[/]")
                return
            table = Table(title=f"Corpus matches ({display_name(language)})")
            table.add_column("ID", style="cyan")
            table.add_column("Title")
            table.add_column("Type")
            table.add_column("Similarity", justify="right", style="green")
            for doc, similarity in results:
                table.add_row(doc.id, doc.title, doc.document_type, f"{similarity:.1f}")
            console.print(table)
        elif action == "examples":
            if not document_type:
                console.print("[red]Error:[/] --type is required for examples")
                raise typer.Exit(1)
            docs = index.examples(language, document_type, limit=limit)
            if not docs:
                console.print("[yellow]No documents found.[/]")
                return
            table = Table(title=f"{display_name(language)} {document_type} examples")
            table.add_column("ID", style="cyan")
            table.add_column("Title")
            table.add_column("Source")
            for doc in docs:
                table.add_row(doc.id, doc.title, doc.source)
            console.print(table)
        else:
            console.print(f"[red]Error:[/] Unknown action '{action}'")
            console.print("Available actions: stats, search, examples")
            raise typer.Exit(1)
    except CorpusError as e:
        _fail(e)


@app.command()
def prompt(
    input_text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to translate"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Input text file"),
    source_lang: str = typer.Option("english", "--source", "-s", help="Source language"),
    target_lang: str = typer.Option("hindi", "--target", "-l", help="Target language"),
    document_type: Optional[str] = typer.Option(None, "--type", "-d", help="Document type"),
):
    """Preview the system prompt composed for a text."""
    text = _read_input(input_text, input_file)
    try:
        composer = PromptComposer(TerminologyStore(TERMINOLOGY_FILE), CorpusIndex(CORPUS_DIR))
        spec = composer.compose(text, source_lang, target_lang, document_type or classify_text(text))
    except TerminologyError as e:
        _fail(e)

    console.print("\n[bold cyan]System Prompt:[/]\n")
    console.print(spec.system_prompt(), markup=False)


@app.command()
def keys(
    action: str = typer.Argument(..., help="Action: list, set, status, delete"),
    service: Optional[str] = typer.Argument(None, help="Service name (openai, deepseek, anthropic)"),
):
    """Manage API keys.

    Examples:
        legaltrans keys list
        legaltrans keys set openai
        legaltrans keys status openai
    """
    from legaltrans_llms.keys import SERVICES, KeyManager, env_var_for

    km = KeyManager()

    if action == "list":
        table = Table(title="API Keys Status")
        table.add_column("Service", style="cyan")
        table.add_column("Status")
        table.add_column("Source", style="yellow")
        table.add_column("Value", style="dim")
        for info in km.list_keys():
            status = "[green]✓ Set[/]" if info.is_set else "[red]✗ Not set[/]"
            table.add_row(info.service, status, info.source, info.masked_value or "-")
        console.print(table)
        console.print("\n[dim]Priority: env > keychain > config file[/]")
        return

    if action not in ("set", "status", "delete"):
        console.print(f"[red]Error:[/] Unknown action '{action}'")
        console.print("Available actions: list, set, status, delete")
        raise typer.Exit(1)

    if not service:
        console.print("[red]Error:[/] Service name required")
        console.print(f"Available services: {', '.join(SERVICES)}")
        raise typer.Exit(1)

    if action == "set":
        key = typer.prompt(f"Enter API key for {service}", hide_input=True)
        if not key.strip():
            console.print("[red]Error:[/] Key cannot be empty")
            raise typer.Exit(1)
        storage = km.set_key(service, key.strip())
        console.print(f"[green]✓[/] API key for {service} saved to {storage}")
    elif action == "status":
        info = km.get_key_info(service)
        if info.is_set:
            console.print(f"[green]✓[/] API key for {service} is set ({info.source}: {info.masked_value})")
        else:
            console.print(f"[red]✗[/] No API key found for {service}")
            console.print(f"  Set it with [cyan]legaltrans keys set {service}[/] "
                          f"or export {env_var_for(service)}")
    else:
        if km.delete_key(service):
            console.print(f"[green]✓[/] API key for {service} deleted")
        else:
            console.print(f"[yellow]⚠[/] No key found to delete for {service}")


if __name__ == "__main__":
    app()
