"""CLI entry point — Typer app for edurag commands.

Usage:
    edurag ingest notes.md --title "Data Structures" --category "Lecture Notes"
    edurag search "How does a hash table resolve collisions?"
    edurag validate generated.md --topic "Hash tables" --type Lab
    edurag ground generated.md --topic "Hash tables"
    edurag status
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from edurag import __version__

app = typer.Typer(
    name="edurag",
    help="Course-material RAG — ingest, search, validate, ground.",
    no_args_is_help=True,
)

console = Console()

DEFAULT_INDEX_DIR = Path(".edurag")

_FILE_ARG = typer.Argument(..., exists=True, dir_okay=False, help="Path to a text/markdown file")
_INDEX_DIR = typer.Option(DEFAULT_INDEX_DIR, "--index-dir", "-i", help="Where the index and catalogue live")


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    from edurag.config import load_settings

    configure_logging(log_level or load_settings().log_level)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _catalog_path(index_dir: Path) -> Path:
    return index_dir / "sources.yaml"


def _load_catalog(index_dir: Path):
    from edurag.sources.memory_store import InMemorySourceStore

    path = _catalog_path(index_dir)
    return InMemorySourceStore.from_yaml(path) if path.exists() else InMemorySourceStore()


def _load_index(index_dir: Path, dimension: int):
    from edurag.vectorstore.factory import get_vector_index

    index = get_vector_index("faiss", dimension=dimension)
    if (index_dir / "index.faiss").exists():
        index.load(str(index_dir))
    return index


def _print_report_json(data: dict) -> None:
    console.print_json(json.dumps(data, default=str))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def ingest(
    path: Annotated[Path, _FILE_ARG],
    source_id: str | None = typer.Option(None, "--source-id", help="Defaults to the file stem"),
    title: str | None = typer.Option(None, "--title", "-t", help="Source title used in citations"),
    category: str = typer.Option("", "--category", "-c", help="Source category, e.g. Lecture Notes"),
    index_dir: Path = _INDEX_DIR,
) -> None:
    """Chunk, embed and index a source document."""
    from edurag.config import load_settings
    from edurag.embeddings.client import EmbeddingClient
    from edurag.pipeline.ingest import IngestPipeline
    from edurag.sources.base import Source

    settings = load_settings()
    client = EmbeddingClient.from_settings(settings.embedding)
    index = _load_index(index_dir, client.primary.dimension)
    catalog = _load_catalog(index_dir)

    sid = source_id or path.stem
    text = path.read_text(encoding="utf-8")

    pipeline = IngestPipeline.from_settings(settings, client, index)
    result = pipeline.ingest_text(sid, text)

    if result.chunks_stored:
        catalog.add(Source(id=sid, title=title or path.stem, category=category, content=text))
        index.save(str(index_dir))
        catalog.to_yaml(_catalog_path(index_dir))

    console.print(f"\n[bold green]Ingested:[/] {path.name} as {sid}")
    console.print(f"  Chunks: {result.chunks_created}")
    console.print(f"  Embedded: {result.chunks_embedded}")
    console.print(f"  Stored: {result.chunks_stored}")
    if result.job_handle:
        job = pipeline.job_store.get(result.job_handle)
        console.print(f"  Job: {result.job_handle} ({job.status if job else 'expired'})")
    for err in result.errors:
        console.print(f"  [yellow]Warning:[/] {err}")

    if not result.chunks_stored:
        raise typer.Exit(code=1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    threshold: float | None = typer.Option(None, "--threshold", help="Minimum similarity (0-1)"),
    top_k: int | None = typer.Option(None, "--top-k", "-k", help="Maximum matches"),
    index_dir: Path = _INDEX_DIR,
) -> None:
    """Semantic search over ingested sources."""
    from edurag.config import load_settings
    from edurag.embeddings.client import EmbeddingClient
    from edurag.retrieval.retriever import Retriever

    settings = load_settings()
    client = EmbeddingClient.from_settings(settings.embedding)
    retriever = Retriever(client, _load_index(index_dir, client.primary.dimension), _load_catalog(index_dir))

    result = retriever.retrieve(
        query,
        threshold=settings.retrieval.threshold if threshold is None else threshold,
        k=top_k or settings.retrieval.top_k,
    )

    if not result.matches:
        console.print(f"[yellow]{result.message}[/]")
        return

    table = Table(title=f"Matches for: {query}")
    table.add_column("#", style="cyan")
    table.add_column("Source")
    table.add_column("Similarity", justify="right")
    table.add_column("Text")
    for i, match in enumerate(result.matches, 1):
        table.add_row(
            str(i),
            f"{match.source_title} ({match.source_category})" if match.source_category else match.source_title,
            f"{match.similarity_percent}%",
            match.chunk_text[:80].replace("\n", " "),
        )
    console.print(table)


@app.command()
def validate(
    path: Annotated[Path, _FILE_ARG],
    topic: str = typer.Option(..., "--topic", help="Topic the material was generated for"),
    material_type: str = typer.Option("Theory", "--type", help="Material type (Theory, Lab)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
    index_dir: Path = _INDEX_DIR,
) -> None:
    """Validate generated material: code syntax, citations, rubric quality."""
    from edurag.config import load_settings
    from edurag.validation.validator import ContentValidator

    validator = ContentValidator.from_settings(load_settings())
    report = validator.validate(
        path.read_text(encoding="utf-8"),
        topic=topic,
        material_type=material_type,
        sources=_load_catalog(index_dir).list_sources(),
    )

    if as_json:
        _print_report_json(report.to_dict())
        return

    table = Table(title=f"Validation: {topic}")
    table.add_column("Stage", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Details")
    table.add_row("Syntax", str(report.overall.breakdown["syntax"]), report.syntax.message)
    table.add_row("Grounding", str(report.overall.breakdown["grounding"]), report.grounding.message)
    table.add_row(
        "Quality",
        str(report.overall.breakdown["quality"]),
        "evaluated" if report.quality.success else f"failed: {report.quality.error}",
    )
    console.print(table)

    verdict = "[bold green]PASS[/]" if report.overall.passes else "[bold red]FAIL[/]"
    console.print(f"\nOverall: {report.overall.score} ({report.overall.status}) {verdict}")
    for issue in report.quality.critical_issues:
        console.print(f"  [red]Critical:[/] {issue}")


@app.command()
def ground(
    path: Annotated[Path, _FILE_ARG],
    topic: str = typer.Option("", "--topic", help="Topic the material was generated for"),
    context_file: Path | None = typer.Option(None, "--context", help="Retrieval context used during generation"),
    as_json: bool = typer.Option(False, "--json", help="Print the full analysis as JSON"),
    index_dir: Path = _INDEX_DIR,
) -> None:
    """Check each factual claim of generated material against the sources."""
    from edurag.config import load_settings
    from edurag.grounding.analyzer import SemanticGroundingVerifier

    verifier = SemanticGroundingVerifier.from_settings(load_settings())
    analysis = verifier.analyze(
        path.read_text(encoding="utf-8"),
        topic=topic,
        sources=_load_catalog(index_dir).list_sources(),
        context=context_file.read_text(encoding="utf-8") if context_file else "",
    )

    if as_json:
        _print_report_json(analysis.to_dict())
        return

    if not analysis.success:
        console.print(f"[bold red]Grounding analysis failed:[/] {analysis.error}")
        raise typer.Exit(code=1)

    table = Table(title=f"Claims: {topic or path.name}")
    table.add_column("#", style="cyan")
    table.add_column("Claim")
    table.add_column("Status")
    table.add_column("Confidence", justify="right")
    for comparison in analysis.comparisons:
        table.add_row(
            str(comparison.claim.id),
            comparison.claim.text[:70],
            comparison.verification.status.value,
            str(comparison.verification.confidence),
        )
    console.print(table)

    summary = analysis.summary
    console.print(f"\nGrounding: {summary.overall_grounding_score}% ({summary.grounding_level})")
    console.print(summary.message)
    for rec in analysis.recommendations:
        console.print(f"  [{rec.priority}] {rec.action}: {rec.details}")


@app.command()
def status() -> None:
    """Show installed providers, backends and syntax checkers."""
    from edurag.embeddings.factory import available_providers as emb_providers
    from edurag.llm.factory import available_providers as llm_providers
    from edurag.validation.syntax import default_checkers
    from edurag.vectorstore.factory import available_indexes

    console.print(f"\n[bold green]edurag[/] v{__version__}\n")

    table = Table(title="Available Components")
    table.add_column("Layer", style="cyan")
    table.add_column("Available")

    checkers = {c.language: c for c in default_checkers().values()}
    installed = sorted(lang for lang, c in checkers.items() if c.is_available())

    table.add_row("Embedding Providers", ", ".join(emb_providers()))
    table.add_row("Vector Indexes", ", ".join(available_indexes()))
    table.add_row("LLM Providers", ", ".join(llm_providers()))
    table.add_row("Syntax Checkers", ", ".join(installed) or "none")

    console.print(table)


if __name__ == "__main__":
    app()
