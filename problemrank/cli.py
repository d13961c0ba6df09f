"""CLI application using Typer."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from problemrank.config import get_config
from problemrank.database import ReportStore
from problemrank.models import ReportFilters
from problemrank.utils.logging_config import configure_logging

app = typer.Typer(
    name="problemrank",
    help="Rank recurring problem reports by frequency and recency",
    no_args_is_help=True,
)
console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def get_store() -> ReportStore:
    """Get report store instance."""
    config = get_config()
    store = ReportStore(config.db_path)
    store.connect()
    store.create_schema()
    return store


def build_filters(
    department: Optional[str],
    category: Optional[str],
    assignee: Optional[str],
    reporter: Optional[str],
    status: Optional[str],
    search: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> ReportFilters:
    """Build store filters from CLI options."""
    return ReportFilters(
        department=department,
        category=category,
        assignee=assignee,
        reporter=reporter,
        status=status,
        search=search,
        start_date=start_date.date() if start_date else None,
        end_date=end_date.date() if end_date else None,
    )


DepartmentOption = typer.Option(None, "--department", "-d", help="Department name contains")
CategoryOption = typer.Option(None, "--category", "-c", help="Category contains")
AssigneeOption = typer.Option(None, "--assignee", help="Assignee contains")
ReporterOption = typer.Option(None, "--reporter", help="Reporter contains")
StatusOption = typer.Option(None, "--status", help="Exact report status")
SearchOption = typer.Option(None, "--search", "-s", help="Free-text search")
StartDateOption = typer.Option(None, "--start-date", formats=DATE_FORMATS, help="Earliest report date")
EndDateOption = typer.Option(None, "--end-date", formats=DATE_FORMATS, help="Latest report date")


@app.command(name="import")
def import_reports(
    file: Path = typer.Argument(
        ...,
        help="CSV, JSON or XLSX file of problem reports",
        exists=True,
        dir_okay=False,
        file_okay=True,
    ),
):
    """Import problem reports into the report store."""
    from problemrank.ingest.loader import load_reports

    config = get_config()
    configure_logging(config)

    try:
        reports = load_reports(file)
    except ValueError as e:
        console.print(f"[red]Could not import {file}: {e}[/red]")
        raise typer.Exit(1)

    store = get_store()
    try:
        written = store.insert_reports(reports)
        console.print(f"[bold green]Imported {written} reports[/bold green] from {file.name}")
        console.print(f"Reports in store: {store.count_reports()}")
    finally:
        store.close()


@app.command()
def rank(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of problems to show"),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0.0,
        max=1.0,
        help="Clustering similarity threshold (0.0-1.0)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    department: Optional[str] = DepartmentOption,
    category: Optional[str] = CategoryOption,
    assignee: Optional[str] = AssigneeOption,
    reporter: Optional[str] = ReporterOption,
    status: Optional[str] = StatusOption,
    search: Optional[str] = SearchOption,
    start_date: Optional[datetime] = StartDateOption,
    end_date: Optional[datetime] = EndDateOption,
):
    """Rank recurring problems by Risk Priority Number."""
    from problemrank.ranking.service import RankingService

    config = get_config()
    configure_logging(config)

    if threshold is not None:
        config = config.model_copy(update={"clustering_threshold": threshold})

    filters = build_filters(department, category, assignee, reporter, status, search, start_date, end_date)

    store = get_store()
    try:
        service = RankingService(store, config)
        problems, stats = service.get_top_problems(limit, filters, show_progress=not json_output)

        if json_output:
            typer.echo(json.dumps(
                {
                    "problems": [p.model_dump(mode="json") for p in problems],
                    "stats": stats.model_dump(mode="json"),
                },
                indent=2,
            ))
            return

        if not problems:
            console.print("[yellow]No reports match the filters. Run 'import' first.[/yellow]")
            return

        table = Table(title=f"Top {len(problems)} Recurring Problems")
        table.add_column("Rank", style="cyan", justify="right")
        table.add_column("Problem", style="white")
        table.add_column("Frequency", style="green", justify="right")
        table.add_column("RPN", style="red", justify="right")
        table.add_column("Category", style="yellow")
        table.add_column("Sample IDs", style="dim")

        for problem in problems:
            table.add_row(
                str(problem.rank),
                problem.description,
                str(problem.frequency),
                f"{problem.rpn_score:.1f}",
                problem.category or "-",
                ", ".join(problem.sample_ids),
            )

        console.print(table)
        console.print(
            f"\n[dim]{stats.total_items} reports, {stats.cluster_count} clusters, "
            f"vocabulary {stats.vocabulary_size}, threshold {stats.threshold:.2f}[/dim]"
        )
        if stats.top_terms:
            console.print(f"[dim]Top terms: {', '.join(stats.top_terms)}[/dim]")

    finally:
        store.close()


@app.command()
def wordcloud(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of words to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    department: Optional[str] = DepartmentOption,
    category: Optional[str] = CategoryOption,
    assignee: Optional[str] = AssigneeOption,
    reporter: Optional[str] = ReporterOption,
    status: Optional[str] = StatusOption,
    search: Optional[str] = SearchOption,
    start_date: Optional[datetime] = StartDateOption,
    end_date: Optional[datetime] = EndDateOption,
):
    """Show the most frequent keywords across reports."""
    from problemrank.ranking.service import RankingService

    config = get_config()
    configure_logging(config)

    filters = build_filters(department, category, assignee, reporter, status, search, start_date, end_date)

    store = get_store()
    try:
        words = RankingService(store, config).get_word_cloud(limit, filters)

        if json_output:
            typer.echo(json.dumps([w.model_dump() for w in words], indent=2))
            return

        if not words:
            console.print("[yellow]No repeated keywords found.[/yellow]")
            return

        table = Table(title="Word Cloud")
        table.add_column("Word", style="white")
        table.add_column("Count", style="green", justify="right")
        for word in words:
            table.add_row(word.word, str(word.count))

        console.print(table)

    finally:
        store.close()


@app.command(name="debug-similarity")
def debug_similarity(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    department: Optional[str] = DepartmentOption,
    category: Optional[str] = CategoryOption,
    assignee: Optional[str] = AssigneeOption,
    reporter: Optional[str] = ReporterOption,
    status: Optional[str] = StatusOption,
    search: Optional[str] = SearchOption,
    start_date: Optional[datetime] = StartDateOption,
    end_date: Optional[datetime] = EndDateOption,
):
    """Show pairwise similarity scores for the first reports."""
    from problemrank.ranking.service import RankingService

    config = get_config()
    configure_logging(config)

    filters = build_filters(department, category, assignee, reporter, status, search, start_date, end_date)

    store = get_store()
    try:
        info = RankingService(store, config).get_debug_info(filters)

        if json_output:
            typer.echo(json.dumps(info.model_dump(mode="json"), indent=2))
            return

        table = Table(title="Pairwise Similarity")
        table.add_column("Report 1", style="white", width=30)
        table.add_column("Report 2", style="white", width=30)
        table.add_column("Trigram", justify="right")
        table.add_column("LCS", justify="right")
        table.add_column("TF-IDF", justify="right")
        table.add_column("Combined", style="green", justify="right")

        for pair in info.similarity_pairs:
            color = "green" if pair.combined_similarity >= info.stats.threshold else "dim"
            table.add_row(
                pair.item1,
                pair.item2,
                f"{pair.trigram_similarity:.3f}",
                f"{pair.lcs_similarity:.3f}",
                f"{pair.tfidf_similarity:.3f}",
                f"[{color}]{pair.combined_similarity:.3f}[/{color}]",
            )

        console.print(table)
        console.print(
            f"\n[dim]Weights: trigram {info.stats.weight_trigram:.2f}, "
            f"LCS {info.stats.weight_lcs:.2f}, TF-IDF {info.stats.weight_tfidf:.2f}[/dim]"
        )

    finally:
        store.close()


@app.command()
def status():
    """Show report store status and active ranking settings."""
    config = get_config()
    configure_logging(config)

    store = get_store()
    try:
        table = Table(title="Problem Ranking Status")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")

        table.add_row("Reports", str(store.count_reports()))
        table.add_row("Categories", str(len(store.list_categories())))
        table.add_row("Departments", str(len(store.list_departments())))
        table.add_row("", "")  # Separator
        table.add_row("Clustering threshold", f"{config.clustering_threshold:.2f}")
        weights = config.clustering_weights
        table.add_row(
            "Clustering weights",
            f"{weights.trigram:.2f} / {weights.lcs:.2f} / {weights.tfidf:.2f}",
        )
        weights = config.centroid_weights
        table.add_row(
            "Centroid weights",
            f"{weights.trigram:.2f} / {weights.lcs:.2f} / {weights.tfidf:.2f}",
        )
        table.add_row("Recency window (days)", f"{config.recency_window_days:g}")

        console.print(table)

        console.print(f"\n[bold]Data Directory:[/bold] {config.data_dir}")
        console.print(f"[bold]Database:[/bold] {config.db_path}")

    finally:
        store.close()


if __name__ == "__main__":
    app()
