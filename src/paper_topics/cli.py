"""CLI entry point using Typer."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from paper_topics.config import get_project_root, load_config
from paper_topics.topics.categories import CATEGORY_PRIORITY, TopicCategory, UnknownCategoryError
from paper_topics.topics.overlay import DEFAULT_USER_WEIGHT, OverlayStore

app = typer.Typer(
    name="paper-topics",
    help="Classify new arXiv papers into topic buckets and render a digest.",
    no_args_is_help=True,
)
keywords_app = typer.Typer(help="Manage your keyword customisations.", no_args_is_help=True)
app.add_typer(keywords_app, name="keywords")


def _setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _output_dir(cfg: dict, output: Optional[Path] = None) -> Path:
    if output:
        return output
    return get_project_root() / cfg.get("output_dir", "digests")


def _overlay_store(cfg: dict) -> OverlayStore:
    return OverlayStore(cfg["overlay"]["path"])


def _parse_category(value: str) -> TopicCategory:
    try:
        return TopicCategory.parse(value)
    except UnknownCategoryError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command()
def gather(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to config file.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    output: Optional[Path] = typer.Option(
        None, "--output",
        help="Output directory for gathered data JSON and the digest.",
    ),
):
    """Fetch new arXiv papers, classify them and write today's digest."""
    _setup_logging(verbose)

    cfg = load_config(config_path)
    overlay = _overlay_store(cfg).load()

    from paper_topics.gatherers.arxiv import ArxivGatherer
    from paper_topics.report.generator import generate_report, save_gathered_data

    gatherer = ArxivGatherer(config=cfg.get("arxiv", {}), overlay=overlay)
    typer.echo(f"Gathering: {gatherer.name}...")
    results = {gatherer.name: gatherer.safe_gather()}
    status = results[gatherer.name].get("status", "unknown")
    if status == "ok":
        typer.echo(f"  {gatherer.name}: OK ({results[gatherer.name].get('total_new', 0)} papers)")
    else:
        detail = results[gatherer.name].get("error") or results[gatherer.name].get("reason", "")
        typer.echo(f"  {gatherer.name}: {status}: {detail}")

    output_dir = _output_dir(cfg, output)
    save_gathered_data(results, output_dir)
    generate_report(results, output_dir=output_dir)
    typer.echo(f"\nData and digest saved to {output_dir}/")


@app.command()
def show(
    date: Optional[str] = typer.Option(
        None, "--date", "-d",
        help="Date to show the digest for (YYYY-MM-DD). Defaults to today.",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to config file.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Render and display the digest from previously gathered data."""
    _setup_logging(verbose)

    cfg = load_config(config_path)
    report_date = datetime.strptime(date, "%Y-%m-%d") if date else datetime.now()
    date_str = report_date.strftime("%Y-%m-%d")
    output_dir = _output_dir(cfg)

    json_path = output_dir / f"{date_str}.json"
    if not json_path.exists():
        typer.echo(
            f"No gathered data found for {date_str}. Run 'paper-topics gather' first.",
            err=True,
        )
        raise typer.Exit(1)

    with open(json_path) as f:
        data = json.load(f)

    from paper_topics.report.generator import generate_report

    typer.echo(generate_report(data, output_dir=output_dir, date=report_date))


@app.command()
def classify(
    papers_path: Path = typer.Argument(..., help="JSON file with a list of papers."),
    top: int = typer.Option(3, "--top", "-n", help="Topics to show per paper."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to config file.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Score papers from a JSON file against every topic."""
    _setup_logging(verbose)

    from paper_topics.models import Paper
    from paper_topics.topics.classifier import CategoryFilter

    cfg = load_config(config_path)
    if not papers_path.exists():
        typer.echo(f"Papers file not found: {papers_path}", err=True)
        raise typer.Exit(1)

    with open(papers_path) as f:
        raw = json.load(f)
    # Accept a bare list or a {"papers": [...]} wrapper
    items = raw.get("papers", []) if isinstance(raw, dict) else raw
    papers = [Paper.from_dict(item) for item in items]

    topic_filter = CategoryFilter(_overlay_store(cfg).load())
    matches_by_id = topic_filter.categorize_papers(papers)

    for paper in papers:
        matches = matches_by_id[paper.id]
        typer.echo(f"{paper.id}  {paper.title}")
        if not matches:
            typer.echo(f"    {TopicCategory.OTHER.label}")
        for m in matches[:top]:
            typer.echo(f"    {m.category.label:<30} {m.score:5.1f}  {', '.join(m.matched_keywords)}")

    typer.echo("\nPrimary topics:")
    distribution = topic_filter.get_category_distribution(papers)
    for category in CATEGORY_PRIORITY:
        if distribution[category]:
            typer.echo(f"  {category.label:<30} {distribution[category]}")


@keywords_app.command("list")
def keywords_list(
    category: str = typer.Argument(..., help="Topic category slug, e.g. agentic-coding."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Show the effective keywords for a category."""
    cat = _parse_category(category)
    overlay = _overlay_store(load_config(config_path)).load()

    for entry in overlay.get_effective_keywords(cat):
        marker = "+" if overlay.is_user_added(cat, entry.term) else " "
        exact = " (exact)" if entry.exact else ""
        typer.echo(f"{marker} {entry.term:<40} {entry.weight:>2}{exact}")
    for term in overlay.removed[cat]:
        typer.echo(f"- {term}")

    stats = overlay.get_category_stats(cat)
    typer.echo(
        f"\n{cat.label}: {stats.total} active "
        f"({stats.defaults} default, {stats.added} added, {stats.removed} disabled)"
    )


@keywords_app.command("add")
def keywords_add(
    category: str = typer.Argument(...),
    term: str = typer.Argument(...),
    weight: int = typer.Option(DEFAULT_USER_WEIGHT, "--weight", "-w", min=1, max=10, clamp=True),
    exact: bool = typer.Option(False, "--exact", help="Match whole words only."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Add a keyword, or re-enable a disabled default."""
    cat = _parse_category(category)
    store = _overlay_store(load_config(config_path))
    overlay = store.load()
    overlay.add_keyword(cat, term, weight, exact=exact)
    store.save(overlay)
    typer.echo(f"{cat.label}: {overlay.get_category_stats(cat).total} active keywords")


@keywords_app.command("remove")
def keywords_remove(
    category: str = typer.Argument(...),
    term: str = typer.Argument(...),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Delete an added keyword, or disable a default one."""
    cat = _parse_category(category)
    store = _overlay_store(load_config(config_path))
    overlay = store.load()
    overlay.remove_keyword(cat, term)
    store.save(overlay)
    typer.echo(f"{cat.label}: {overlay.get_category_stats(cat).total} active keywords")


@keywords_app.command("weight")
def keywords_weight(
    category: str = typer.Argument(...),
    term: str = typer.Argument(...),
    weight: int = typer.Argument(..., help="New weight (1-10)."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Change the weight of a keyword you added."""
    cat = _parse_category(category)
    store = _overlay_store(load_config(config_path))
    overlay = store.load()
    if not overlay.is_user_added(cat, term):
        typer.echo(f"'{term}' is not a keyword you added to {cat.value}.", err=True)
        raise typer.Exit(1)
    overlay.update_keyword_weight(cat, term, weight)
    store.save(overlay)


@keywords_app.command("reset")
def keywords_reset(
    category: Optional[str] = typer.Argument(None, help="Category to reset. Omit to reset all."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Return one category (or all) to the default keywords."""
    store = _overlay_store(load_config(config_path))
    overlay = store.load()
    if category:
        cat = _parse_category(category)
        overlay.reset_category(cat)
        typer.echo(f"{cat.label} reset to defaults.")
    else:
        overlay.reset_all()
        typer.echo("All categories reset to defaults.")
    store.save(overlay)
