"""Command-line interface for the Naive Bayes trainer.

Provides ``train`` and ``inspect`` commands with rich terminal output using
the ``click`` and ``rich`` libraries.

Usage::

    nb-trainer train --datasource bills.tsv --id_column ID \\
        --text_column Abstract --code_column Code --model Model_Dir
    nb-trainer train --datasource corpus_dir/ --output_vocab vocab.txt
    nb-trainer inspect Model_Dir --top 5
"""

from __future__ import annotations

import json
import logging
import sys
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import Settings
from .corpus import load_corpus
from .models import NaiveBayesModel
from .persistence import read_model, write_model
from .smoothing import SMOOTHING_NAMES
from .trainer import NaiveBayesTrainer

console = Console()
logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _configure_logging(level_name: str) -> None:
    """Send the package's log records to stderr through rich."""
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    package_logger = logging.getLogger("nb_trainer")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        package_logger.addHandler(handler)


@click.group()
@click.version_option(package_name="nb-trainer")
@click.option("--log-level", type=click.Choice(_LOG_LEVELS, case_sensitive=False),
              default=None, help="Logging verbosity (default from NB_TRAINER_LOG_LEVEL).")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Naive Bayes trainer: build word and category probabilities from
    labeled documents.
    """
    settings = Settings.from_env()
    _configure_logging(log_level or settings.log_level)
    ctx.obj = settings


@main.command()
@click.option("--datasource", "-d", required=True,
              type=click.Path(exists=True, path_type=Path),
              help="Table file (.csv, .tsv, .txt, .jsonl) or directory of category folders.")
@click.option("--id_column", default="id", show_default=True,
              help="Column holding the document id.")
@click.option("--text_column", default="text", show_default=True,
              help="Column holding the document text.")
@click.option("--code_column", default="category", show_default=True,
              help="Column holding the category label.")
@click.option("--model", "model_dir", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Directory where model files are written.")
@click.option("--output_vocab", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="File where the vocabulary is written.")
@click.option("--smoothing", type=click.Choice(SMOOTHING_NAMES), default=None,
              help="Conditional probability estimator (default: laplace).")
@click.pass_obj
def train(
    settings: Settings,
    datasource: Path,
    id_column: str,
    text_column: str,
    code_column: str,
    model_dir: Path | None,
    output_vocab: Path | None,
    smoothing: str | None,
) -> None:
    """Train a model from labeled documents.

    Example: nb-trainer train --datasource bills.tsv --model Model_Dir
    """
    model_dir = model_dir or settings.model_dir

    with console.status("[bold blue]Training model...", spinner="dots"):
        try:
            corpus = load_corpus(
                datasource,
                id_column=id_column,
                text_column=text_column,
                code_column=code_column,
            )
            trainer = NaiveBayesTrainer(smoothing=smoothing or settings.smoothing)
            model = trainer.train(corpus.cases, corpus.vocabulary)
            write_model(model, model_dir, vocabulary_path=output_vocab)
        except Exception as e:
            logger.debug("Training failed", exc_info=True)
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
            sys.exit(1)

    doc_counts = Counter(case.category for case in corpus.cases)
    _render_training_summary(model, doc_counts, model_dir)


@main.command("inspect")
@click.argument("model_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--top", "-n", type=click.IntRange(min=1), default=10, show_default=True,
              help="Number of words to show per category.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def inspect_model(model_dir: Path, top: int, output: str) -> None:
    """Show priors and the most probable words of a trained model.

    Example: nb-trainer inspect Model_Dir --top 5
    """
    try:
        model = read_model(model_dir)
    except Exception as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if output == "json":
        data = model.to_dict()
        data["top_words"] = {
            cat: [[word, round(p, 6)] for word, p in model.top_words(cat, top)]
            for cat in model.categories
        }
        click.echo(json.dumps(data, indent=2))
    else:
        _render_model(model, model_dir, top)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_training_summary(
    model: NaiveBayesModel,
    doc_counts: Counter,
    model_dir: Path,
) -> None:
    table = Table(title="Training Sets")
    table.add_column("Category", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Prior", justify="right")

    for cat in model.categories:
        table.add_row(escape(cat) or "(empty)", str(doc_counts[cat]), f"{model.priors[cat]:.4f}")

    console.print()
    console.print(table)
    console.print(
        f"Vocabulary: {len(model.vocabulary)} words | "
        f"Smoothing: {model.smoothing}"
    )
    console.print(f"[green]Model written to[/] {escape(str(model_dir))}")


def _render_model(model: NaiveBayesModel, model_dir: Path, top: int) -> None:
    console.print()
    console.print(Panel(
        f"[bold]{escape(str(model_dir))}[/]\n"
        f"Categories: {len(model.categories)} | "
        f"Vocabulary: {len(model.vocabulary)} | "
        f"Smoothing: {model.smoothing}",
        title="Naive Bayes Model",
        border_style="blue",
    ))

    for cat in model.categories:
        table = Table(title=f"{escape(cat)} (prior {model.priors[cat]:.4f})", show_lines=False)
        table.add_column("#", justify="right", width=4)
        table.add_column("Word", style="cyan")
        table.add_column("P(word|cat)", justify="right")
        for i, (word, prob) in enumerate(model.top_words(cat, top), 1):
            table.add_row(str(i), escape(word), f"{prob:.6f}")
        console.print(table)
    console.print()


if __name__ == "__main__":
    main()
