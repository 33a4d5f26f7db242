"""Loading labeled training corpora.

Two source layouts are supported:

- A table file with one document per row: ``.csv`` (comma separated),
  ``.tsv`` or ``.txt`` (tab separated), or ``.jsonl`` (one JSON object per
  line). Column names for the id, text and category are configurable.
- A directory where each immediate subdirectory names a category and every
  document file below it belongs to that category. Plain text, Markdown,
  HTML, PDF and DOCX files are read; PDF and DOCX need ``pdfplumber`` and
  ``python-docx``.

Every document is tokenized into a :class:`~nb_trainer.counters.WordCounter`
and the corpus vocabulary is built from exactly the loaded documents.
"""

from __future__ import annotations

import csv
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .counters import Vocabulary, WordCounter
from .models import TrainingCase

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\b[a-zA-Z][a-zA-Z'-]*[a-zA-Z]\b|\b[a-zA-Z]\b")

_DELIMITERS = {".csv": ",", ".tsv": "\t", ".txt": "\t"}

TABLE_EXTENSIONS: tuple[str, ...] = (".csv", ".tsv", ".txt", ".jsonl")
DOCUMENT_EXTENSIONS: tuple[str, ...] = (
    ".txt", ".text", ".md", ".html", ".htm", ".pdf", ".docx",
)


def tokenize(text: str) -> list[str]:
    """Extract lowercase word tokens from text."""
    return [m.group().lower() for m in _WORD_RE.finditer(text)]


def count_words(text: str) -> WordCounter:
    """Tokenize ``text`` into a single-document word counter."""
    return WordCounter.from_words(tokenize(text))


@dataclass
class Corpus:
    """Loaded training cases and the vocabulary built from them."""

    cases: list[TrainingCase] = field(default_factory=list)
    vocabulary: Vocabulary = field(default_factory=Vocabulary)

    @classmethod
    def from_cases(cls, cases: list[TrainingCase]) -> "Corpus":
        vocabulary = Vocabulary.from_counters(case.word_counts for case in cases)
        return cls(cases=cases, vocabulary=vocabulary)

    @property
    def categories(self) -> list[str]:
        return sorted({case.category for case in self.cases})

    def __len__(self) -> int:
        return len(self.cases)


# ---------------------------------------------------------------------------
# Table sources
# ---------------------------------------------------------------------------

def load_table(
    path: str | Path,
    id_column: str = "id",
    text_column: str = "text",
    code_column: str = "category",
) -> list[TrainingCase]:
    """Load training cases from a delimited or JSON Lines file.

    Args:
        path: Path to the table file.
        id_column: Column holding the document identifier.
        text_column: Column holding the document text.
        code_column: Column holding the category label.

    Returns:
        One TrainingCase per row, in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is unsupported, a row lacks a required
            column, or a JSON line is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in TABLE_EXTENSIONS:
        raise ValueError(
            f"Unsupported table format '{path.suffix}'. "
            f"Supported: {', '.join(TABLE_EXTENSIONS)}"
        )

    rows = _read_jsonl(path) if suffix == ".jsonl" else _read_delimited(path, _DELIMITERS[suffix])

    cases = []
    for line_no, row in rows:
        values = []
        for column in (id_column, text_column, code_column):
            if row.get(column) is None:
                raise ValueError(f"{path.name}:{line_no}: missing column '{column}'")
            values.append(row[column])
        doc_id, text, code = values
        cases.append(
            TrainingCase(
                id=str(doc_id),
                category=str(code),
                word_counts=count_words(str(text)),
            )
        )

    logger.info("Loaded %d cases from %s", len(cases), path)
    return cases


def _read_delimited(path: Path, delimiter: str) -> Iterator[tuple[int, dict]]:
    # tab-separated exports do not quote fields, so a leading " is literal text
    quoting = csv.QUOTE_NONE if delimiter == "\t" else csv.QUOTE_MINIMAL
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter, quoting=quoting)
        for row in reader:
            yield reader.line_num, row


def _read_jsonl(path: Path) -> Iterator[tuple[int, dict]]:
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path.name}:{line_no}: invalid JSON ({exc.msg})") from exc
            if not isinstance(record, dict):
                raise ValueError(f"{path.name}:{line_no}: expected a JSON object")
            yield line_no, record


# ---------------------------------------------------------------------------
# Directory sources
# ---------------------------------------------------------------------------

def load_directory(root: str | Path) -> list[TrainingCase]:
    """Load training cases from a directory of per-category folders.

    Args:
        root: Directory whose subdirectories are category labels.

    Returns:
        One TrainingCase per readable document, ordered by category and path.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")

    cases = []
    for category_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        for path in sorted(p for p in category_dir.rglob("*") if p.is_file()):
            if path.suffix.lower() not in DOCUMENT_EXTENSIONS:
                logger.debug("Skipping unsupported file %s", path)
                continue
            cases.append(
                TrainingCase(
                    id=path.relative_to(root).as_posix(),
                    category=category_dir.name,
                    word_counts=count_words(read_document(path)),
                )
            )

    logger.info("Loaded %d cases from directory %s", len(cases), root)
    return cases


def read_document(path: Path) -> str:
    """Extract plain text from a document file based on its extension.

    Raises:
        ValueError: If the extension is unsupported.
        ImportError: If the library for PDF or DOCX files is not installed.
    """
    suffix = path.suffix.lower()
    if suffix in (".txt", ".text", ".md"):
        return path.read_text(encoding="utf-8", errors="replace")
    if suffix in (".html", ".htm"):
        return _strip_html(path.read_text(encoding="utf-8", errors="replace"))
    if suffix == ".pdf":
        return _read_pdf(path)
    if suffix == ".docx":
        return _read_docx(path)
    raise ValueError(f"No reader available for '{path.suffix}'")


def _read_pdf(path: Path) -> str:
    try:
        import pdfplumber
    except ImportError as exc:
        raise ImportError(
            "pdfplumber is required for PDF documents. Install it with: pip install pdfplumber"
        ) from exc

    with pdfplumber.open(str(path)) as pdf:
        return "\n\n".join(page.extract_text() or "" for page in pdf.pages)


def _read_docx(path: Path) -> str:
    try:
        from docx import Document
    except ImportError as exc:
        raise ImportError(
            "python-docx is required for DOCX documents. Install it with: pip install python-docx"
        ) from exc

    doc = Document(str(path))
    return "\n\n".join(p.text for p in doc.paragraphs if p.text.strip())


def _strip_html(html: str) -> str:
    """Remove tags, scripts and styles, and decode entities."""
    from html.parser import HTMLParser

    class _TextExtractor(HTMLParser):
        def __init__(self) -> None:
            super().__init__(convert_charrefs=True)
            self.parts: list[str] = []
            self._skip = False

        def handle_starttag(self, tag: str, attrs: list) -> None:
            if tag in ("script", "style", "head"):
                self._skip = True

        def handle_endtag(self, tag: str) -> None:
            if tag in ("script", "style", "head"):
                self._skip = False
            self.parts.append(" ")

        def handle_data(self, data: str) -> None:
            if not self._skip:
                self.parts.append(data)

    extractor = _TextExtractor()
    extractor.feed(html)
    extractor.close()
    return "".join(extractor.parts)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def load_corpus(
    source: str | Path,
    id_column: str = "id",
    text_column: str = "text",
    code_column: str = "category",
) -> Corpus:
    """Load a corpus from a directory or a table file.

    Column arguments only apply to table files.
    """
    source = Path(source)
    if source.is_dir():
        cases = load_directory(source)
    else:
        cases = load_table(
            source,
            id_column=id_column,
            text_column=text_column,
            code_column=code_column,
        )
    corpus = Corpus.from_cases(cases)
    logger.info(
        "Corpus has %d documents, %d categories, %d distinct words",
        len(corpus),
        len(corpus.categories),
        len(corpus.vocabulary),
    )
    return corpus
