"""Shared test fixtures for nb-trainer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from nb_trainer.corpus import count_words
from nb_trainer.counters import Vocabulary, WordCounter
from nb_trainer.models import TrainingCase

# (id, text, category) rows of a small bill-abstract corpus
BILL_ROWS = [
    ("20151HB0001", "The quick brown fox jumps over the lazy dog", "1200"),
    ("20151HB0002", "Now is the time for all good men to come to the aid of the party", "1000"),
    ("20151HB0003", "The slow brown fox cannot jump over the fast dog.", "1200"),
    ("20151HB0004", "It's party time!", "1000"),
]


@pytest.fixture
def bill_cases() -> list[TrainingCase]:
    """Four tokenized cases, two per category."""
    return [
        TrainingCase(id=doc_id, category=code, word_counts=count_words(text))
        for doc_id, text, code in BILL_ROWS
    ]


@pytest.fixture
def bill_vocabulary(bill_cases: list[TrainingCase]) -> Vocabulary:
    return Vocabulary.from_counters(case.word_counts for case in bill_cases)


@pytest.fixture
def bill_table(tmp_path: Path) -> Path:
    """The bill corpus as a tab-separated file with ID/Abstract/Code columns."""
    path = tmp_path / "TestDb.txt"
    lines = ["ID\tAbstract\tCode"]
    lines.extend(f"{doc_id}\t{text}\t{code}" for doc_id, text, code in BILL_ROWS)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def counted_cases() -> list[TrainingCase]:
    """Cases with hand-picked counts.

    Category ``a`` holds 10 occurrences over 3 distinct words, category ``b``
    holds 6 over 2. The vocabulary has 4 words and 16 occurrences.
    """
    return [
        TrainingCase("d1", "a", WordCounter.from_counts({"apple": 3, "pear": 2})),
        TrainingCase("d2", "a", WordCounter.from_counts({"apple": 1, "plum": 4})),
        TrainingCase("d3", "b", WordCounter.from_counts({"kiwi": 5, "pear": 1})),
    ]
