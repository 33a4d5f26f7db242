"""Word counting primitives for Naive Bayes training.

``WordCounter`` holds word occurrence counts for a single document or for a
whole category once documents have been merged into it. ``Vocabulary`` holds
the global counts over the entire corpus and provides the corpus-wide
smoothed probability used when a category has no data for a word.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Optional


# ---------------------------------------------------------------------------
# Word Counter
# ---------------------------------------------------------------------------

class WordCounter:
    """Mutable mapping from word to occurrence count.

    Tracks the total number of occurrences held and the number of documents
    absorbed through :meth:`update_counts`. A counter built directly from a
    document's words has ``num_docs == 0``; merging it into an aggregate
    counts as one document.

    Example::

        doc = WordCounter.from_words(["brown", "fox", "brown"])
        cat = WordCounter()
        cat.update_counts(doc)
        cat.count("brown")   # 2
        cat.num_docs         # 1
    """

    __slots__ = ("_counts", "_total", "_num_docs")

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._total = 0
        self._num_docs = 0

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "WordCounter":
        """Build a single-document counter from a token sequence."""
        counter = cls()
        for word in words:
            counter.add(word)
        return counter

    @classmethod
    def from_counts(cls, counts: Mapping[str, int]) -> "WordCounter":
        """Build a single-document counter from a word-to-count mapping."""
        counter = cls()
        for word, count in counts.items():
            counter.add(word, count)
        return counter

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, word: str, count: int = 1) -> None:
        """Add ``count`` occurrences of ``word``.

        Raises:
            ValueError: If ``count`` is negative.
        """
        if count < 0:
            raise ValueError(f"Negative count {count} for word {word!r}")
        if count == 0:
            return
        self._counts[word] = self._counts.get(word, 0) + count
        self._total += count

    def update_counts(self, other: "WordCounter") -> None:
        """Merge ``other`` into this counter in place.

        Word counts are summed. The document count grows by ``other.num_docs``,
        or by one when ``other`` is a single-document counter.
        """
        for word, count in other._counts.items():
            self._counts[word] = self._counts.get(word, 0) + count
        self._total += other._total
        self._num_docs += other._num_docs or 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count(self, word: str) -> int:
        """Occurrence count of ``word``, 0 if never observed."""
        return self._counts.get(word, 0)

    @property
    def total(self) -> int:
        """Sum of all word occurrences held by this counter."""
        return self._total

    @property
    def num_docs(self) -> int:
        """Number of documents merged into this counter."""
        return self._num_docs

    def laplace_prob(
        self,
        word: str,
        vocabulary_size: Optional[int] = None,
    ) -> Optional[float]:
        """Add-one smoothed probability of ``word`` within this counter.

        Computes ``(count + 1) / (total + V + 1)`` where ``V`` is
        ``vocabulary_size`` if given, else the number of distinct words in
        this counter.

        Args:
            word: The word to look up.
            vocabulary_size: Size of the vocabulary to smooth against.

        Returns:
            The smoothed probability, or ``None`` when this counter holds no
            observation of ``word`` and the caller should use a corpus-wide
            estimate instead.
        """
        count = self._counts.get(word)
        if not count:
            return None
        size = len(self._counts) if vocabulary_size is None else vocabulary_size
        return (count + 1) / (self._total + size + 1)

    def items(self) -> Iterator[tuple[str, int]]:
        """Iterate ``(word, count)`` pairs in sorted word order."""
        for word in sorted(self._counts):
            yield word, self._counts[word]

    def copy(self) -> "WordCounter":
        clone = WordCounter()
        clone._counts = dict(self._counts)
        clone._total = self._total
        clone._num_docs = self._num_docs
        return clone

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, word: object) -> bool:
        return word in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._counts))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordCounter):
            return NotImplemented
        return self._counts == other._counts and self._num_docs == other._num_docs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"WordCounter(words={len(self._counts)}, total={self._total}, "
            f"num_docs={self._num_docs})"
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "counts": dict(self.items()),
            "num_docs": self._num_docs,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WordCounter":
        counter = cls.from_counts(data["counts"])
        counter._num_docs = data.get("num_docs", 0)
        return counter


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

class Vocabulary:
    """All distinct words of a training corpus with their global counts.

    Built once from the document counters, then only read. The smoothed
    probability from :meth:`laplace_prob` is the fallback for a category
    that has no observation of a word.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._total = 0

    @classmethod
    def from_counters(cls, counters: Iterable[WordCounter]) -> "Vocabulary":
        """Build a vocabulary by absorbing every document counter."""
        vocabulary = cls()
        for counter in counters:
            vocabulary.update(counter)
        return vocabulary

    def update(self, counter: WordCounter) -> None:
        """Add each word count of ``counter`` to the global counts."""
        for word, count in counter.items():
            self._counts[word] = self._counts.get(word, 0) + count
            self._total += count

    def word_list(self) -> list[str]:
        """Distinct words in sorted order."""
        return sorted(self._counts)

    def word_count(self, word: str) -> int:
        """Global occurrence count of ``word``."""
        return self._counts.get(word, 0)

    @property
    def total(self) -> int:
        """Total word occurrences across the corpus."""
        return self._total

    def laplace_prob(self, word: str) -> float:
        """Corpus-wide add-one smoothed probability of ``word``."""
        return (self.word_count(word) + 1) / (self._total + len(self._counts) + 1)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, word: object) -> bool:
        return word in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return self._counts == other._counts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self._counts)}, total={self._total})"

    def to_dict(self) -> dict:
        return {"counts": {word: self._counts[word] for word in self.word_list()}}

    @classmethod
    def from_dict(cls, data: dict) -> "Vocabulary":
        vocabulary = cls()
        for word, count in data["counts"].items():
            vocabulary._counts[word] = count
            vocabulary._total += count
        return vocabulary
