"""Data models for Naive Bayes training."""

from __future__ import annotations

from dataclasses import dataclass, field

from .counters import Vocabulary, WordCounter


@dataclass(frozen=True)
class TrainingCase:
    """A single labeled training document."""

    id: str
    category: str
    word_counts: WordCounter

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            raise TypeError(f"Case id must be a string, got {type(self.id).__name__}")
        if not isinstance(self.category, str):
            raise TypeError(
                f"Category of case {self.id!r} must be a string, "
                f"got {type(self.category).__name__}"
            )
        if not isinstance(self.word_counts, WordCounter):
            raise TypeError(f"Word counts of case {self.id!r} must be a WordCounter")


@dataclass
class NaiveBayesModel:
    """A trained model: vocabulary, category priors, and word probabilities.

    ``cond_prob`` maps each vocabulary word to a mapping of category to the
    smoothed probability of the word given the category.
    """

    vocabulary: Vocabulary
    priors: dict[str, float] = field(default_factory=dict)
    cond_prob: dict[str, dict[str, float]] = field(default_factory=dict)
    smoothing: str = "laplace"

    @property
    def categories(self) -> list[str]:
        return sorted(self.priors)

    def top_words(self, category: str, top_n: int = 10) -> list[tuple[str, float]]:
        """Words with the highest conditional probability for ``category``.

        Raises:
            ValueError: If ``category`` is not part of the model.
        """
        if category not in self.priors:
            raise ValueError(f"Unknown category: {category}. Known: {self.categories}")
        ranked = sorted(
            ((word, probs[category]) for word, probs in self.cond_prob.items()),
            key=lambda x: (-x[1], x[0]),
        )
        return ranked[:top_n]

    def to_dict(self) -> dict:
        return {
            "smoothing": self.smoothing,
            "categories": self.categories,
            "vocabulary_size": len(self.vocabulary),
            "priors": {cat: round(p, 6) for cat, p in sorted(self.priors.items())},
        }
