"""Smoothing strategies for word-given-category probabilities.

Two estimators are available:

- ``laplace`` (default): add-one smoothing against the category's own word
  total plus the vocabulary size, ``(n_wc + 1) / (N_c + |V| + 1)``. When the
  category has no observation of the word, the corpus-wide estimate
  ``(n_w + 1) / (N + |V| + 1)`` is used instead.
- ``global``: smoothing against the word's corpus-wide count,
  ``(n_wc + 1) / (n_w + 1)``, independent of the category's size.

Both produce probabilities in (0, 1] for every word of the vocabulary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .counters import Vocabulary, WordCounter


class SmoothingStrategy(ABC):
    """Computes P(word | category) from category and corpus counts."""

    name: str = ""

    @abstractmethod
    def probability(
        self,
        word: str,
        counter: WordCounter,
        vocabulary: Vocabulary,
    ) -> float:
        """Smoothed probability of ``word`` given the category of ``counter``.

        Args:
            word: A vocabulary word.
            counter: Merged word counts of one category.
            vocabulary: Global counts of the whole corpus.

        Returns:
            A probability strictly greater than 0 and at most 1.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LaplaceSmoothing(SmoothingStrategy):
    """Category-local Laplace estimate with a corpus-wide fallback."""

    name = "laplace"

    def probability(
        self,
        word: str,
        counter: WordCounter,
        vocabulary: Vocabulary,
    ) -> float:
        prob = counter.laplace_prob(word, len(vocabulary))
        if prob is None:
            return vocabulary.laplace_prob(word)
        return prob


class GlobalCountSmoothing(SmoothingStrategy):
    """Category count smoothed against the word's global count."""

    name = "global"

    def probability(
        self,
        word: str,
        counter: WordCounter,
        vocabulary: Vocabulary,
    ) -> float:
        return (counter.count(word) + 1) / (vocabulary.word_count(word) + 1)


_STRATEGIES: dict[str, type[SmoothingStrategy]] = {
    LaplaceSmoothing.name: LaplaceSmoothing,
    GlobalCountSmoothing.name: GlobalCountSmoothing,
}

SMOOTHING_NAMES: tuple[str, ...] = tuple(sorted(_STRATEGIES))


def get_smoothing(name: str) -> SmoothingStrategy:
    """Return a smoothing strategy instance by name.

    Raises:
        ValueError: If no strategy has that name.
    """
    try:
        return _STRATEGIES[name.lower().strip()]()
    except KeyError:
        raise ValueError(
            f"Unknown smoothing '{name}'. Supported: {', '.join(SMOOTHING_NAMES)}"
        ) from None
