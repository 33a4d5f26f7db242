"""Multinomial Naive Bayes training.

Turns labeled documents into a :class:`~nb_trainer.models.NaiveBayesModel`
in three stages. Each stage reads its inputs without modifying them and
returns a freshly built result:

1. ``build_training_sets`` merges document counts into one counter per
   category and tallies documents per category.
2. ``compute_priors`` estimates P(category) from the document tallies.
3. ``compute_conditional_probs`` estimates P(word | category) for every
   vocabulary word and category using a pluggable smoothing strategy.

Categories are always iterated in sorted order, so the same corpus yields
the same model regardless of document order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from .counters import Vocabulary, WordCounter
from .models import NaiveBayesModel, TrainingCase
from .smoothing import LaplaceSmoothing, SmoothingStrategy, get_smoothing

logger = logging.getLogger(__name__)


class EmptyCorpusError(ZeroDivisionError):
    """Raised when training is attempted without any documents."""


# ---------------------------------------------------------------------------
# Training Sets
# ---------------------------------------------------------------------------

def build_training_sets(
    cases: Iterable[TrainingCase],
) -> tuple[dict[str, WordCounter], dict[str, int]]:
    """Group training cases by category and merge their word counts.

    Args:
        cases: Labeled training documents.

    Returns:
        Tuple of (counters by category, document count by category), both
        keyed in sorted category order.
    """
    counters: dict[str, WordCounter] = {}
    doc_counts: dict[str, int] = {}
    for case in cases:
        counter = counters.get(case.category)
        if counter is None:
            counter = WordCounter()
            counters[case.category] = counter
        counter.update_counts(case.word_counts)
        doc_counts[case.category] = doc_counts.get(case.category, 0) + 1

    categories = sorted(counters)
    return (
        {cat: counters[cat] for cat in categories},
        {cat: doc_counts[cat] for cat in categories},
    )


# ---------------------------------------------------------------------------
# Priors
# ---------------------------------------------------------------------------

def compute_priors(
    docs_per_category: Mapping[str, int],
    total_docs: int,
) -> dict[str, float]:
    """Compute the prior probability of each category.

    Args:
        docs_per_category: Number of training documents in each category.
        total_docs: Total number of training documents.

    Returns:
        Dict of {category: prior}, summing to 1 when ``total_docs`` equals
        the sum of the category counts.

    Raises:
        EmptyCorpusError: If ``total_docs`` is not positive.
    """
    if total_docs <= 0:
        raise EmptyCorpusError("Cannot compute priors from an empty training corpus")
    return {
        cat: docs_per_category[cat] / total_docs
        for cat in sorted(docs_per_category)
    }


# ---------------------------------------------------------------------------
# Conditional Probabilities
# ---------------------------------------------------------------------------

def compute_conditional_probs(
    vocabulary: Vocabulary,
    training_sets: Mapping[str, WordCounter],
    smoothing: Optional[SmoothingStrategy] = None,
) -> dict[str, dict[str, float]]:
    """Compute P(word | category) for every vocabulary word and category.

    Args:
        vocabulary: Global word counts of the training corpus.
        training_sets: Merged word counts per category.
        smoothing: Estimator to use; defaults to :class:`LaplaceSmoothing`.

    Returns:
        Dict of {word: {category: probability}} with sorted keys at both
        levels.
    """
    smoothing = smoothing or LaplaceSmoothing()
    categories = sorted(training_sets)
    cond_prob: dict[str, dict[str, float]] = {}
    for word in vocabulary.word_list():
        cond_prob[word] = {
            cat: smoothing.probability(word, training_sets[cat], vocabulary)
            for cat in categories
        }
    return cond_prob


# ---------------------------------------------------------------------------
# Training Pipeline (High-Level API)
# ---------------------------------------------------------------------------

class NaiveBayesTrainer:
    """Runs the full training pipeline.

    Example::

        trainer = NaiveBayesTrainer(smoothing="laplace")
        model = trainer.train(cases)

        model.priors["1200"]           # 0.5
        model.cond_prob["fox"]["1200"] # 0.0666...

    Args:
        smoothing: Strategy instance or strategy name (``"laplace"`` or
            ``"global"``). Defaults to Laplace smoothing.
    """

    def __init__(self, smoothing: SmoothingStrategy | str | None = None) -> None:
        if isinstance(smoothing, str):
            smoothing = get_smoothing(smoothing)
        self._smoothing = smoothing or LaplaceSmoothing()

    @property
    def smoothing(self) -> SmoothingStrategy:
        return self._smoothing

    def train(
        self,
        cases: Sequence[TrainingCase],
        vocabulary: Optional[Vocabulary] = None,
    ) -> NaiveBayesModel:
        """Train a model from labeled cases.

        Args:
            cases: Training documents.
            vocabulary: Vocabulary of the corpus. Built from ``cases`` when
                not provided.

        Returns:
            The trained NaiveBayesModel.

        Raises:
            EmptyCorpusError: If ``cases`` is empty.
        """
        if vocabulary is None:
            vocabulary = Vocabulary.from_counters(case.word_counts for case in cases)

        training_sets, doc_counts = build_training_sets(cases)
        logger.info(
            "Built %d training sets from %d documents", len(training_sets), len(cases)
        )

        priors = compute_priors(doc_counts, len(cases))
        logger.debug("Priors: %s", priors)

        cond_prob = compute_conditional_probs(vocabulary, training_sets, self._smoothing)
        logger.info(
            "Computed %s probabilities for %d words x %d categories",
            self._smoothing.name,
            len(cond_prob),
            len(training_sets),
        )

        return NaiveBayesModel(
            vocabulary=vocabulary,
            priors=priors,
            cond_prob=cond_prob,
            smoothing=self._smoothing.name,
        )


def train(
    cases: Sequence[TrainingCase],
    vocabulary: Optional[Vocabulary] = None,
    smoothing: SmoothingStrategy | str | None = None,
) -> NaiveBayesModel:
    """Train a model in one call. See :meth:`NaiveBayesTrainer.train`."""
    return NaiveBayesTrainer(smoothing=smoothing).train(cases, vocabulary)
