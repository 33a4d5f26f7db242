"""Tests for the training pipeline.

Covers training-set construction, prior estimation, conditional
probabilities under both smoothing strategies, and the NaiveBayesTrainer
end to end on a small bill corpus.
"""

from __future__ import annotations

import itertools
import math

import pytest

from nb_trainer.counters import Vocabulary, WordCounter
from nb_trainer.models import NaiveBayesModel, TrainingCase
from nb_trainer.smoothing import GlobalCountSmoothing, LaplaceSmoothing
from nb_trainer.trainer import (
    EmptyCorpusError,
    NaiveBayesTrainer,
    build_training_sets,
    compute_conditional_probs,
    compute_priors,
    train,
)

# ---------------------------------------------------------------------------
# Training sets
# ---------------------------------------------------------------------------


class TestBuildTrainingSets:
    """Tests for grouping cases by category."""

    def test_groups_by_category(self, counted_cases: list[TrainingCase]) -> None:
        counters, doc_counts = build_training_sets(counted_cases)
        assert list(counters) == ["a", "b"]
        assert doc_counts == {"a": 2, "b": 1}
        assert dict(counters["a"].items()) == {"apple": 4, "pear": 2, "plum": 4}
        assert dict(counters["b"].items()) == {"kiwi": 5, "pear": 1}

    def test_counter_doc_count_matches_tally(self, counted_cases: list[TrainingCase]) -> None:
        counters, doc_counts = build_training_sets(counted_cases)
        for cat, counter in counters.items():
            assert counter.num_docs == doc_counts[cat]

    def test_categories_sorted(self) -> None:
        cases = [
            TrainingCase(str(i), cat, WordCounter.from_words(["w"]))
            for i, cat in enumerate(["1200", "1000", "210", "1000"])
        ]
        counters, doc_counts = build_training_sets(cases)
        assert list(counters) == ["1000", "1200", "210"]
        assert list(doc_counts) == ["1000", "1200", "210"]

    def test_same_label_different_ids_are_additive(self) -> None:
        cases = [
            TrainingCase("x1", "7", WordCounter.from_counts({"tax": 2})),
            TrainingCase("x2", "7", WordCounter.from_counts({"tax": 3})),
            TrainingCase("x3", "8", WordCounter.from_counts({"tax": 1})),
        ]
        counters, _ = build_training_sets(cases)
        assert counters["7"].count("tax") == 5
        assert counters["8"].count("tax") == 1

    def test_empty_label_grouped_literally(self) -> None:
        cases = [
            TrainingCase("x1", "", WordCounter.from_words(["a"])),
            TrainingCase("x2", "", WordCounter.from_words(["b"])),
        ]
        counters, doc_counts = build_training_sets(cases)
        assert list(counters) == [""]
        assert doc_counts[""] == 2

    def test_does_not_modify_case_counters(self, counted_cases: list[TrainingCase]) -> None:
        before = [dict(case.word_counts.items()) for case in counted_cases]
        build_training_sets(counted_cases)
        assert [dict(case.word_counts.items()) for case in counted_cases] == before
        assert all(case.word_counts.num_docs == 0 for case in counted_cases)

    def test_order_independent(self, counted_cases: list[TrainingCase]) -> None:
        expected_counters, expected_docs = build_training_sets(counted_cases)
        for perm in itertools.permutations(counted_cases):
            counters, doc_counts = build_training_sets(perm)
            assert counters == expected_counters
            assert doc_counts == expected_docs

    def test_empty_input(self) -> None:
        assert build_training_sets([]) == ({}, {})


# ---------------------------------------------------------------------------
# Priors
# ---------------------------------------------------------------------------


class TestComputePriors:
    """Tests for category prior estimation."""

    def test_relative_document_counts(self) -> None:
        priors = compute_priors({"1200": 2, "1000": 2}, 4)
        assert priors == {"1000": 0.5, "1200": 0.5}

    def test_sum_to_one(self) -> None:
        docs = {"a": 3, "b": 7, "c": 1, "d": 13}
        priors = compute_priors(docs, sum(docs.values()))
        assert math.isclose(sum(priors.values()), 1.0, abs_tol=1e-9)

    def test_empty_corpus_raises(self) -> None:
        with pytest.raises(EmptyCorpusError):
            compute_priors({}, 0)

    def test_empty_corpus_is_division_error(self) -> None:
        with pytest.raises(ZeroDivisionError):
            compute_priors({"a": 0}, 0)


# ---------------------------------------------------------------------------
# Conditional probabilities
# ---------------------------------------------------------------------------


class TestComputeConditionalProbs:
    """Tests for P(word | category) estimation."""

    @pytest.fixture
    def inputs(
        self, counted_cases: list[TrainingCase]
    ) -> tuple[Vocabulary, dict[str, WordCounter]]:
        vocabulary = Vocabulary.from_counters(c.word_counts for c in counted_cases)
        counters, _ = build_training_sets(counted_cases)
        return vocabulary, counters

    def test_laplace_observed_words(self, inputs) -> None:
        vocabulary, counters = inputs
        cond = compute_conditional_probs(vocabulary, counters)
        # Category a: 10 occurrences, vocabulary of 4 words
        assert cond["apple"]["a"] == pytest.approx(5 / 15)
        assert cond["pear"]["a"] == pytest.approx(3 / 15)
        # Category b: 6 occurrences
        assert cond["kiwi"]["b"] == pytest.approx(6 / 11)
        assert cond["pear"]["b"] == pytest.approx(2 / 11)

    def test_laplace_unobserved_words_use_vocabulary_fallback(self, inputs) -> None:
        vocabulary, counters = inputs
        cond = compute_conditional_probs(vocabulary, counters)
        # Corpus: 16 occurrences, 4 words
        assert cond["kiwi"]["a"] == pytest.approx(6 / 21)
        assert cond["kiwi"]["a"] == vocabulary.laplace_prob("kiwi")
        assert cond["apple"]["b"] == pytest.approx(5 / 21)
        assert cond["plum"]["b"] == pytest.approx(5 / 21)

    def test_global_count_smoothing(self, inputs) -> None:
        vocabulary, counters = inputs
        cond = compute_conditional_probs(vocabulary, counters, GlobalCountSmoothing())
        assert cond["apple"]["a"] == pytest.approx(1.0)
        assert cond["pear"]["a"] == pytest.approx(3 / 4)
        assert cond["pear"]["b"] == pytest.approx(2 / 4)
        assert cond["kiwi"]["a"] == pytest.approx(1 / 6)

    def test_default_is_laplace(self, inputs) -> None:
        vocabulary, counters = inputs
        assert compute_conditional_probs(vocabulary, counters) == compute_conditional_probs(
            vocabulary, counters, LaplaceSmoothing()
        )

    @pytest.mark.parametrize("smoothing", [LaplaceSmoothing(), GlobalCountSmoothing()])
    def test_every_pair_positive_and_bounded(self, inputs, smoothing) -> None:
        vocabulary, counters = inputs
        cond = compute_conditional_probs(vocabulary, counters, smoothing)
        assert sorted(cond) == vocabulary.word_list()
        for word, probs in cond.items():
            assert sorted(probs) == ["a", "b"]
            for prob in probs.values():
                assert 0.0 < prob <= 1.0

    def test_inputs_not_modified(self, inputs) -> None:
        vocabulary, counters = inputs
        vocab_before = vocabulary.to_dict()
        counters_before = {cat: c.to_dict() for cat, c in counters.items()}
        compute_conditional_probs(vocabulary, counters)
        assert vocabulary.to_dict() == vocab_before
        assert {cat: c.to_dict() for cat, c in counters.items()} == counters_before


# ---------------------------------------------------------------------------
# Trainer
# ---------------------------------------------------------------------------


class TestNaiveBayesTrainer:
    """End-to-end tests on the four-document bill corpus."""

    def test_priors(self, bill_cases: list[TrainingCase]) -> None:
        model = NaiveBayesTrainer().train(bill_cases)
        assert model.priors == {"1000": 0.5, "1200": 0.5}

    def test_local_estimate_for_observed_word(self, bill_cases: list[TrainingCase]) -> None:
        model = NaiveBayesTrainer().train(bill_cases)
        # Category 1200 has 19 tokens, the vocabulary 25 distinct words;
        # "fox" occurs twice in 1200.
        assert len(model.vocabulary) == 25
        assert model.cond_prob["fox"]["1200"] == pytest.approx((2 + 1) / (19 + 25 + 1))

    def test_fallback_for_unobserved_word(self, bill_cases: list[TrainingCase]) -> None:
        model = NaiveBayesTrainer().train(bill_cases)
        assert model.vocabulary.total == 38
        assert model.cond_prob["fox"]["1000"] == pytest.approx((2 + 1) / (38 + 25 + 1))
        assert model.cond_prob["fox"]["1000"] == model.vocabulary.laplace_prob("fox")

    def test_shared_word_uses_each_category(self, bill_cases: list[TrainingCase]) -> None:
        model = NaiveBayesTrainer().train(bill_cases)
        assert model.cond_prob["the"]["1200"] == pytest.approx(5 / 45)
        assert model.cond_prob["the"]["1000"] == pytest.approx(4 / 45)

    def test_accepts_supplied_vocabulary(
        self, bill_cases: list[TrainingCase], bill_vocabulary: Vocabulary
    ) -> None:
        model = NaiveBayesTrainer().train(bill_cases, bill_vocabulary)
        assert model.vocabulary is bill_vocabulary

    def test_smoothing_by_name(self, bill_cases: list[TrainingCase]) -> None:
        trainer = NaiveBayesTrainer(smoothing="global")
        assert isinstance(trainer.smoothing, GlobalCountSmoothing)
        model = trainer.train(bill_cases)
        assert model.smoothing == "global"
        # fox: twice in 1200, twice overall
        assert model.cond_prob["fox"]["1200"] == pytest.approx(1.0)
        assert model.cond_prob["fox"]["1000"] == pytest.approx(1 / 3)

    def test_unknown_smoothing_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown smoothing"):
            NaiveBayesTrainer(smoothing="bogus")

    def test_empty_corpus_raises(self) -> None:
        with pytest.raises(EmptyCorpusError):
            NaiveBayesTrainer().train([])

    def test_deterministic_under_permutation(self, bill_cases: list[TrainingCase]) -> None:
        expected = train(bill_cases)
        for perm in itertools.permutations(bill_cases):
            model = train(list(perm))
            assert model.priors == expected.priors
            assert model.cond_prob == expected.cond_prob
            assert list(model.cond_prob) == list(expected.cond_prob)

    def test_returns_model(self, bill_cases: list[TrainingCase]) -> None:
        model = train(bill_cases)
        assert isinstance(model, NaiveBayesModel)
        assert model.categories == ["1000", "1200"]
        assert model.smoothing == "laplace"
