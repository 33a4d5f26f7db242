"""nb-trainer -- multinomial Naive Bayes model training."""

__version__ = "0.1.0"

from .corpus import Corpus, count_words, load_corpus, load_directory, load_table, tokenize
from .counters import Vocabulary, WordCounter
from .models import NaiveBayesModel, TrainingCase
from .persistence import ModelFormatError, read_model, write_model, write_vocabulary
from .smoothing import (
    GlobalCountSmoothing,
    LaplaceSmoothing,
    SmoothingStrategy,
    get_smoothing,
)
from .trainer import (
    EmptyCorpusError,
    NaiveBayesTrainer,
    build_training_sets,
    compute_conditional_probs,
    compute_priors,
    train,
)

__all__ = [
    # Counting
    "WordCounter",
    "Vocabulary",
    # Data models
    "TrainingCase",
    "NaiveBayesModel",
    # Training
    "NaiveBayesTrainer",
    "EmptyCorpusError",
    "build_training_sets",
    "compute_priors",
    "compute_conditional_probs",
    "train",
    # Smoothing
    "SmoothingStrategy",
    "LaplaceSmoothing",
    "GlobalCountSmoothing",
    "get_smoothing",
    # Corpus loading
    "Corpus",
    "tokenize",
    "count_words",
    "load_table",
    "load_directory",
    "load_corpus",
    # Persistence
    "ModelFormatError",
    "write_model",
    "read_model",
    "write_vocabulary",
]
