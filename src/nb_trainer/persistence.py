"""Reading and writing trained models.

A model directory holds three files, each a UTF-8 JSON document wrapped in
a versioned envelope::

    {"format": "nb-trainer", "version": 1, "kind": "priors", "data": {...}}

- ``vocab.bin``: the vocabulary with global word counts
- ``prior.bin``: category priors
- ``condProb.bin``: word -> category -> probability

Keys are sorted so a given model always serializes to the same bytes. A
classifier needs all three files.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

from .counters import Vocabulary
from .models import NaiveBayesModel

logger = logging.getLogger(__name__)

FORMAT_NAME = "nb-trainer"
FORMAT_VERSION = 1

VOCAB_FILE = "vocab.bin"
PRIOR_FILE = "prior.bin"
COND_PROB_FILE = "condProb.bin"

MODEL_FILES: tuple[str, ...] = (VOCAB_FILE, PRIOR_FILE, COND_PROB_FILE)


class ModelFormatError(ValueError):
    """Raised when a model file has an unexpected format, version or kind."""


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def write_model(
    model: NaiveBayesModel,
    directory: str | Path,
    vocabulary_path: str | Path | None = None,
) -> Path:
    """Write a model directory, replacing any previous model only on success.

    All files are first written to a staging directory beside ``directory``.
    Once every file is complete, the old directory is removed and the
    staging directory is renamed into place. If anything fails, the
    staging directory is deleted and the previous model stays as it was.

    When ``vocabulary_path`` is given, the vocabulary listing is written to
    a temporary file beside it before the model is replaced, and moved into
    place afterwards. A listing that cannot be written therefore stops the
    run before the previous model is touched.

    Args:
        model: The trained model.
        directory: Target model directory.
        vocabulary_path: Optional file for the ``word<TAB>count`` listing.

    Returns:
        Path of the written model directory.

    Raises:
        OSError: If the staging directory, a model file or the vocabulary
            listing cannot be written.
    """
    directory = Path(directory)
    staged_vocab = None
    if vocabulary_path is not None:
        vocabulary_path = Path(vocabulary_path)
        if vocabulary_path.is_dir():
            raise IsADirectoryError(f"Vocabulary output is a directory: {vocabulary_path}")
        staged_vocab = _stage_listing(model.vocabulary, vocabulary_path)

    try:
        _replace_directory(model, directory)
    except BaseException:
        if staged_vocab is not None:
            staged_vocab.unlink(missing_ok=True)
        raise

    logger.info("Wrote model with %d categories to %s", len(model.priors), directory)
    if staged_vocab is not None:
        staged_vocab.replace(vocabulary_path)
        logger.info("Wrote %d vocabulary entries to %s", len(model.vocabulary), vocabulary_path)
    return directory


def _replace_directory(model: NaiveBayesModel, directory: Path) -> None:
    directory.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{directory.name}-", dir=directory.parent))
    try:
        # mkdtemp creates the directory owner-only; give it the usual mode
        staging.chmod(0o777 & ~_current_umask())
        _dump(staging / VOCAB_FILE, "vocabulary", {
            "smoothing": model.smoothing,
            **model.vocabulary.to_dict(),
        })
        _dump(staging / PRIOR_FILE, "priors", model.priors)
        _dump(staging / COND_PROB_FILE, "cond_prob", model.cond_prob)

        if directory.exists():
            shutil.rmtree(directory)
        staging.rename(directory)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise


def _stage_listing(vocabulary: Vocabulary, path: Path) -> Path:
    """Write the vocabulary listing to a hidden file beside ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staged = path.with_name(f".{path.name}.tmp")
    try:
        _write_listing(vocabulary, staged)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    return staged


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _dump(path: Path, kind: str, data: object) -> None:
    envelope = {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "kind": kind,
        "data": data,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(envelope, f, sort_keys=True, indent=2)
        f.write("\n")


def write_vocabulary(vocabulary: Vocabulary, path: str | Path) -> Path:
    """Write a human-readable vocabulary listing.

    One ``word<TAB>count`` line per word, in sorted word order.
    """
    path = Path(path)
    _write_listing(vocabulary, path)
    logger.info("Wrote %d vocabulary entries to %s", len(vocabulary), path)
    return path


def _write_listing(vocabulary: Vocabulary, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for word in vocabulary.word_list():
            f.write(f"{word}\t{vocabulary.word_count(word)}\n")


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_model(directory: str | Path) -> NaiveBayesModel:
    """Load a model directory written by :func:`write_model`.

    Raises:
        FileNotFoundError: If the directory or one of its files is missing.
        ModelFormatError: If a file is not a model file of this version.
    """
    directory = Path(directory)
    for name in MODEL_FILES:
        if not (directory / name).is_file():
            raise FileNotFoundError(f"Model file not found: {directory / name}")

    vocab_data = _load(directory / VOCAB_FILE, "vocabulary")
    priors = _load(directory / PRIOR_FILE, "priors")
    cond_prob = _load(directory / COND_PROB_FILE, "cond_prob")

    return NaiveBayesModel(
        vocabulary=Vocabulary.from_dict(vocab_data),
        priors=priors,
        cond_prob=cond_prob,
        smoothing=vocab_data.get("smoothing", "laplace"),
    )


def _load(path: Path, kind: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            envelope = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ModelFormatError(f"{path.name} is not a JSON model file: {exc}") from exc

    if not isinstance(envelope, dict) or envelope.get("format") != FORMAT_NAME:
        raise ModelFormatError(f"{path.name} is not an {FORMAT_NAME} model file")
    if envelope.get("version") != FORMAT_VERSION:
        raise ModelFormatError(
            f"{path.name} has version {envelope.get('version')}, "
            f"expected {FORMAT_VERSION}"
        )
    if envelope.get("kind") != kind:
        raise ModelFormatError(
            f"{path.name} holds '{envelope.get('kind')}', expected '{kind}'"
        )
    return envelope["data"]
