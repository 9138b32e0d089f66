"""Fibonacci sample buffer: generation, loading and persistence."""

import logging
from pathlib import Path
from typing import Iterable, Tuple, Union

import numpy as np

from .errors import InvalidInputError, SourceUnavailableError


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Packed native-endian 32-bit integers, no header
SAMPLE_DTYPE = np.dtype('=i4')

# F(46) = 1836311903 is the largest Fibonacci number that fits int32
MAX_FIBONACCI_INDEX = 46

BINARY_EXTENSION = '.bin'


def generate_fibonacci(last_index: int) -> np.ndarray:
    """
    Generate F(0) .. F(last_index) by the standard recurrence.

    Args:
        last_index: Index of the last Fibonacci number to include

    Returns:
        int32 array of length ``last_index + 1``
    """
    if last_index < 0 or last_index > MAX_FIBONACCI_INDEX:
        raise InvalidInputError(
            f"Fibonacci index {last_index} outside [0, {MAX_FIBONACCI_INDEX}]"
        )

    samples = [0] * (last_index + 1)
    if last_index >= 1:
        samples[1] = 1
    for i in range(2, last_index + 1):
        samples[i] = samples[i - 1] + samples[i - 2]

    return np.array(samples, dtype=SAMPLE_DTYPE)


def check_source(path: PathLike) -> Path:
    """
    Check that a persisted buffer can be used as a session source.

    Args:
        path: Path to a ``.bin`` file

    Returns:
        The path as a ``Path``

    Raises:
        SourceUnavailableError: If the path is empty, lacks the ``.bin``
            extension or cannot be opened
    """
    name = str(path) if path else ''
    if not name:
        raise SourceUnavailableError("No source file given")

    if len(name) <= len(BINARY_EXTENSION) or not name.endswith(BINARY_EXTENSION):
        raise SourceUnavailableError(f"Source file must end in '{BINARY_EXTENSION}': {name}")

    try:
        with open(name, 'rb'):
            pass
    except OSError as e:
        raise SourceUnavailableError(f"Cannot open source file {name}: {e}") from e

    return Path(name)


def load_binary(path: PathLike) -> np.ndarray:
    """
    Load a raw int32 buffer verbatim.

    Trailing bytes that do not form a whole integer are ignored.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, 'rb') as f:
        data = f.read()

    usable = len(data) - len(data) % SAMPLE_DTYPE.itemsize
    samples = np.frombuffer(data[:usable], dtype=SAMPLE_DTYPE).copy()
    logger.debug(f"Loaded {len(samples)} samples from {path}")
    return samples


def save_binary(samples: Iterable[int], path: PathLike) -> Path:
    """Write samples as packed native-endian int32."""
    path = Path(path)
    np.asarray(samples, dtype=SAMPLE_DTYPE).tofile(str(path))
    return path


def save_text(samples: Iterable[int], path: PathLike) -> Path:
    """Write samples as decimal integers, each followed by a space."""
    path = Path(path)
    with open(path, 'w') as f:
        for value in samples:
            f.write(f"{int(value)} ")
    return path


def load_text(path: PathLike) -> np.ndarray:
    """Read a whitespace-separated text listing back into an int32 array."""
    with open(path, 'r') as f:
        values = [int(token) for token in f.read().split()]
    return np.array(values, dtype=SAMPLE_DTYPE)


def persist(
    samples: np.ndarray,
    directory: PathLike,
    binary_file: str,
    text_file: str
) -> Tuple[Path, Path]:
    """
    Save a buffer in both persisted formats.

    Args:
        samples: Buffer to save
        directory: Target directory (created if missing)
        binary_file: File name of the raw binary copy
        text_file: File name of the human-readable copy

    Returns:
        Tuple of (binary_path, text_path)
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    binary_path = save_binary(samples, directory / binary_file)
    text_path = save_text(samples, directory / text_file)

    logger.info(f"Saved {len(samples)} samples to {binary_path} and {text_path}")
    return binary_path, text_path
