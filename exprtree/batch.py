"""Batch evaluation: one expression per input line, one result line per input line.

Batch mode uses an empty variable binding, so any variable is an error.
A failing line is written inline as '<line> = Error: <message>' and never
stops the batch.
"""

import logging
from typing import Iterable, Iterator

from .errors import ExpressionError, StorageError
from .evaluator import calculate, format_result

logger = logging.getLogger(__name__)


def process_line(line: str) -> str:
    """Evaluate one line and format it for the output file."""
    try:
        result = calculate(line, {})
    except ExpressionError as e:
        logger.warning(f"Batch line {line!r} failed: {e}")
        return f"{line} = Error: {e}"
    return f"{line} = {format_result(result)}"


def process_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield process_line(line.rstrip("\r\n"))


def process_file(input_path: str, output_path: str) -> int:
    """Evaluate every line of input_path and write the results to output_path.

    Returns:
        Number of lines processed

    Raises:
        StorageError: If either file cannot be opened, read or written
    """
    count = 0
    try:
        with open(input_path, "r", encoding="utf-8") as reader, \
                open(output_path, "w", encoding="utf-8") as writer:
            for out in process_lines(reader):
                writer.write(out + "\n")
                count += 1
    except OSError as e:
        raise StorageError(f"Batch processing failed: {e}") from e
    logger.info(f"Batch processed {count} lines from {input_path} into {output_path}")
    return count
