#!/usr/bin/env python3
"""
Filename utilities for generating output filenames.
"""

import os
import logging

logger = logging.getLogger(__name__)

MAX_FILENAME_ATTEMPTS = 100


def _reserve(candidate: str) -> bool:
    """Create the file exclusively. Returns False if it already exists."""
    try:
        with open(candidate, "x"):
            pass
        return True
    except FileExistsError:
        return False
    except OSError as e:
        logger.error(f"Cannot create file {candidate}: {e}")
        raise ValueError(f"Cannot create file: {e}")


def generate_output_filename(input_filename: str, label: str, extension: str) -> str:
    """
    Generates an output filename next to the input and reserves it by creating an empty file.

    Strategy:
    1. Drop the input's extension, if any
    2. Append "_<label><extension>"
    3. If that file exists, try " (1)", " (2)", etc. before the extension
    4. Give up after MAX_FILENAME_ATTEMPTS numbered variants

    Args:
        input_filename: Path to the input log file
        label: Report name, e.g. "absolute"
        extension: Extension including the dot, e.g. ".txt"

    Returns:
        Filename that has been created as an empty file to reserve it

    Raises:
        RuntimeError: If no available filename is found
        ValueError: If a file cannot be created (permissions, invalid name)
    """
    stem, _ = os.path.splitext(input_filename)
    base_output = f"{stem}_{label}"

    candidate = base_output + extension
    if _reserve(candidate):
        return candidate

    for i in range(1, MAX_FILENAME_ATTEMPTS + 1):
        candidate = f"{base_output} ({i}){extension}"
        if _reserve(candidate):
            return candidate

    logger.error(
        f"Could not find an available filename for {base_output}{extension} "
        f"after {MAX_FILENAME_ATTEMPTS} attempts. Please clean up your output directory."
    )
    raise RuntimeError(
        f"No available filename found after {MAX_FILENAME_ATTEMPTS} attempts"
    )
