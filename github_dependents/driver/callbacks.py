"""Callback functions for the driver's on_data parameter.

This module provides common callbacks for side effects like persistence,
printing, and counting while a traversal streams.

Example::

    from github_dependents.driver.callbacks import save_to_jsonl_file
    from github_dependents.driver.sync_driver import SyncDriver

    with open("dependents.jsonl", "w") as f:
        driver = SyncDriver(on_data=save_to_jsonl_file(f))
        driver.run(url, pages=5)
"""

import json
from collections.abc import Callable
from typing import TextIO

from github_dependents.data_types import Dependent


def save_to_jsonl_file(file_handle: TextIO) -> Callable[[Dependent], None]:
    """Create a callback that writes each record as a JSON line.

    Args:
        file_handle: An open file handle to write JSON lines to.
            The caller is responsible for opening and closing the file.

    Returns:
        A callback function that can be passed to the driver's on_data parameter.
    """

    def callback(data: Dependent) -> None:
        json.dump(data.model_dump(), file_handle)
        file_handle.write("\n")
        file_handle.flush()  # Ensure data is written immediately

    return callback


def print_data(prefix: str = "") -> Callable[[Dependent], None]:
    """Create a callback that prints each record to stdout.

    Example::

        driver = SyncDriver(on_data=print_data("DEPENDENT: "))
        # Prints: DEPENDENT: {"avatar_url": ..., "owner": ..., ...}
    """

    def callback(data: Dependent) -> None:
        print(f"{prefix}{json.dumps(data.model_dump())}")

    return callback


def count_data(counter: list[int] | None = None) -> Callable[[Dependent], None]:
    """Create a callback that counts records.

    The count is stored at index 0 of a mutable list so it can be read after
    the traversal finishes.

    Example::

        count = [0]
        driver = SyncDriver(on_data=count_data(count))
        driver.run(url)
        print(f"Found {count[0]} dependents")
    """
    if counter is None:
        counter = [0]

    def callback(data: Dependent) -> None:
        counter[0] += 1

    return callback


def combine_callbacks(
    *callbacks: Callable[[Dependent], None],
) -> Callable[[Dependent], None]:
    """Combine multiple callbacks into a single callback."""

    def callback(data: Dependent) -> None:
        for cb in callbacks:
            cb(data)

    return callback
