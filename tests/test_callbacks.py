"""Tests for on_data callback helpers."""

import io
import json

from github_dependents.data_types import Dependent
from github_dependents.driver.callbacks import (
    combine_callbacks,
    count_data,
    print_data,
    save_to_jsonl_file,
)

DEPENDENT = Dependent(owner="octocat", repository="hello-world", stars=3, forks=1)


def test_save_to_jsonl_file():
    buffer = io.StringIO()
    callback = save_to_jsonl_file(buffer)

    callback(DEPENDENT)
    callback(DEPENDENT.model_copy(update={"repository": "spoon-knife"}))

    lines = buffer.getvalue().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == {
        "avatar_url": None,
        "owner": "octocat",
        "repository": "hello-world",
        "stars": 3,
        "forks": 1,
    }
    assert json.loads(lines[1])["repository"] == "spoon-knife"


def test_print_data(capsys):
    print_data("DEPENDENT: ")(DEPENDENT)

    out = capsys.readouterr().out
    assert out.startswith("DEPENDENT: ")
    assert json.loads(out[len("DEPENDENT: ") :])["owner"] == "octocat"


def test_count_and_combine():
    counter = [0]
    seen = []
    callback = combine_callbacks(count_data(counter), seen.append)

    for _ in range(3):
        callback(DEPENDENT)

    assert counter == [3]
    assert seen == [DEPENDENT] * 3
