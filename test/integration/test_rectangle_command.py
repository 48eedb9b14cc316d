import json

import pytest

from rectangling.commands.rectangle import main

REPOS = [
    {"name": "arrow", "owner": {"login": "apache"}, "topics": ["data", "columnar"]},
    {"name": "tidyr", "owner": {"login": "tidyverse"}, "topics": []},
]


@pytest.fixture
def repos_file(tmp_path):
    path = tmp_path / "repos.json"
    path.write_text(json.dumps(REPOS))
    return str(path)


def test_flatten_file(repos_file, capsys):
    assert main([repos_file, "--names-sep", "_"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "json_name | json_owner_login | json_topics",
        "--------- | ---------------- | -----------",
        "arrow     | apache           | data",
        "arrow     | apache           | columnar",
    ]


def test_explicit_steps(repos_file, capsys):
    argv = [repos_file, "--widen", "json", "--lengthen", "topics", "--widen", "owner", "--keep-empty"]
    assert main(argv) == 0
    assert capsys.readouterr().out.splitlines() == [
        "name  | login     | topics",
        "----- | --------- | --------",
        "arrow | apache    | data",
        "arrow | apache    | columnar",
        "tidyr | tidyverse | null",
    ]


def test_describe(repos_file, capsys):
    assert main([repos_file, "--widen", "json", "--describe"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "column | shape",
        "------ | ---------",
        "name   | flat",
        "owner  | records",
        "topics | sequences",
    ]


def test_json_lines(tmp_path, capsys):
    path = tmp_path / "repos.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in REPOS))
    assert main([str(path), "--lines", "--column", "repo", "--widen", "repo", "--describe"]) == 0
    assert "owner  | records" in capsys.readouterr().out


def test_rectangling_error(repos_file, capsys):
    assert main([repos_file, "--widen", "json", "--widen", "topics"]) == 1
    assert capsys.readouterr().out.startswith("Unable to rectangle column topics")


def test_invalid_json(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    assert main([str(path)]) == 1
    assert capsys.readouterr().out.startswith(f"Unable to read {path}")


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "Unable to read" in capsys.readouterr().out
