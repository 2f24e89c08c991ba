"""
Tests for the command-line tool.
"""

import json
import logging

import numpy as np
import pytest

from llm_samplers.cli import load_logits, main
from llm_samplers.errors import ConfigurationError, chain_logger, config_logger, logger

SCORES = [3.0, 2.0, 1.0, 0.0]


@pytest.fixture(autouse=True)
def reset_loggers():
    yield
    for instance in (logger, chain_logger, config_logger):
        for handler in instance.handlers:
            handler.close()
        instance.handlers = []
        instance.propagate = True
        instance.setLevel(logging.NOTSET)


@pytest.fixture
def scores_file(tmp_path):
    path = tmp_path / "logits.json"
    path.write_text(json.dumps(SCORES))
    return str(path)


def run(capsys, argv):
    status = main(argv)
    return status, capsys.readouterr().out


def test_list_samplers(capsys):
    status, out = run(capsys, ["--list-samplers"])
    assert status == 0
    for name in ("top-p", "tail-free", "top-k", "temperature"):
        assert name in out
    assert "- min_keep (uint)" in out


def test_top_k_renormalizes_survivors(capsys, scores_file):
    status, out = run(capsys, ["--logits", scores_file, "--sampler", "top-k:k=2"])
    assert status == 0

    result = json.loads(out)
    assert [entry["token_id"] for entry in result] == [0, 1]
    assert sum(entry["prob"] for entry in result) == pytest.approx(1.0)
    assert result[0]["prob"] == pytest.approx(np.e / (np.e + 1))


def test_top_p(capsys, scores_file):
    # softmax([3, 2, 1, 0]) ~ [0.644, 0.237, 0.087, 0.032]
    status, out = run(capsys, ["--logits", scores_file, "--sampler", "top-p:p=0.8"])
    assert status == 0
    assert [entry["token_id"] for entry in json.loads(out)] == [0, 1]


def test_config_then_flags(capsys, scores_file, tmp_path):
    config = tmp_path / "chain.yaml"
    config.write_text("samplers:\n  - type: top-k\n    k: 3\nlog_level: WARNING\n")

    status, out = run(
        capsys,
        ["--logits", scores_file, "--config", str(config), "--sampler", "top-p:p=0.8"],
    )
    assert status == 0
    assert [entry["token_id"] for entry in json.loads(out)] == [0, 1]


def test_named_tokens(capsys, tmp_path):
    path = tmp_path / "logits.json"
    path.write_text(json.dumps({"token_ids": ["a", "b", "c"], "logits": [0.0, 2.0, 1.0]}))

    status, out = run(capsys, ["--logits", str(path), "--sampler", "top-k:1"])
    assert status == 0
    assert json.loads(out)[0]["token_id"] == "b"


def test_npy_input(capsys, tmp_path):
    path = tmp_path / "logits.npy"
    np.save(path, np.array([0.5, 4.0, 2.0]))

    status, out = run(capsys, ["--logits", str(path)])
    assert status == 0
    assert [entry["token_id"] for entry in json.loads(out)] == [1, 2, 0]


def test_internal_error_exit_status(capsys, tmp_path):
    path = tmp_path / "flat.json"
    path.write_text(json.dumps([1.0, 1.0, 1.0]))

    status, _ = run(capsys, ["--logits", str(path), "--sampler", "tail-free:z=0.5"])
    assert status == 1


def test_unknown_sampler_exit_status(capsys, scores_file):
    status, _ = run(capsys, ["--logits", scores_file, "--sampler", "mirostat"])
    assert status == 1


def test_missing_config_exit_status(capsys, scores_file):
    status, _ = run(capsys, ["--logits", scores_file, "--config", "/nonexistent.yaml"])
    assert status == 1


def test_logits_required():
    with pytest.raises(SystemExit):
        main([])


def test_load_logits_rejects_scalar(tmp_path):
    path = tmp_path / "scalar.json"
    path.write_text("3.0")
    with pytest.raises(ConfigurationError):
        load_logits(str(path))


def test_load_logits_missing_field(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"scores": [1.0]}))
    with pytest.raises(ConfigurationError):
        load_logits(str(path))
