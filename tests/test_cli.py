"""
Tests for the CLI module.

Uses click's CliRunner against temporary caches.
"""

import json

import pytest
from click.testing import CliRunner

from model_sweep.cli import main

from conftest import write_file, write_sidecar, hf_snapshot


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def caches(hf_root, llama_root):
    hf_snapshot(hf_root, "models--acme--tiny", "r1", "model.safetensors", 2048)
    hf_snapshot(hf_root, "models--acme--tiny", "r1", "config.json", 10)
    gguf = write_file(llama_root / "llama-7b.gguf", 4096)
    write_sidecar(gguf, {"url": "https://huggingface.co/meta/llama-7b-GGUF/resolve/main/llama-7b.gguf"})
    write_file(llama_root / "loose.gguf", 1)
    return ["--hf-cache", str(hf_root), "--llama-cache", str(llama_root)]


class TestListCommand:
    """Tests for `msweep list`."""

    def test_json(self, runner, caches):
        result = runner.invoke(main, caches + ["list", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [g["id"] for g in data] == ["group-meta/llama-7b-GGUF", "group-acme/tiny", "llamacpp-loose.gguf"]
        assert data[1]["size_formatted"] == "2.01 KB"
        assert "repo" not in data[1]["files"][0]

    def test_source_filter(self, runner, caches):
        result = runner.invoke(main, caches + ["list", "-f", "json", "-s", "huggingface"])

        assert [g["source"] for g in json.loads(result.output)] == ["huggingface"]

    def test_search(self, runner, caches):
        result = runner.invoke(main, caches + ["list", "-f", "json", "-q", "LOOSE"])

        assert [g["repo"] for g in json.loads(result.output)] == ["loose.gguf"]

    def test_paths(self, runner, caches, llama_root):
        result = runner.invoke(main, caches + ["list", "-f", "paths", "-s", "llamacpp"])

        assert result.output.splitlines() == [
            str(llama_root / "llama-7b.gguf"),
            str(llama_root / "loose.gguf"),
        ]

    def test_table(self, runner, caches):
        result = runner.invoke(main, caches + ["list"])

        assert result.exit_code == 0
        assert "acme/tiny" in result.output

    def test_empty(self, runner, tmp_path):
        result = runner.invoke(main, ["--hf-cache", str(tmp_path / "a"), "--llama-cache", str(tmp_path / "b"), "list"])

        assert result.exit_code == 0
        assert "No models found" in result.output


class TestStatsCommand:
    """Tests for `msweep stats`."""

    def test_stats(self, runner, caches):
        result = runner.invoke(main, caches + ["stats"])

        assert result.exit_code == 0
        assert "Total Models:" in result.output
        assert "huggingface" in result.output
        assert "llamacpp" in result.output


class TestDeleteCommand:
    """Tests for `msweep delete`."""

    def test_delete_with_yes(self, runner, caches, llama_root):
        result = runner.invoke(main, caches + ["delete", "group-meta/llama-7b-GGUF", "--yes"])

        assert result.exit_code == 0
        assert not (llama_root / "llama-7b.gguf").exists()
        assert not (llama_root / "llama-7b.gguf.json").exists()
        assert (llama_root / "loose.gguf").exists()

    def test_delete_confirm_declined(self, runner, caches, llama_root):
        result = runner.invoke(main, caches + ["delete", "llamacpp-loose.gguf"], input="n\n")

        assert result.exit_code != 0
        assert "This will delete 1 file " in result.output
        assert (llama_root / "loose.gguf").exists()

    def test_delete_confirm_accepted(self, runner, caches, hf_root):
        result = runner.invoke(main, caches + ["delete", "group-acme/tiny"], input="y\n")

        assert result.exit_code == 0
        assert "This will delete 2 files" in result.output
        assert not (hf_root / "models--acme--tiny" / "snapshots" / "r1" / "model.safetensors").exists()

    def test_delete_unknown(self, runner, caches):
        result = runner.invoke(main, caches + ["delete", "group-nope/nope", "--yes"])

        assert result.exit_code == 1


class TestConfigCommand:
    """Tests for `msweep config`."""

    def test_set_and_show(self, runner, tmp_path, isolated_config):
        target = tmp_path / "my-llama"
        target.mkdir()

        result = runner.invoke(main, ["config", "set-llama-cache", str(target)])
        assert result.exit_code == 0

        saved = json.loads((isolated_config / "config.json").read_text())
        assert saved["llama_cache_dir"] == str(target.resolve())

        result = runner.invoke(main, ["config", "show"])
        assert result.exit_code == 0
        assert "Config File" in result.output

    def test_reset(self, runner, isolated_config):
        result = runner.invoke(main, ["config", "reset", "--yes"])

        assert result.exit_code == 0
        assert (isolated_config / "config.json").exists()


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
