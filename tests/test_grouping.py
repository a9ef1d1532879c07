"""
Tests for the grouping module.

Tests ModelGrouper aggregation and ModelGroup serialization.
"""

import itertools

import pytest

from model_sweep.grouping import ModelGroup, ModelGrouper
from model_sweep.scanner.base import ArtifactFile, ModelSource


def make_file(file_id, size, type_="gguf", repo=None, last_modified="2024-01-01T00:00:00.000Z"):
    name = file_id.split("/")[-1]
    if name.startswith("llamacpp-"):
        name = name[len("llamacpp-"):]
    return ArtifactFile(
        id=file_id,
        name=name,
        path=f"/cache/{file_id}",
        size=size,
        type=type_,
        last_modified=last_modified,
        repo=repo,
    )


class TestModelGrouper:
    """Tests for ModelGrouper."""

    def test_empty(self):
        assert ModelGrouper.group([], ModelSource.HUGGINGFACE) == []

    def test_group_by_repo(self):
        files = [
            make_file("models--acme--a/r/model.safetensors", 100, "safetensors", repo="acme/a"),
            make_file("models--acme--a/r/config.json", 1, "other", repo="acme/a"),
            make_file("models--acme--b/r/model.bin", 50, "pytorch", repo="acme/b"),
        ]

        groups = ModelGrouper.group(files, ModelSource.HUGGINGFACE)

        assert [g.id for g in groups] == ["group-acme/a", "group-acme/b"]
        a, b = groups
        assert a.repo == "acme/a"
        assert a.total_size == 101
        assert a.size_formatted == "101 B"
        assert a.type == "mixed"
        assert a.subtitle == "2 files"
        assert a.file_list_tooltip == "model.safetensors, config.json"
        assert a.source == "huggingface"
        assert b.type == "pytorch"
        assert b.subtitle == "model.bin"
        assert b.file_list_tooltip == "model.bin"

    def test_single_common_type(self):
        files = [
            make_file("models--acme--a/r/model-00001-of-00002.safetensors", 5, "safetensors", repo="acme/a"),
            make_file("models--acme--a/r/model-00002-of-00002.safetensors", 5, "safetensors", repo="acme/a"),
        ]

        (group,) = ModelGrouper.group(files, "huggingface")

        assert group.type == "safetensors"

    def test_hf_repo_rederived_from_id(self):
        """Without an attached repo, the directory segment of the id is decoded."""
        files = [make_file("models--acme--tiny--llm/r/model.gguf", 1)]

        (group,) = ModelGrouper.group(files, ModelSource.HUGGINGFACE)

        assert group.id == "group-acme/tiny-llm"

    def test_ungrouped_files(self):
        """Files without a repo become single-file groups named after the file."""
        files = [make_file("llamacpp-llama-7b.gguf", 4)]

        (group,) = ModelGrouper.group(files, ModelSource.LLAMACPP)

        assert group.id == "llamacpp-llama-7b.gguf"
        assert group.repo == "llama-7b.gguf"
        assert group.subtitle is None
        assert group.file_list_tooltip is None
        assert group.files == files
        assert group.type == "gguf"
        assert group.source == "llamacpp"

    def test_llamacpp_not_rederived(self):
        """The id fallback only applies to the Hugging Face layout."""
        files = [make_file("models--acme--x/r/model.gguf", 1)]

        (group,) = ModelGrouper.group(files, ModelSource.LLAMACPP)

        assert group.id == "models--acme--x/r/model.gguf"

    def test_last_modified_is_newest_instant(self):
        """Newest by instant, not by string order."""
        files = [
            make_file("llamacpp-a.gguf", 1, repo="acme/x", last_modified="2024-01-01T12:00:00+02:00"),
            make_file("llamacpp-b.gguf", 1, repo="acme/x", last_modified="2024-01-01T11:00:00.000Z"),
            make_file("llamacpp-c.gguf", 1, repo="acme/x", last_modified="2023-12-31T00:00:00.000Z"),
        ]

        (group,) = ModelGrouper.group(files, ModelSource.LLAMACPP)

        assert group.last_modified == "2024-01-01T11:00:00.000Z"

    def test_sorted_by_size_descending(self):
        files = [
            make_file("llamacpp-small.gguf", 1),
            make_file("llamacpp-big.gguf", 100),
            make_file("llamacpp-mid.gguf", 10, repo="acme/mid"),
        ]

        groups = ModelGrouper.group(files, ModelSource.LLAMACPP)

        assert [g.total_size for g in groups] == [100, 10, 1]

    def test_total_size_and_mixed_invariants(self):
        files = [
            make_file("llamacpp-a.gguf", 3, repo="r1"),
            make_file("llamacpp-b.gguf", 4, repo="r1"),
            make_file("llamacpp-c.gguf", 5, repo="r2"),
            make_file("llamacpp-d.gguf", 6),
        ]

        for group in ModelGrouper.group(files, ModelSource.LLAMACPP):
            assert group.total_size == sum(f.size for f in group.files)
            types = {f.type for f in group.files}
            assert (group.type == "mixed") == (len(types) >= 2)

    def test_discovery_order_does_not_change_groups(self):
        """Permuting input gives the same groups (membership and totals)."""
        files = [
            make_file("models--acme--a/r/model.safetensors", 100, "safetensors"),
            make_file("models--acme--a/r/config.json", 1, "other"),
            make_file("models--acme--b/r/model.bin", 100, "pytorch"),
            make_file("models--solo/r/model.gguf", 7),
        ]

        def summary(groups):
            return {
                (g.id, g.total_size, g.type, frozenset(f.id for f in g.files))
                for g in groups
            }

        expected = summary(ModelGrouper.group(files, ModelSource.HUGGINGFACE))
        for perm in itertools.permutations(files):
            assert summary(ModelGrouper.group(list(perm), ModelSource.HUGGINGFACE)) == expected

    def test_invalid_source(self):
        with pytest.raises(ValueError):
            ModelGrouper.group([], "ollama")


class TestModelGroup:
    """Tests for ModelGroup serialization."""

    def test_round_trip(self):
        files = [
            make_file("models--acme--a/r/model.gguf", 10, repo="acme/a"),
            make_file("models--acme--a/r/config.json", 2, "other", repo="acme/a"),
        ]
        (group,) = ModelGrouper.group(files, ModelSource.HUGGINGFACE)

        data = group.to_dict()
        restored = ModelGroup.from_dict(data)

        assert data["files"][0]["path"] == "/cache/models--acme--a/r/model.gguf"
        assert restored.id == group.id
        assert restored.total_size == 12
        assert [f.path for f in restored.files] == [f.path for f in group.files]
        assert restored.file_count == 2

    def test_from_dict_fills_defaults(self):
        group = ModelGroup.from_dict({
            "id": "llamacpp-a.gguf",
            "files": [{"id": "llamacpp-a.gguf", "path": "/c/a.gguf", "size": 2048}],
        })

        assert group.total_size == 2048
        assert group.size_formatted == "2 KB"
        assert group.files[0].name == "a.gguf"
