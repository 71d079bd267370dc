"""Unit tests for artifact parsing and the artifact store."""

from pathlib import Path

import pytest

from zksync_deploy.artifacts import ArtifactStore, parse_artifact
from zksync_deploy.exceptions import AmbiguousIdentifier, ArtifactNotFoundError, InvalidArtifactError


class TestParseArtifact:
    """Test the parse_artifact function."""

    def test_parses_required_fields(self):
        data = {
            "_format": "hh-zksolc-artifact-1",
            "contractName": "Token",
            "sourceName": "contracts/Token.sol",
            "abi": [{"type": "constructor", "inputs": []}],
            "bytecode": "0x00",
        }

        artifact = parse_artifact(data, "Token")

        assert artifact.format == "hh-zksolc-artifact-1"
        assert artifact.contract_name == "Token"
        assert artifact.source_name == "contracts/Token.sol"
        assert artifact.bytecode == "0x00"
        assert artifact.fully_qualified_name == "contracts/Token.sol:Token"

    def test_optional_fields_default(self):
        """Test that solc artifacts without zkSync fields still parse."""
        data = {
            "_format": "hh-sol-artifact-1",
            "contractName": "Legacy",
            "sourceName": "contracts/Legacy.sol",
            "abi": [],
            "bytecode": "0x6080",
        }

        artifact = parse_artifact(data, "Legacy")

        assert artifact.factory_deps == {}
        assert artifact.source_mapping is None
        assert artifact.deployed_bytecode is None
        assert artifact.link_references == {}

    def test_missing_format_tag_is_none(self):
        data = {"contractName": "X", "sourceName": "X.sol", "abi": [], "bytecode": "0x"}
        assert parse_artifact(data, "X").format is None

    def test_missing_bytecode_raises_key_error(self):
        data = {"_format": "hh-zksolc-artifact-1", "contractName": "X", "sourceName": "X.sol", "abi": []}

        with pytest.raises(KeyError, match="bytecode"):
            parse_artifact(data, "X")

    def test_factory_deps_keep_declaration_order(self):
        """Test that dependency order follows the file, not sorted keys."""
        data = {
            "_format": "hh-zksolc-artifact-1",
            "contractName": "Factory",
            "sourceName": "contracts/Factory.sol",
            "abi": [],
            "bytecode": "0x00",
            "factoryDeps": {"0xff": "Zeta", "0x00": "Alpha", "0x88": "Mid"},
        }

        artifact = parse_artifact(data, "Factory")

        assert list(artifact.factory_deps.values()) == ["Zeta", "Alpha", "Mid"]


class TestArtifactStoreRead:
    """Test ArtifactStore.read_artifact against the sample tree."""

    def test_reads_by_bare_name(self, artifact_store: ArtifactStore):
        artifact = artifact_store.read_artifact("Token")

        assert artifact.contract_name == "Token"
        assert artifact.source_name == "contracts/Token.sol"
        assert artifact.format == "hh-zksolc-artifact-1"

    def test_reads_by_fully_qualified_name(self, artifact_store: ArtifactStore):
        artifact = artifact_store.read_artifact("contracts/Token.sol:Token")
        assert artifact.contract_name == "Token"

    def test_bare_and_fully_qualified_names_agree(self, artifact_store: ArtifactStore):
        """Test that a unique bare name and its FQN return identical content."""
        for fqn in ["contracts/Token.sol:Token", "contracts/Factory.sol:Factory", "contracts/Pair.sol:Pair"]:
            bare = fqn.split(":")[1]
            assert artifact_store.read_artifact(bare) == artifact_store.read_artifact(fqn)

    def test_ambiguous_bare_name(self, artifact_store: ArtifactStore):
        """Test that a shared bare name lists the FQNs to use instead."""
        with pytest.raises(AmbiguousIdentifier) as exc_info:
            artifact_store.read_artifact("Greeter")

        assert exc_info.value.candidates == [
            "contracts/Greeter.sol:Greeter",
            "contracts/other/Greeter.sol:Greeter",
        ]

    def test_fully_qualified_name_disambiguates(self, artifact_store: ArtifactStore):
        first = artifact_store.read_artifact("contracts/Greeter.sol:Greeter")
        second = artifact_store.read_artifact("contracts/other/Greeter.sol:Greeter")

        assert first.bytecode != second.bytecode

    def test_unknown_bare_name(self, artifact_store: ArtifactStore):
        with pytest.raises(ArtifactNotFoundError):
            artifact_store.read_artifact("Nope")

    def test_unknown_fully_qualified_name(self, artifact_store: ArtifactStore):
        with pytest.raises(ArtifactNotFoundError):
            artifact_store.read_artifact("contracts/Token.sol:Nope")

    def test_missing_artifacts_dir(self, tmp_path: Path):
        store = ArtifactStore(tmp_path / "does-not-exist")

        with pytest.raises(ArtifactNotFoundError):
            store.read_artifact("Token")

    def test_fully_qualified_name_cannot_leave_the_store(self, tmp_path: Path):
        outside = tmp_path / "secrets" / "Key.json"
        outside.parent.mkdir()
        outside.write_text("{}")
        store = ArtifactStore(tmp_path / "artifacts-zk")

        with pytest.raises(InvalidArtifactError, match="outside"):
            store.read_artifact("../secrets:Key")
        assert store.artifact_exists("../secrets:Key") is False

    def test_malformed_json_names_the_identifier(self, write_artifact):
        path = write_artifact("contracts/Bad.sol", "Bad", {})
        path.write_text('{"abi": [')
        store = ArtifactStore(write_artifact.root)

        with pytest.raises(InvalidArtifactError, match="contracts/Bad.sol:Bad") as exc_info:
            store.read_artifact("contracts/Bad.sol:Bad")

        assert exc_info.value.__cause__ is not None

    def test_non_object_json(self, write_artifact):
        path = write_artifact("contracts/List.sol", "List", {})
        path.write_text("[]")

        with pytest.raises(InvalidArtifactError, match="not a JSON object"):
            ArtifactStore(write_artifact.root).read_artifact("List")

    def test_read_artifact_data_keeps_unknown_records(self, write_artifact):
        """Test that raw reading does not require zksolc fields."""
        write_artifact("contracts/V.vy", "V", {"_format": "some-other-artifact-1"})

        data = ArtifactStore(write_artifact.root).read_artifact_data("V")

        assert data == {"_format": "some-other-artifact-1"}

    def test_debug_files_are_not_artifacts(self, artifact_store: ArtifactStore):
        """Test that Token.dbg.json never shadows Token.json."""
        assert artifact_store.read_artifact("Token").format == "hh-zksolc-artifact-1"


class TestArtifactStoreListing:
    """Test ArtifactStore.fully_qualified_names and artifact_exists."""

    def test_lists_all_contracts(self, artifact_store: ArtifactStore):
        names = artifact_store.fully_qualified_names()

        assert "contracts/Token.sol:Token" in names
        assert "contracts/other/Greeter.sol:Greeter" in names
        assert names == sorted(names)

    def test_excludes_build_info_and_debug_files(self, artifact_store: ArtifactStore):
        names = artifact_store.fully_qualified_names()

        assert not any(name.startswith("build-info") for name in names)
        assert not any(name.endswith(".dbg") for name in names)

    def test_artifact_exists(self, artifact_store: ArtifactStore):
        assert artifact_store.artifact_exists("Token") is True
        assert artifact_store.artifact_exists("contracts/Token.sol:Token") is True
        assert artifact_store.artifact_exists("Nope") is False
        assert artifact_store.artifact_exists("Greeter") is False

    def test_default_dir_is_artifacts_zk(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        store = ArtifactStore()

        assert store.artifacts_dir == Path.cwd() / "artifacts-zk"
        assert store.fully_qualified_names() == []
