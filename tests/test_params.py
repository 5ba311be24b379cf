"""Tests for parameter management module.

Tests schema validation, YAML loading and grid construction.
"""

import numpy as np
import pytest
import yaml

from fieldops.core.architectures import Architecture
from fieldops.core.grid import StructuredGrid, Topology
from fieldops.params import (
    FieldOpsConfig,
    GridParams,
    RuntimeParams,
    ValidationError,
    load_config,
    load_config_with_overrides,
    merge_configs,
    save_config,
)


class TestGridParams:
    """Tests for GridParams dataclass."""

    def test_default_values(self):
        """Test default parameter values."""
        params = GridParams()
        assert params.size == (16, 16, 16)
        assert params.halo == (3, 3, 3)
        assert params.topology == ("periodic", "periodic", "bounded")

    def test_lists_normalized(self):
        """Lists from YAML become tuples."""
        params = GridParams(size=[4, 3, 2], topology=["Bounded", "periodic", "bounded"])
        assert params.size == (4, 3, 2)
        assert params.topology[0] == "bounded"

    def test_n_cells(self):
        """Test interior cell count."""
        assert GridParams(size=(4, 3, 2)).n_cells == 24

    def test_validation_size(self):
        """Test validation rejects empty axes."""
        with pytest.raises(ValidationError, match="size entries"):
            GridParams(size=(4, 0, 2))

    def test_validation_extent(self):
        """Test validation rejects non-positive extents."""
        with pytest.raises(ValidationError, match="extent entries"):
            GridParams(extent=(1.0, 0.0, 1.0))

    def test_validation_halo(self):
        """Test validation rejects negative halos."""
        with pytest.raises(ValidationError, match="halo entries"):
            GridParams(halo=(3, -1, 3))

    def test_validation_entries(self):
        """Test validation requires three entries."""
        with pytest.raises(ValidationError, match="3 entries"):
            GridParams(size=(4, 4))

    def test_validation_topology(self):
        """Test validation rejects unknown topologies."""
        with pytest.raises(ValidationError, match="Unknown topology"):
            GridParams(topology=("periodic", "flat", "bounded"))

    def test_validation_dtype(self):
        """Test validation rejects unknown dtypes."""
        with pytest.raises(ValidationError, match="Unknown dtype"):
            GridParams(dtype="not-a-dtype")

    def test_build(self):
        """Test grid construction."""
        grid = GridParams(size=(4, 3, 2), extent=(2.0, 1.0, 1.0), dtype="float32").build()
        assert isinstance(grid, StructuredGrid)
        assert grid.size == (4, 3, 2)
        assert grid.topology == (Topology.PERIODIC, Topology.PERIODIC, Topology.BOUNDED)
        assert grid.dtype == np.float32
        assert grid.arch is Architecture.HOST

    def test_immutability(self):
        """Test that GridParams is frozen."""
        params = GridParams()
        with pytest.raises(Exception):
            params.size = (1, 1, 1)


class TestRuntimeParams:
    """Tests for RuntimeParams dataclass."""

    def test_default_values(self):
        """Test default parameter values."""
        params = RuntimeParams()
        assert params.backend == "auto"
        assert params.debug is False
        assert params.architecture is Architecture.HOST

    def test_device(self):
        """Test device architecture lookup."""
        assert RuntimeParams(arch="device").architecture is Architecture.DEVICE

    def test_validation_backend(self):
        """Test validation rejects unknown backends."""
        with pytest.raises(ValidationError, match="backend"):
            RuntimeParams(backend="metal")

    def test_validation_arch(self):
        """Test validation rejects unknown memory domains."""
        with pytest.raises(ValidationError, match="arch"):
            RuntimeParams(arch="gpu")


class TestFieldOpsConfig:
    """Tests for FieldOpsConfig."""

    def test_defaults(self):
        """Test default configuration."""
        config = FieldOpsConfig()
        assert config.grid == GridParams()
        assert config.runtime == RuntimeParams()

    def test_dict_round_trip(self):
        """Test to_dict and from_dict."""
        config = FieldOpsConfig(grid=GridParams(size=(8, 4, 2)), runtime=RuntimeParams(debug=True))
        data = config.to_dict()
        assert data["grid"]["size"] == [8, 4, 2]
        assert FieldOpsConfig.from_dict(data) == config

    def test_from_dict_unknown_group(self):
        """Test unknown groups are rejected."""
        with pytest.raises(ValidationError, match="Unknown parameter group"):
            FieldOpsConfig.from_dict({"rainfall": {}})

    def test_from_dict_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ValidationError):
            FieldOpsConfig.from_dict({"grid": {"resolution": 4}})

    def test_with_updates(self):
        """Test partial updates by group."""
        config = FieldOpsConfig().with_updates(grid={"size": [4, 3, 2]})
        assert config.grid.size == (4, 3, 2)
        assert config.grid.halo == (3, 3, 3)

    def test_with_updates_unknown_group(self):
        """Test updates to unknown groups are rejected."""
        with pytest.raises(ValidationError):
            FieldOpsConfig().with_updates(output={"dir": "x"})

    def test_build_grid(self):
        """Test grid construction in the configured domain."""
        config = FieldOpsConfig(
            grid=GridParams(size=(4, 3, 2)), runtime=RuntimeParams(arch="device")
        )
        grid = config.build_grid()
        assert grid.size == (4, 3, 2)
        assert grid.arch is Architecture.DEVICE


class TestLoader:
    """Tests for YAML loading and saving."""

    def test_save_and_load(self, tmp_path):
        """Test saved configs load back unchanged."""
        config = FieldOpsConfig(grid=GridParams(size=(8, 4, 2), halo=(1, 1, 1)))
        path = tmp_path / "nested" / "config.yaml"
        save_config(config, path)
        assert path.exists()
        assert load_config(path) == config

    def test_partial_file(self, tmp_path):
        """Test missing groups fall back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"grid": {"size": [4, 3, 2]}}))
        config = load_config(path)
        assert config.grid.size == (4, 3, 2)
        assert config.runtime == RuntimeParams()

    def test_empty_file(self, tmp_path):
        """Test empty files give the default configuration."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == FieldOpsConfig()

    def test_missing_file(self, tmp_path):
        """Test missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        """Test non-mapping YAML is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValidationError, match="dictionary"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        """Test validation errors propagate from the file."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"grid": {"size": [4, 0, 2]}}))
        with pytest.raises(ValidationError):
            load_config(path)

    def test_overrides_without_file(self):
        """Test overrides applied to defaults."""
        config = load_config_with_overrides(overrides={"runtime": {"backend": "cpu"}})
        assert config.runtime.backend == "cpu"

    def test_overrides_with_file(self, tmp_path):
        """Test overrides applied on top of a file."""
        path = tmp_path / "config.yaml"
        save_config(FieldOpsConfig(grid=GridParams(size=(8, 8, 8))), path)
        config = load_config_with_overrides(path, {"grid": {"halo": [1, 1, 1]}})
        assert config.grid.size == (8, 8, 8)
        assert config.grid.halo == (1, 1, 1)

    def test_merge_configs(self):
        """Test override configuration takes precedence."""
        base = FieldOpsConfig(grid=GridParams(size=(8, 8, 8)))
        override = FieldOpsConfig(runtime=RuntimeParams(arch="device"))
        merged = merge_configs(base, override)
        assert merged == override
