"""Unit tests for cluster configuration loading."""

from pathlib import Path

import pytest

from kontemplate.core.errors import ConfigError
from kontemplate.core.models import HelmRepository, ResourceSetKind
from kontemplate.runtime.config.config_loader import (
    load_context,
    merge_variables,
    parse_variable_overrides,
)
from tests.helpers import write_cluster_config


class TestLoadContext:
    """Tests for load_context."""

    def test_loads_basic_context(self, tmp_path: Path) -> None:
        """Name, globals, repositories and sets should be read in order."""
        config = write_cluster_config(
            tmp_path,
            {
                "context": "staging",
                "global": {"REPLICAS": 3},
                "helmRepositories": [
                    {"name": "bitnami", "url": "https://charts.bitnami.com/bitnami"}
                ],
                "include": [
                    {"name": "frontend"},
                    {"name": "db", "type": "helm", "chart": "postgres", "args": ["--wait"]},
                ],
            },
        )

        context = load_context(config)

        assert context.name == "staging"
        assert context.global_variables == {"REPLICAS": 3}
        assert context.helm_repositories == (
            HelmRepository(name="bitnami", url="https://charts.bitnami.com/bitnami"),
        )
        assert [rs.name for rs in context.resource_sets] == ["frontend", "db"]

        frontend, db = context.resource_sets
        assert frontend.kind is ResourceSetKind.KUBECTL
        assert frontend.path == tmp_path.resolve() / "frontend"
        assert db.kind is ResourceSetKind.HELM
        assert db.chart == "postgres"
        assert db.args == ("--wait",)

    def test_explicit_path_is_relative_to_config_file(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path,
            {"context": "c", "include": [{"name": "web", "path": "sets/web"}]},
        )

        context = load_context(config)

        assert context.resource_sets[0].path == tmp_path.resolve() / "sets" / "web"

    def test_local_values_override_globals(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "global": {"REPLICAS": 3, "IMAGE": "nginx"},
                "include": [{"name": "frontend", "values": {"REPLICAS": 5}}],
            },
        )

        variables = load_context(config).resource_sets[0].variables

        assert variables == {"REPLICAS": 5, "IMAGE": "nginx"}

    def test_caller_overrides_win_over_every_scope(self, tmp_path: Path) -> None:
        """A key defined at all three scopes resolves to the caller override."""
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "global": {"KEY": "global"},
                "include": [{"name": "a", "values": {"KEY": "local"}}],
            },
        )

        context = load_context(config, {"KEY": "override"})

        assert context.resource_sets[0].variables["KEY"] == "override"
        assert context.global_variables["KEY"] == "global"
        assert context.resource_sets[0].values["KEY"] == "local"

    def test_variables_are_merged_per_resource_set(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "global": {"KEY": "global"},
                "include": [
                    {"name": "a", "values": {"KEY": "from-a"}},
                    {"name": "b"},
                ],
            },
        )

        a, b = load_context(config).resource_sets

        assert a.variables["KEY"] == "from-a"
        assert b.variables["KEY"] == "global"

    def test_context_is_immutable(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path, {"context": "c", "global": {"A": 1}, "include": [{"name": "a"}]}
        )

        context = load_context(config)

        with pytest.raises(AttributeError):
            context.name = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            context.global_variables["A"] = 2  # type: ignore[index]
        with pytest.raises(TypeError):
            context.resource_sets[0].variables["A"] = 2  # type: ignore[index]

    def test_nested_resource_sets(self, tmp_path: Path) -> None:
        """Children are named parent/child and inherit the parent's values."""
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "include": [
                    {
                        "name": "monitoring",
                        "values": {"NAMESPACE": "monitoring", "RETENTION": "7d"},
                        "include": [
                            {"name": "prometheus", "values": {"RETENTION": "30d"}},
                            {"name": "grafana"},
                        ],
                    }
                ],
            },
        )

        context = load_context(config)

        names = [rs.name for rs in context.resource_sets]
        assert names == ["monitoring/prometheus", "monitoring/grafana"]

        prometheus = context.resource_sets[0]
        assert prometheus.parent == "monitoring"
        assert prometheus.path == tmp_path.resolve() / "monitoring" / "prometheus"
        assert prometheus.variables == {"NAMESPACE": "monitoring", "RETENTION": "30d"}

    def test_imports_merge_beneath_globals(self, tmp_path: Path) -> None:
        write_cluster_config(tmp_path, {"DOMAIN": "example.com", "ENV": "imported"}, "vars.yaml")
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "import": ["vars.yaml"],
                "global": {"ENV": "global"},
                "include": [{"name": "a"}],
            },
        )

        context = load_context(config)

        assert context.global_variables == {"DOMAIN": "example.com", "ENV": "global"}

    def test_json_configuration_is_accepted(self, tmp_path: Path) -> None:
        config = tmp_path / "cluster.json"
        config.write_text('{"context": "prod", "include": [{"name": "api"}]}')

        context = load_context(config)

        assert context.name == "prod"
        assert context.resource_sets[0].name == "api"

    def test_does_not_open_template_files(self, tmp_path: Path) -> None:
        """Loading succeeds even when set directories do not exist."""
        config = write_cluster_config(
            tmp_path, {"context": "c", "include": [{"name": "missing"}]}
        )

        context = load_context(config)

        assert not context.resource_sets[0].path.exists()


class TestLoadContextErrors:
    """Tests for load_context failure modes."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as excinfo:
            load_context(tmp_path / "nope.yaml")

        assert "not found" in excinfo.value.message

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "cluster.yaml"
        config.write_text("context: [unclosed\n")

        with pytest.raises(ConfigError):
            load_context(config)

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        config = tmp_path / "cluster.yaml"
        config.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_context(config)

    def test_missing_context_name(self, tmp_path: Path) -> None:
        config = write_cluster_config(tmp_path, {"include": [{"name": "a"}]})

        with pytest.raises(ConfigError) as excinfo:
            load_context(config)

        assert excinfo.value.details is not None
        assert "context" in excinfo.value.details

    def test_duplicate_resource_set_names(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path,
            {"context": "c", "include": [{"name": "a"}, {"name": "b"}, {"name": "a"}]},
        )

        with pytest.raises(ConfigError) as excinfo:
            load_context(config)

        assert "Duplicate resource set name 'a'" in excinfo.value.message

    def test_duplicate_nested_names(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path,
            {
                "context": "c",
                "include": [
                    {"name": "p", "include": [{"name": "x"}]},
                    {"name": "p/x"},
                ],
            },
        )

        with pytest.raises(ConfigError):
            load_context(config)

    def test_helm_set_requires_chart(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path, {"context": "c", "include": [{"name": "db", "type": "helm"}]}
        )

        with pytest.raises(ConfigError) as excinfo:
            load_context(config)

        assert "requires a chart" in (excinfo.value.details or "")

    def test_unknown_kind(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path, {"context": "c", "include": [{"name": "a", "type": "kustomize"}]}
        )

        with pytest.raises(ConfigError):
            load_context(config)

    def test_missing_import(self, tmp_path: Path) -> None:
        config = write_cluster_config(
            tmp_path, {"context": "c", "import": ["absent.yaml"], "include": []}
        )

        with pytest.raises(ConfigError):
            load_context(config)


class TestParseVariableOverrides:
    """Tests for --var parsing."""

    def test_parses_assignments(self) -> None:
        assert parse_variable_overrides(["a=1", "b=two"]) == {"a": "1", "b": "two"}

    def test_value_may_contain_equals(self) -> None:
        assert parse_variable_overrides(["url=http://x?a=b"]) == {"url": "http://x?a=b"}

    def test_empty_value_is_allowed(self) -> None:
        assert parse_variable_overrides(["a="]) == {"a": ""}

    def test_later_assignment_wins(self) -> None:
        assert parse_variable_overrides(["a=1", "a=2"]) == {"a": "2"}

    def test_none_yields_empty_mapping(self) -> None:
        assert parse_variable_overrides(None) == {}

    @pytest.mark.parametrize("assignment", ["novalue", "=value", ""])
    def test_rejects_malformed_assignment(self, assignment: str) -> None:
        with pytest.raises(ConfigError):
            parse_variable_overrides([assignment])


def test_merge_variables_later_layers_win() -> None:
    assert merge_variables({"a": 1, "b": 1}, None, {"b": 2}, {"c": 3}) == {
        "a": 1,
        "b": 2,
        "c": 3,
    }
