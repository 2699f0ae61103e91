"""Pydantic schema for cluster configuration files.

Example:
    ```yaml
    context: staging
    global:
      REPLICAS: 3
    import:
      - common-vars.yaml
    helmRepositories:
      - name: bitnami
        url: https://charts.bitnami.com/bitnami
    include:
      - name: frontend
        values:
          REPLICAS: 5
      - name: db
        type: helm
        chart: postgres
    ```
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kontemplate.core.models import ResourceSetKind


def _empty_if_none(value: Any, empty: Any) -> Any:
    # YAML keys without a value ("values:") load as None
    return empty if value is None else value


class HelmRepositoryData(BaseModel):
    """A helm repository entry."""

    name: str = Field(description="Repository alias passed to 'helm repo add'")
    url: str = Field(description="Repository URL")


class ResourceSetData(BaseModel):
    """A resource set entry, optionally containing nested resource sets."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, description="Resource set name")
    path: str | None = Field(
        default=None,
        description="Template directory relative to the parent (defaults to name)",
    )
    kind: ResourceSetKind = Field(
        default=ResourceSetKind.KUBECTL,
        alias="type",
        description="Dispatch tool for this set",
    )
    chart: str | None = Field(default=None, description="Helm chart reference")
    values: dict[str, Any] = Field(
        default_factory=dict,
        description="Variables local to this resource set",
    )
    args: list[str] = Field(
        default_factory=list,
        description="Extra arguments appended to the tool invocation",
    )
    include: list[ResourceSetData] = Field(
        default_factory=list,
        description="Nested resource sets",
    )

    @field_validator("values", mode="before")
    @classmethod
    def _default_values(cls, value: Any) -> Any:
        return _empty_if_none(value, {})

    @field_validator("args", "include", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _empty_if_none(value, [])

    @model_validator(mode="after")
    def _check_chart(self) -> ResourceSetData:
        if self.kind is ResourceSetKind.HELM and not self.include and not self.chart:
            raise ValueError(f"helm resource set '{self.name}' requires a chart")
        return self


class ContextData(BaseModel):
    """Top-level structure of a cluster configuration file."""

    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(min_length=1, description="Cluster context name")
    global_: dict[str, Any] = Field(
        default_factory=dict,
        alias="global",
        description="Context-global variables",
    )
    imports: list[str] = Field(
        default_factory=list,
        alias="import",
        description="Variable files merged underneath the global variables",
    )
    helm_repositories: list[HelmRepositoryData] = Field(
        default_factory=list,
        alias="helmRepositories",
    )
    include: list[ResourceSetData] = Field(default_factory=list)

    @field_validator("global_", mode="before")
    @classmethod
    def _default_global(cls, value: Any) -> Any:
        return _empty_if_none(value, {})

    @field_validator("imports", "helm_repositories", "include", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _empty_if_none(value, [])


ResourceSetData.model_rebuild()
