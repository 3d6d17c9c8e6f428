"""Pydantic v2 models for the project/capability score matrix."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Project(BaseModel):
    """A conservation project, one per qualifying data row."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class Capability(BaseModel):
    """An AI capability, one per non-metadata column."""

    model_config = ConfigDict(frozen=True)

    id: str  # CSV column key
    label: str


class MatrixData(BaseModel):
    """Projects, capabilities and the dense score grid built from them.

    ``values[row][col]`` is the score of ``projects[row]`` for
    ``capabilities[col]``; NaN marks a missing score.
    """

    model_config = ConfigDict(frozen=True)

    projects: list[Project] = Field(default_factory=list)
    capabilities: list[Capability] = Field(default_factory=list)
    values: list[list[float]] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_shape(self) -> "MatrixData":
        if len(self.values) != len(self.projects):
            raise ValueError(
                f"Score grid has {len(self.values)} rows for {len(self.projects)} projects"
            )
        width = len(self.capabilities)
        for index, row in enumerate(self.values):
            if len(row) != width:
                raise ValueError(
                    f"Score grid row {index} has {len(row)} cells for {width} capabilities"
                )
        if len({p.id for p in self.projects}) != len(self.projects):
            raise ValueError("Project ids must be unique")
        if len({c.id for c in self.capabilities}) != len(self.capabilities):
            raise ValueError("Capability ids must be unique")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.projects or not self.capabilities

    def score(self, project_index: int, capability_index: int) -> float:
        return self.values[project_index][capability_index]

    def project_index(self, project_id: str) -> int | None:
        for index, project in enumerate(self.projects):
            if project.id == project_id:
                return index
        return None

    def capability_index(self, capability_id: str) -> int | None:
        for index, capability in enumerate(self.capabilities):
            if capability.id == capability_id:
                return index
        return None
