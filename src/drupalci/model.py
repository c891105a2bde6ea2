# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from . import settings

REVIEW_CATEGORIES = ("style", "comment", "sql", "security", "i18n")


# ---------------------------------------------------------------------
# Job configuration
# ---------------------------------------------------------------------

def _workspace_relative(value: str) -> str:
    path = PurePath(value)
    if path.is_absolute() or ".." in path.parts:
        raise ValueError("must be a path relative to the workspace")
    return value


class ProvisionConfig(BaseModel):
    """Settings of a 'build a Drupal instance' job."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    db: str
    uri: str = "default"
    coder: bool = False
    simpletest: bool = False

    # Upstream Drupal source
    repo_url: str = Field(default=settings.DRUPAL_REPO_URL, min_length=1)
    branch: str = Field(default=settings.DRUPAL_BRANCH, min_length=1)
    tag: str = Field(default=settings.DRUPAL_TAG, min_length=1)

    coder_project: str = Field(default=settings.CODER_PROJECT, min_length=1)
    logs: Optional[str] = None  # simpletest XML output, relative to the workspace

    @field_validator("db")
    @classmethod
    def _db_not_empty(cls, value: str) -> str:
        # TODO check the database connection works, not only that a URL is set
        if not value.strip():
            raise ValueError("Please set a database URL")
        return value

    @field_validator("logs")
    @classmethod
    def _logs_relative(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _workspace_relative(value)

    @model_validator(mode="after")
    def _uri_for_simpletest(self) -> "ProvisionConfig":
        if self.simpletest and not self.uri.strip():
            raise ValueError("Simpletest needs a site URI")
        return self


class ReviewConfig(BaseModel):
    """Settings of a 'run Coder Review on Drupal' job."""
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    root: str = "drupal"
    logs: str = "logs"
    except_: str = Field(default="", alias="except")

    style: bool = False
    comment: bool = False
    sql: bool = False
    security: bool = False
    i18n: bool = False

    coder_project: str = Field(default=settings.CODER_PROJECT, min_length=1)

    @field_validator("root", "logs")
    @classmethod
    def _relative(cls, value: str) -> str:
        return _workspace_relative(value)

    @property
    def categories(self) -> frozenset[str]:
        return review_categories(
            style=self.style,
            comment=self.comment,
            sql=self.sql,
            security=self.security,
            i18n=self.i18n,
        )


class MakeConfig(BaseModel):
    """Settings of a 'drush make' job. An empty root builds into the workspace itself."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    makefile: str
    root: str = "drupal"

    @field_validator("makefile")
    @classmethod
    def _makefile_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please set a makefile path")
        return value

    @field_validator("root")
    @classmethod
    def _relative(cls, value: str) -> str:
        return _workspace_relative(value) if value else value


def review_categories(
    *,
    style: bool = False,
    comment: bool = False,
    sql: bool = False,
    security: bool = False,
    i18n: bool = False,
) -> frozenset[str]:
    """Category set for a coder review; may be empty."""
    flags = {"style": style, "comment": comment, "sql": sql, "security": security, "i18n": i18n}
    return frozenset(name for name, enabled in flags.items() if enabled)


# ---------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigIssue:
    """One problem with a job configuration."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


C = TypeVar("C", bound=BaseModel)


def _issue_from_error(err: Dict[str, Any]) -> ConfigIssue:
    loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        message = str(ctx["error"])
    else:
        message = err.get("msg", "invalid value")
    return ConfigIssue(field=loc, message=message)


def validate_config(
    model: Type[C],
    data: Mapping[str, Any],
) -> Tuple[Optional[C], List[ConfigIssue]]:
    """
    Validate raw job settings against a configuration model.

    Never raises for bad input: returns (config, []) when valid,
    (None, issues) otherwise.
    """
    try:
        return model.model_validate(dict(data)), []
    except ValidationError as e:
        return None, [_issue_from_error(err) for err in e.errors()]


# ---------------------------------------------------------------------
# Execution records
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Invocation:
    """One finished external command."""
    name: str
    argv: Tuple[str, ...]
    cwd: str | None
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def cmd(self) -> str:
        return " ".join(self.argv)


@dataclass
class StepResult:
    """Outcome of one build step."""
    name: str
    status: str  # "ok" | "failed" | "skipped"
    invocations: list[Invocation] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
