from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

DEFAULT_COMMENT_TEMPLATE = (
    "@{assignee} please close or schedule before the end of this sprint. "
    "See [triaging old issues]"
    "(https://github.com/medic/medic-docs/blob/master/md/dev/workflow.md#triaging-old-issues). "
)


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Writes stay off unless explicitly enabled
    dry_run: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("Unsupported log level")
        return value.upper()


class GitHubConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    token: str
    api_base: HttpUrl = Field(default="https://api.github.com")

    @field_validator("owner", "repo", "token")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class RouletteConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    assignments: int
    issues_to_pull_from: int | None = None
    assignees: list[str]
    additional_query: str = ""
    labels_to_add: list[str] = Field(default_factory=list)
    comment_template: str = DEFAULT_COMMENT_TEMPLATE

    @field_validator("assignments")
    @classmethod
    def validate_assignments(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("assignments must be positive")
        return value

    @field_validator("issues_to_pull_from")
    @classmethod
    def validate_issues_to_pull_from(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("issues_to_pull_from must be positive if set")
        return value

    @field_validator("assignees")
    @classmethod
    def validate_assignees(cls, value: list[str]) -> list[str]:
        cleaned = [login.strip().lstrip("@") for login in value]
        if not cleaned:
            raise ValueError("assignees must be a non-empty list")
        if any(not login for login in cleaned):
            raise ValueError("assignees must not contain empty logins")
        if len(set(login.lower() for login in cleaned)) != len(cleaned):
            raise ValueError("assignees must be unique")
        return cleaned

    @field_validator("labels_to_add", mode="before")
    @classmethod
    def validate_labels_to_add(cls, value: list[str] | None) -> list[str]:
        return [] if value is None else value

    @field_validator("additional_query", mode="before")
    @classmethod
    def validate_additional_query(cls, value: str | None) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("additional_query must be a string")
        return value.strip()

    @field_validator("comment_template")
    @classmethod
    def validate_comment_template(cls, value: str) -> str:
        if "{assignee}" not in value:
            raise ValueError("comment_template must contain the {assignee} placeholder")
        try:
            value.format(assignee="octocat")
        except (IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"comment_template is not a valid template: {exc}") from exc
        return value

    def render_comment(self, assignee: str) -> str:
        return self.comment_template.format(assignee=assignee)


class RouletteSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    github: GitHubConfig
    roulette: RouletteConfig

    @property
    def required_issues(self) -> int:
        return len(self.roulette.assignees) * self.roulette.assignments
