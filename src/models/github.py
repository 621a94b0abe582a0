"""
Pydantic schemas for GitHub REST and GraphQL responses.

One schema per query, validated at the client boundary. REST payloads use
snake_case, GraphQL uses camelCase; shared shapes accept both.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _unwrap_nodes(value):
    """GraphQL connections arrive as {"nodes": [...]}, REST as plain lists."""
    if isinstance(value, dict):
        return value.get("nodes") or []
    return value or []


class GraphQLModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# SHARED ISSUE SHAPES
# =============================================================================


class GitHubUser(BaseModel):
    login: str = ""
    avatar_url: str = Field("", validation_alias=AliasChoices("avatar_url", "avatarUrl"))


class GitHubLabel(BaseModel):
    id: int | str | None = None
    name: str
    color: str = ""
    description: str | None = None


class Milestone(BaseModel):
    title: str = ""
    description: str | None = None
    due_on: str | None = Field(None, validation_alias=AliasChoices("due_on", "dueOn"))


class Issue(BaseModel):
    """Issue as returned by REST (issues, search) or the GraphQL Issue fragment."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    number: int
    title: str
    body: str = ""
    state: Literal["open", "closed"] = "open"
    created_at: str | None = Field(None, validation_alias=AliasChoices("created_at", "createdAt"))
    updated_at: str | None = Field(None, validation_alias=AliasChoices("updated_at", "updatedAt"))
    closed_at: str | None = Field(None, validation_alias=AliasChoices("closed_at", "closedAt"))
    # REST also carries an API "url"; html_url must win there
    html_url: str = Field("", validation_alias=AliasChoices("html_url", "url"))
    user: GitHubUser | None = Field(None, validation_alias=AliasChoices("user", "author"))
    labels: list[GitHubLabel] = []
    assignees: list[GitHubUser] = []
    milestone: Milestone | None = None

    @field_validator("body", mode="before")
    @classmethod
    def _body_not_null(cls, value):
        return value or ""

    @field_validator("state", mode="before")
    @classmethod
    def _state_lowercase(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("labels", "assignees", mode="before")
    @classmethod
    def _connection_nodes(cls, value):
        return _unwrap_nodes(value)


class SearchIssuesResponse(BaseModel):
    total_count: int = 0
    items: list[Issue] = []


# =============================================================================
# PROJECT ITEMS QUERY
# =============================================================================


class FieldRef(BaseModel):
    id: str | None = None
    name: str = ""


class FieldValue(BaseModel):
    """A project item field value; unmatched GraphQL fragments arrive as {}."""

    field: FieldRef | None = None
    date: str | None = None
    text: str | None = None
    name: str | None = None
    number: float | None = None

    @property
    def field_name(self) -> str:
        return self.field.name if self.field else ""


class ProjectItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    type: str | None = None
    content: Issue | None = None
    field_values: list[FieldValue] = Field(
        [], validation_alias=AliasChoices("field_values", "fieldValues")
    )

    @field_validator("content", mode="before")
    @classmethod
    def _empty_content(cls, value):
        # Draft issues and pull requests do not match the Issue fragment
        return value or None

    @field_validator("field_values", mode="before")
    @classmethod
    def _connection_nodes(cls, value):
        return _unwrap_nodes(value)


class PageInfo(GraphQLModel):
    has_next_page: bool = False
    end_cursor: str | None = None


class ProjectItemsConnection(GraphQLModel):
    page_info: PageInfo = PageInfo()
    nodes: list[ProjectItem] = []


class ProjectV2Items(GraphQLModel):
    id: str
    title: str = ""
    items: ProjectItemsConnection = ProjectItemsConnection()


class OrganizationProjectItems(GraphQLModel):
    project_v2: ProjectV2Items | None = None


class ProjectItemsQuery(GraphQLModel):
    organization: OrganizationProjectItems | None = None


# =============================================================================
# ISSUE -> PROJECT ITEM LOOKUP
# =============================================================================


class ProjectRef(GraphQLModel):
    id: str
    title: str = ""
    number: int


class IssueProjectItem(GraphQLModel):
    id: str
    project: ProjectRef | None = None


class IssueWithProjectItems(GraphQLModel):
    id: str
    number: int
    title: str = ""
    project_items: list[IssueProjectItem] = []

    @field_validator("project_items", mode="before")
    @classmethod
    def _connection_nodes(cls, value):
        return _unwrap_nodes(value)


class RepositoryIssue(GraphQLModel):
    issue: IssueWithProjectItems | None = None


class ProjectItemLookupQuery(GraphQLModel):
    repository: RepositoryIssue | None = None


# =============================================================================
# PROJECT FIELDS QUERY
# =============================================================================


class FieldOption(GraphQLModel):
    id: str
    name: str
    color: str | None = None


class ProjectFieldNode(GraphQLModel):
    id: str | None = None
    name: str | None = None
    data_type: str | None = None
    options: list[FieldOption] | None = None


class ProjectV2Fields(GraphQLModel):
    id: str
    title: str = ""
    fields: list[ProjectFieldNode] = []

    @field_validator("fields", mode="before")
    @classmethod
    def _connection_nodes(cls, value):
        return _unwrap_nodes(value)


class OrganizationProjectFields(GraphQLModel):
    project_v2: ProjectV2Fields | None = None


class ProjectFieldsQuery(GraphQLModel):
    organization: OrganizationProjectFields | None = None


# =============================================================================
# FIELD VALUE MUTATION
# =============================================================================


class UpdatedProjectItem(GraphQLModel):
    id: str


class UpdateFieldValuePayload(GraphQLModel):
    project_v2_item: UpdatedProjectItem | None = None


class UpdateFieldValueMutation(GraphQLModel):
    update_project_v2_item_field_value: UpdateFieldValuePayload | None = None
