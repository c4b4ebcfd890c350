from datetime import datetime

from pydantic import Field, field_validator
from task_tracker.schemas.common import CamelModel
from task_tracker.utils.sanitization import clean_text

STATUS_PATTERN = r"^(todo|in-progress|in_progress|completed)$"
PRIORITY_PATTERN = r"^(low|medium|high)$"

# Older rows were written with an underscore
IN_PROGRESS = "in-progress"
LEGACY_IN_PROGRESS = "in_progress"


def canonical_status(v):
    return IN_PROGRESS if v == LEGACY_IN_PROGRESS else v


# ── Common base for writeable fields ──
class TaskFields(CamelModel):
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    status: str | None = Field(None, pattern=STATUS_PATTERN)
    priority: str | None = Field(None, pattern=PRIORITY_PATTERN)
    due_date: datetime | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def sanitize(cls, v):
        return clean_text(v)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v):
        return canonical_status(v)


class TaskCreate(TaskFields):
    pass


class TaskUpdate(TaskFields):
    """Only the fields present in the request body are applied."""


class Task(CamelModel):
    id: int
    title: str
    description: str = ""
    status: str
    priority: str
    due_date: datetime | None = None
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskData(CamelModel):
    task: Task


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_tasks: int
    limit: int


class TaskPage(CamelModel):
    tasks: list[Task]
    pagination: Pagination
