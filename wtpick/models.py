from pydantic import BaseModel, ConfigDict, Field

from wtpick.constants import LIST_DELIMITER


class WorktreeRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    path: str
    sha: str = ""
    branch: str = ""


class PendingCreateRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch: str
    path: str


class PickerOptions(BaseModel):
    prompt: str
    delimiter: str = LIST_DELIMITER
    # 1-based columns to display; None shows the whole line
    with_nth: list[int] | None = None
    keys: list[str] = Field(default_factory=list)
    query: str = ""
    status: str | None = None


class PickerResult(BaseModel):
    key: str
    selected: list[str] = Field(default_factory=list)
    query: str = ""
