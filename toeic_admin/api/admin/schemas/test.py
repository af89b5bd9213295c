from typing import Literal

from pydantic import BaseModel, Field

from toeic_admin.api.admin.schemas.question import ChoiceItem

TestStatus = Literal["draft", "published", "archived"]


class TestCreateRequest(BaseModel):
    title: str
    description: str = ""
    status: TestStatus = "draft"


class TestSectionItem(BaseModel):
    id: int | str | None = None
    kind: str = "mcq"
    title: str = ""
    order: int = 0
    choices: list[ChoiceItem] = Field(default_factory=list)


class TestSummaryResponse(BaseModel):
    testId: str
    title: str
    status: str
    questions: int = 0


class TestListResponse(BaseModel):
    tests: list[TestSummaryResponse]


class TestDetailResponse(BaseModel):
    testId: str
    title: str
    description: str = ""
    status: str
    questions: int = 0
    sections: list[TestSectionItem] = Field(default_factory=list)


class TestDeleteResponse(BaseModel):
    ok: bool = True
    testId: str


class BulkImportRequest(BaseModel):
    text: str
    joinChoiceLines: bool = False


class BulkImportResponse(BaseModel):
    testId: str
    added: int
    test: TestDetailResponse
