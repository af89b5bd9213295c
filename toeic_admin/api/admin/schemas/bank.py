from pydantic import BaseModel


class QuestionBankExportResponse(BaseModel):
    questions: list[dict]
    count: int


class QuestionBankImportRequest(BaseModel):
    questions: list[dict]
    replace: bool = True


class QuestionBankImportResponse(BaseModel):
    imported: int
    count: int
