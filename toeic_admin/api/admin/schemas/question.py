from pydantic import BaseModel, Field


class ChoiceItem(BaseModel):
    id: int | str | None = None
    text: str
    isCorrect: bool = False


class ParsedQuestionItem(BaseModel):
    id: int | str | None = None
    kind: str = "mcq"
    title: str
    choices: list[ChoiceItem] = Field(default_factory=list)


class ParseRequest(BaseModel):
    text: str
    joinChoiceLines: bool = False


class ParseResponse(BaseModel):
    questions: list[ParsedQuestionItem]
    count: int
