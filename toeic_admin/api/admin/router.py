from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from toeic_admin.api.admin.dependencies import (
    provide_question_bank_service,
    provide_reorder_service,
    provide_test_draft_service,
)
from toeic_admin.api.admin.schemas.bank import (
    QuestionBankExportResponse,
    QuestionBankImportRequest,
    QuestionBankImportResponse,
)
from toeic_admin.api.admin.schemas.question import ParsedQuestionItem, ParseRequest, ParseResponse
from toeic_admin.api.admin.schemas.test import (
    BulkImportRequest,
    BulkImportResponse,
    TestCreateRequest,
    TestDeleteResponse,
    TestDetailResponse,
    TestListResponse,
    TestSummaryResponse,
)
from toeic_admin.api.admin.schemas.tree import DropRequest, DropResponse, OrderedItemResponse, SiblingListResponse
from toeic_admin.application.reorder import DEFAULT_REORDER_ERROR, ReorderApplicationService
from toeic_admin.application.services import QuestionBankService, TestDraftService
from toeic_admin.domain.bulk_parser import parse_bulk_questions
from toeic_admin.domain.models import OrderedItem, ReorderOutcome
from toeic_admin.infra.ports.catalog import CatalogError

router = APIRouter(prefix="/admin", tags=["admin"])


def _test_detail(test: dict[str, Any]) -> TestDetailResponse:
    return TestDetailResponse(
        testId=str(test["id"]),
        title=test.get("title") or "",
        description=test.get("description") or "",
        status=test.get("status") or "draft",
        questions=int(test.get("questions") or 0),
        sections=test.get("sections") or [],
    )


def _items(items: list[OrderedItem]) -> list[OrderedItemResponse]:
    return [OrderedItemResponse(id=item.id, title=item.title, order=item.order) for item in items]


def _drop_response(outcome: ReorderOutcome) -> DropResponse:
    return DropResponse(
        applied=outcome.applied,
        reason=outcome.reason,
        message=outcome.message,
        items=_items(outcome.items),
    )


def _catalog_http_error(exc: CatalogError) -> HTTPException:
    status_code = 404 if exc.status_code == 404 else 502
    return HTTPException(status_code=status_code, detail=exc.message or DEFAULT_REORDER_ERROR)


def _list_siblings(service: ReorderApplicationService, kind: str, parent_id: str) -> SiblingListResponse:
    try:
        items = service.list_siblings(kind, parent_id, refresh=True)
    except CatalogError as exc:
        raise _catalog_http_error(exc) from exc
    return SiblingListResponse(parentId=parent_id, kind=kind, items=_items(items))  # type: ignore[arg-type]


def _drop(service: ReorderApplicationService, kind: str, parent_id: str, body: DropRequest) -> DropResponse:
    try:
        outcome = service.handle_drop(
            kind=kind,
            parent_id=parent_id,
            raw_payload=body.payload,
            target_id=body.targetId,
        )
    except CatalogError as exc:
        raise _catalog_http_error(exc) from exc
    return _drop_response(outcome)


@router.post("/questions/parse", response_model=ParseResponse)
async def parse_questions(body: ParseRequest):
    questions = parse_bulk_questions(body.text, join_choice_lines=body.joinChoiceLines)
    return ParseResponse(
        questions=[ParsedQuestionItem(**question.to_dict()) for question in questions],
        count=len(questions),
    )


@router.get("/tests", response_model=TestListResponse)
async def list_tests(
    refresh: bool = Query(default=False),
    service: TestDraftService = Depends(provide_test_draft_service),
):
    return TestListResponse(
        tests=[
            TestSummaryResponse(
                testId=str(test["id"]),
                title=test.get("title") or "",
                status=test.get("status") or "draft",
                questions=int(test.get("questions") or 0),
            )
            for test in service.list_tests(refresh=refresh)
        ]
    )


@router.post("/tests", response_model=TestDetailResponse)
async def create_test(body: TestCreateRequest, service: TestDraftService = Depends(provide_test_draft_service)):
    try:
        test = service.create_test(title=body.title, description=body.description, status=body.status)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _test_detail(test)


@router.get("/tests/{testId}", response_model=TestDetailResponse)
async def get_test(testId: str, service: TestDraftService = Depends(provide_test_draft_service)):
    test = service.get_test(testId)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return _test_detail(test)


@router.delete("/tests/{testId}", response_model=TestDeleteResponse)
async def delete_test(testId: str, service: TestDraftService = Depends(provide_test_draft_service)):
    if not service.delete_test(testId):
        raise HTTPException(status_code=404, detail="Test not found")
    return TestDeleteResponse(testId=testId)


@router.post("/tests/{testId}/bulk-import", response_model=BulkImportResponse)
async def bulk_import_questions(
    testId: str,
    body: BulkImportRequest,
    service: TestDraftService = Depends(provide_test_draft_service),
):
    try:
        result = service.bulk_import(testId, body.text, join_choice_lines=body.joinChoiceLines)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if result is None:
        raise HTTPException(status_code=404, detail="Test not found")

    test, added = result
    return BulkImportResponse(testId=testId, added=added, test=_test_detail(test))


@router.post("/tests/{testId}/sections/drop", response_model=DropResponse)
async def drop_test_section(
    testId: str,
    body: DropRequest,
    service: TestDraftService = Depends(provide_test_draft_service),
):
    outcome = service.drop_section(testId, raw_payload=body.payload, target_id=body.targetId)
    if outcome is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return _drop_response(outcome)


@router.delete("/tests/{testId}/sections/{sectionId}", response_model=TestDetailResponse)
async def remove_test_section(
    testId: str,
    sectionId: str,
    service: TestDraftService = Depends(provide_test_draft_service),
):
    section_id: str | int = int(sectionId) if sectionId.isdigit() else sectionId
    test = service.remove_section(testId, section_id)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return _test_detail(test)


@router.get("/roadmaps/{roadmapId}/courses", response_model=SiblingListResponse)
async def list_roadmap_courses(roadmapId: str, service: ReorderApplicationService = Depends(provide_reorder_service)):
    return _list_siblings(service, "course", roadmapId)


@router.get("/courses/{courseId}/lessons", response_model=SiblingListResponse)
async def list_course_lessons(courseId: str, service: ReorderApplicationService = Depends(provide_reorder_service)):
    return _list_siblings(service, "lesson", courseId)


@router.get("/lessons/{lessonId}/sections", response_model=SiblingListResponse)
async def list_lesson_sections(lessonId: str, service: ReorderApplicationService = Depends(provide_reorder_service)):
    return _list_siblings(service, "section", lessonId)


@router.post("/roadmaps/{roadmapId}/courses/drop", response_model=DropResponse)
async def drop_roadmap_course(
    roadmapId: str,
    body: DropRequest,
    service: ReorderApplicationService = Depends(provide_reorder_service),
):
    return _drop(service, "course", roadmapId, body)


@router.post("/courses/{courseId}/lessons/drop", response_model=DropResponse)
async def drop_course_lesson(
    courseId: str,
    body: DropRequest,
    service: ReorderApplicationService = Depends(provide_reorder_service),
):
    return _drop(service, "lesson", courseId, body)


@router.post("/lessons/{lessonId}/sections/drop", response_model=DropResponse)
async def drop_lesson_section(
    lessonId: str,
    body: DropRequest,
    service: ReorderApplicationService = Depends(provide_reorder_service),
):
    return _drop(service, "section", lessonId, body)


@router.get("/question-bank/export", response_model=QuestionBankExportResponse)
async def export_question_bank(service: QuestionBankService = Depends(provide_question_bank_service)):
    questions = service.export_questions()
    return QuestionBankExportResponse(questions=questions, count=len(questions))


@router.post("/question-bank/import", response_model=QuestionBankImportResponse)
async def import_question_bank(
    body: QuestionBankImportRequest,
    service: QuestionBankService = Depends(provide_question_bank_service),
):
    try:
        count = service.import_questions(body.questions, replace=body.replace)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return QuestionBankImportResponse(imported=len(body.questions), count=count)
