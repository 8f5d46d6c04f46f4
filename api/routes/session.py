"""Quiz session endpoints.

Routes are coroutines so every controller action runs on the event loop;
the controller pushes blocking work to threads itself.
"""
from contextlib import contextmanager
from typing import Annotated, Iterator

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from api.config import MAX_UPLOAD_BYTES
from api.dependencies import get_controller
from api.models import (
    AnswerRequest,
    LanguageRequest,
    PageRangeRequest,
    QuestionCountRequest,
    QuestionTypeRequest,
    TextUpdate,
)
from core.errors import InvalidTransition
from models import Stage
from serialization import serialize_session
from session_machine import SessionController

router = APIRouter(prefix="/api/session", tags=["session"])

ControllerDep = Annotated[SessionController, Depends(get_controller)]


@contextmanager
def _guard() -> Iterator[None]:
    """Map caller errors to HTTP errors; session errors stay in the snapshot."""
    try:
        yield
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except (ValueError, IndexError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _snapshot(controller: SessionController) -> dict[str, object]:
    summary = controller.summary() if controller.stage is Stage.COMPLETED else None
    return serialize_session(controller.session, summary)


@router.get("")
async def get_session(controller: ControllerDep) -> dict[str, object]:
    """Current session snapshot."""
    return _snapshot(controller)


@router.post("/start")
async def start(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.start()
    return _snapshot(controller)


@router.post("/upload")
async def upload_file(
    controller: ControllerDep,
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Load a document and normalize it into study material."""
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {MAX_UPLOAD_BYTES} bytes",
        )
    with _guard():
        await controller.load_file(file.filename or "upload", data, file.content_type)
    return _snapshot(controller)


@router.put("/text")
async def update_text(payload: TextUpdate, controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.edit_text(payload.text)
    return _snapshot(controller)


@router.post("/analyze")
async def analyze(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        await controller.analyze()
    return _snapshot(controller)


@router.post("/reset-upload")
async def reset_upload(controller: ControllerDep) -> dict[str, object]:
    """Forget the loaded file so another one can be uploaded."""
    with _guard():
        controller.reset_upload()
    return _snapshot(controller)


@router.post("/page-range")
async def confirm_page_range(
    payload: PageRangeRequest, controller: ControllerDep
) -> dict[str, object]:
    with _guard():
        await controller.confirm_page_range(payload.startPage, payload.endPage)
    return _snapshot(controller)


@router.post("/type")
async def select_type(
    payload: QuestionTypeRequest, controller: ControllerDep
) -> dict[str, object]:
    with _guard():
        controller.select_type(payload.questionType)
    return _snapshot(controller)


@router.put("/count")
async def set_count(
    payload: QuestionCountRequest, controller: ControllerDep
) -> dict[str, object]:
    with _guard():
        controller.set_question_count(payload.count)
    return _snapshot(controller)


@router.post("/generate")
async def generate(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        await controller.generate()
    return _snapshot(controller)


@router.post("/answer")
async def select_answer(payload: AnswerRequest, controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.select_answer(payload.answer)
    return _snapshot(controller)


@router.post("/check")
async def check_answer(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.check_answer()
    return _snapshot(controller)


@router.post("/next")
async def next_question(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.next_question()
    return _snapshot(controller)


@router.post("/back")
async def back(controller: ControllerDep) -> dict[str, object]:
    controller.back()
    return _snapshot(controller)


@router.post("/generate-more")
async def generate_more(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.generate_more()
    return _snapshot(controller)


@router.post("/return-to-start")
async def return_to_start(controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.return_to_start()
    return _snapshot(controller)


@router.delete("/error")
async def dismiss_error(controller: ControllerDep) -> dict[str, object]:
    controller.dismiss_error()
    return _snapshot(controller)


@router.put("/language")
async def set_language(payload: LanguageRequest, controller: ControllerDep) -> dict[str, object]:
    with _guard():
        controller.set_language(payload.language)
    return _snapshot(controller)


@router.post("/restart")
async def restart(controller: ControllerDep) -> dict[str, object]:
    """Drop everything and start over at the welcome stage."""
    controller.restart()
    return _snapshot(controller)
