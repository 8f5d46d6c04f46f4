"""Session controller: the stage flow from upload to a completed quiz.

All actions run on one event loop. Blocking work (document parsing, the
generator call) is pushed to worker threads; when such work finishes after
the user has moved on, its result is discarded instead of applied.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from core.errors import (
    GenerationFailed,
    GenerationTimeout,
    InvalidPageRange,
    InvalidTransition,
    NoMaterialProvided,
    ParseFailed,
    QuizError,
)
from material_extract import normalize_file
from models import (
    ImageMaterial,
    MAX_QUESTION_COUNT,
    MIN_QUESTION_COUNT,
    QuestionType,
    RequiresPageSelection,
    Session,
    SessionError,
    Stage,
    TextMaterial,
)
from page_extract import extract_page_range, open_pdf, validate_page_range
from question_generator import QuestionGenerator
from quiz_runtime import QuizRuntime
from translations import DEFAULT_LANGUAGE, is_supported, language_name, translate

log = logging.getLogger(__name__)

DEFAULT_PROCESSING_DELAY = 1.5
DEFAULT_GENERATION_TIMEOUT = 60.0

BACK_TARGETS = {
    Stage.SELECT_PAGE_RANGE: Stage.UPLOAD,
    Stage.SELECT_TYPE: Stage.UPLOAD,
    Stage.SELECT_COUNT: Stage.SELECT_TYPE,
    Stage.ANSWERING: Stage.SELECT_TYPE,
}


class SessionController:
    def __init__(
        self,
        generator: QuestionGenerator,
        *,
        session: Optional[Session] = None,
        language: str = DEFAULT_LANGUAGE,
        processing_delay: float = DEFAULT_PROCESSING_DELAY,
        generation_timeout: Optional[float] = DEFAULT_GENERATION_TIMEOUT,
        normalizer: Callable = normalize_file,
        pdf_opener: Callable = open_pdf,
    ):
        self.generator = generator
        self.language = language
        self.processing_delay = processing_delay
        self.generation_timeout = generation_timeout
        self._normalize = normalizer
        self._open_pdf = pdf_opener
        self.session = session if session is not None else Session(language=language)
        self.runtime = QuizRuntime(self.session)
        self._token = 0

    @property
    def stage(self) -> Stage:
        return self.session.stage

    # ---- internals ----
    def _require(self, action: str, *stages: Stage) -> None:
        if self.session.stage not in stages:
            raise InvalidTransition(action, self.session.stage.value)

    def _enter(self, stage: Stage) -> int:
        log.info("Stage %s -> %s", self.session.stage.value, stage.value)
        self.session.stage = stage
        self._token += 1
        return self._token

    def _supersede(self) -> int:
        """Invalidate outstanding work without changing stage."""
        self._token += 1
        return self._token

    def _is_stale(self, token: int, action: str) -> bool:
        if token != self._token:
            log.info("Discarding stale %s result (stage is now %s)", action, self.session.stage.value)
            return True
        return False

    def _clear_error(self) -> None:
        self.session.error = None

    def _fail(self, exc: QuizError, kind: str | None = None) -> None:
        log.warning("%s: %s", exc.kind, exc)
        self.session.error = SessionError(
            kind=kind or exc.kind,
            message=translate(self.session.language, exc.message_key),
        )

    def _has_material(self) -> bool:
        material = self.session.material
        if isinstance(material, TextMaterial):
            return bool(material.text.strip())
        return isinstance(material, ImageMaterial)

    async def _call_generator(self, *args) -> list:
        """Run the generator in a worker thread; its own errors become GenerationFailed."""
        try:
            return await asyncio.to_thread(self.generator, *args)
        except GenerationFailed:
            raise
        except Exception as exc:
            log.exception("Question generator raised")
            raise GenerationFailed(str(exc)) from exc

    def _extract_range(self, data: bytes, start_page: int, end_page: int) -> str:
        with self._open_pdf(data) as pdf:
            return extract_page_range(pdf, start_page, end_page)

    # ---- welcome / upload ----
    def start(self) -> Stage:
        self._require("start", Stage.WELCOME)
        self._clear_error()
        self._enter(Stage.UPLOAD)
        return self.stage

    async def load_file(
        self, file_name: str, data: bytes, content_type: str | None = None
    ) -> Stage:
        self._require("load_file", Stage.UPLOAD)
        self._clear_error()
        s = self.session
        s.clear_file()
        s.file_name = file_name
        s.file_data = data
        s.content_type = content_type or ""
        token = self._supersede()

        try:
            result = await asyncio.to_thread(self._normalize, file_name, data, content_type)
        except QuizError as exc:
            if self._is_stale(token, "load_file"):
                return self.stage
            s.clear_file()
            self._fail(exc)
            return self.stage
        except Exception as exc:
            log.exception("Unexpected error while reading %s", file_name)
            if self._is_stale(token, "load_file"):
                return self.stage
            s.clear_file()
            self._fail(ParseFailed(str(exc)))
            return self.stage

        if self._is_stale(token, "load_file"):
            return self.stage

        if isinstance(result, RequiresPageSelection):
            s.total_pages = result.total_pages
            s.start_page = 1
            s.end_page = result.total_pages
            self._enter(Stage.SELECT_PAGE_RANGE)
            return self.stage

        s.material = result
        return await self.analyze()

    def edit_text(self, text: str) -> None:
        self._require("edit_text", Stage.UPLOAD)
        if isinstance(self.session.material, ImageMaterial):
            raise ValueError("Text cannot be edited while an image is loaded")
        self._clear_error()
        if self.session.has_file:
            self.session.clear_file()
        self.session.material = TextMaterial(text)
        self._supersede()

    def reset_upload(self) -> None:
        self._require("reset_upload", Stage.UPLOAD)
        self._clear_error()
        self.session.clear_file()
        self._supersede()

    async def analyze(self) -> Stage:
        self._require("analyze", Stage.UPLOAD)
        self._clear_error()
        if not self._has_material():
            self._fail(NoMaterialProvided("No study material"))
            return self.stage

        token = self._enter(Stage.PROCESSING)
        await asyncio.sleep(self.processing_delay)
        if self._is_stale(token, "analyze"):
            return self.stage
        self._enter(Stage.SELECT_TYPE)
        return self.stage

    # ---- page range ----
    async def confirm_page_range(self, start_page: int, end_page: int) -> Stage:
        self._require("confirm_page_range", Stage.SELECT_PAGE_RANGE)
        self._clear_error()
        s = self.session
        data = s.file_data
        try:
            if data is None:
                raise InvalidPageRange("No paginated document loaded")
            validate_page_range(start_page, end_page, s.total_pages)
        except InvalidPageRange as exc:
            self._fail(exc)
            return self.stage

        s.start_page = start_page
        s.end_page = end_page
        token = self._enter(Stage.PROCESSING)
        try:
            text = await asyncio.to_thread(self._extract_range, data, start_page, end_page)
        except Exception as exc:
            if self._is_stale(token, "confirm_page_range"):
                return self.stage
            if not isinstance(exc, QuizError):
                log.exception("Unexpected error while extracting pages")
                exc = ParseFailed(str(exc))
            s.clear_file()
            self._fail(exc)
            self._enter(Stage.UPLOAD)
            return self.stage

        if self._is_stale(token, "confirm_page_range"):
            return self.stage
        s.material = TextMaterial(text)
        self._enter(Stage.SELECT_TYPE)
        return self.stage

    # ---- quiz setup ----
    def select_type(self, question_type: QuestionType | str) -> Stage:
        self._require("select_type", Stage.SELECT_TYPE)
        self._clear_error()
        self.session.question_type = QuestionType(question_type)
        self._enter(Stage.SELECT_COUNT)
        return self.stage

    def set_question_count(self, count: int) -> None:
        self._require("set_question_count", Stage.SELECT_COUNT)
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError("Question count must be an integer")
        if not MIN_QUESTION_COUNT <= count <= MAX_QUESTION_COUNT:
            raise ValueError(
                f"Question count must be between {MIN_QUESTION_COUNT} and {MAX_QUESTION_COUNT}"
            )
        self._clear_error()
        self.session.question_count = count

    async def generate(self) -> Stage:
        self._require("generate", Stage.SELECT_COUNT)
        self._clear_error()
        s = self.session
        if s.question_type is None:
            raise InvalidTransition("generate", "select_count without a question type")
        if not self._has_material():
            self._fail(NoMaterialProvided("No study material"))
            return self.stage

        material, question_type, count = s.material, s.question_type, s.question_count
        target_language = language_name(s.language)
        token = self._enter(Stage.GENERATING)
        error: QuizError | None = None
        try:
            questions = await asyncio.wait_for(
                self._call_generator(material, question_type, count, target_language),
                timeout=self.generation_timeout,
            )
            if not questions:
                raise GenerationFailed("Generator returned no questions")
        except asyncio.TimeoutError:
            error = GenerationTimeout(f"No response within {self.generation_timeout}s")
        except GenerationFailed as exc:
            error = exc

        if self._is_stale(token, "generate"):
            return self.stage
        if error is not None:
            # subtypes other than the timeout surface as a plain generation failure
            kind = error.kind if isinstance(error, GenerationTimeout) else GenerationFailed.kind
            self._fail(error, kind)
            self._enter(Stage.SELECT_COUNT)
            return self.stage

        s.replace_questions(questions)
        log.info("Generated %d question(s)", len(questions))
        self._enter(Stage.ANSWERING)
        return self.stage

    # ---- answering ----
    def select_answer(self, value: str) -> bool:
        self._require("select_answer", Stage.ANSWERING)
        self._clear_error()
        return self.runtime.select_answer(self.session.current_index, value)

    def check_answer(self) -> str | None:
        self._require("check_answer", Stage.ANSWERING)
        self._clear_error()
        return self.runtime.check_answer(self.session.current_index)

    def next_question(self) -> Stage:
        self._require("next_question", Stage.ANSWERING)
        self._clear_error()
        if self.runtime.advance() is Stage.COMPLETED:
            self._supersede()
        return self.stage

    def summary(self) -> dict[str, int]:
        return self.runtime.summary()

    # ---- completion ----
    def generate_more(self) -> Stage:
        self._require("generate_more", Stage.COMPLETED)
        self._clear_error()
        self.session.clear_quiz()
        self._enter(Stage.SELECT_TYPE)
        return self.stage

    def return_to_start(self) -> Stage:
        self._require("return_to_start", Stage.COMPLETED)
        self._clear_error()
        self.session.clear_quiz()
        self._enter(Stage.UPLOAD)
        return self.stage

    # ---- navigation ----
    def back(self) -> Stage:
        stage = self.session.stage
        target = BACK_TARGETS.get(stage)
        if target is None:
            log.debug("Back ignored in stage %s", stage.value)
            return stage

        self._clear_error()
        if stage is Stage.SELECT_PAGE_RANGE:
            self.session.clear_file()
        elif stage is Stage.ANSWERING:
            self.session.replace_questions([])
        self._enter(target)
        return self.stage

    def dismiss_error(self) -> None:
        self._clear_error()

    def set_language(self, language: str) -> None:
        if not is_supported(language):
            raise ValueError(f"Unsupported language: {language}")
        self.session.language = language

    def restart(self) -> Stage:
        language = self.session.language
        self.session = Session(language=language)
        self.runtime = QuizRuntime(self.session)
        self._supersede()
        log.info("Session restarted")
        return self.stage
