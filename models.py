from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

DEFAULT_QUESTION_COUNT = 5
MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 10
MULTIPLE_CHOICE_OPTIONS = 4


class Stage(str, enum.Enum):
    """Stages of the quiz session flow."""

    WELCOME = "welcome"
    UPLOAD = "upload"
    PROCESSING = "processing"
    SELECT_PAGE_RANGE = "select_page_range"
    SELECT_TYPE = "select_type"
    SELECT_COUNT = "select_count"
    GENERATING = "generating"
    ANSWERING = "answering"
    COMPLETED = "completed"


class QuestionType(str, enum.Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"


class MaterialKind(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass
class TextMaterial:
    text: str
    kind: MaterialKind = field(default=MaterialKind.TEXT, init=False)


@dataclass
class ImageMaterial:
    data: str  # base64, no data: prefix
    mime_type: str
    kind: MaterialKind = field(default=MaterialKind.IMAGE, init=False)


StudyMaterial = Union[TextMaterial, ImageMaterial]


@dataclass
class RequiresPageSelection:
    """Normalizer outcome for paginated documents: extraction waits for a page range."""

    total_pages: int


@dataclass
class MultipleChoiceQuestion:
    question: str
    options: List[str]
    correct_answer: str
    question_type: QuestionType = field(
        default=QuestionType.MULTIPLE_CHOICE, init=False
    )

    def __post_init__(self) -> None:
        if len(self.options) != MULTIPLE_CHOICE_OPTIONS:
            raise ValueError(
                f"Multiple-choice question needs {MULTIPLE_CHOICE_OPTIONS} options, "
                f"got {len(self.options)}"
            )
        if self.correct_answer not in self.options:
            raise ValueError("Correct answer is not one of the options")


@dataclass
class TrueFalseQuestion:
    question: str
    answer: bool
    question_type: QuestionType = field(default=QuestionType.TRUE_FALSE, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.answer, bool):
            raise ValueError("True/false answer must be a boolean")


Question = Union[MultipleChoiceQuestion, TrueFalseQuestion]


@dataclass
class SessionError:
    kind: str
    message: str


@dataclass
class Session:
    stage: Stage = Stage.WELCOME
    material: Optional[StudyMaterial] = None
    file_name: str = ""
    file_data: Optional[bytes] = None
    content_type: str = ""
    total_pages: int = 0
    start_page: int = 1
    end_page: int = 1
    question_type: Optional[QuestionType] = None
    question_count: int = DEFAULT_QUESTION_COUNT
    questions: List[Question] = field(default_factory=list)
    current_index: int = 0
    user_answers: Dict[int, str] = field(default_factory=dict)
    feedback: Dict[int, str] = field(default_factory=dict)
    answer_status: Dict[int, str] = field(default_factory=dict)  # "correct" | "incorrect"
    error: Optional[SessionError] = None
    language: str = "en"

    @property
    def has_file(self) -> bool:
        return self.file_data is not None

    def replace_questions(self, questions: List[Question]) -> None:
        self.questions = list(questions)
        self.current_index = 0
        self.user_answers.clear()
        self.feedback.clear()
        self.answer_status.clear()

    def clear_quiz(self) -> None:
        self.replace_questions([])
        self.question_type = None
        self.question_count = DEFAULT_QUESTION_COUNT

    def clear_file(self) -> None:
        self.material = None
        self.file_name = ""
        self.file_data = None
        self.content_type = ""
        self.total_pages = 0
        self.start_page = 1
        self.end_page = 1
