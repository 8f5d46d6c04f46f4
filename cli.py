import argparse
import json
import logging
import mimetypes
from pathlib import Path

from core.errors import QuizError
from core.logging_setup import setup_console_logging
from material_extract import normalize_file
from models import QuestionType, RequiresPageSelection, StudyMaterial, TextMaterial
from page_extract import extract_page_range, open_pdf
from question_generator import GeminiQuestionGenerator
from serialization import material_to_payload, questions_to_payload
from translations import LANGUAGE_NAMES, language_name

setup_console_logging()
log = logging.getLogger("cli")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract study material from a document and optionally generate a quiz"
    )
    parser.add_argument("file", type=Path, help="Path to .pdf, .docx, .txt or image file")
    parser.add_argument("--start", type=int, default=1, help="First PDF page (1-based)")
    parser.add_argument("--end", type=int, default=None, help="Last PDF page (default: last)")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result as JSON instead of printing it",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate questions with Gemini (needs GEMINI_API_KEY)",
    )
    parser.add_argument(
        "--type",
        choices=[t.value for t in QuestionType],
        default=QuestionType.MULTIPLE_CHOICE.value,
    )
    parser.add_argument("--count", type=int, default=5, choices=range(1, 11), metavar="1-10")
    parser.add_argument("--language", choices=sorted(LANGUAGE_NAMES), default="en")
    return parser.parse_args()


def load_material(path: Path, start: int, end: int | None) -> StudyMaterial:
    data = path.read_bytes()
    content_type, _ = mimetypes.guess_type(path.name)
    result = normalize_file(path.name, data, content_type)
    if isinstance(result, RequiresPageSelection):
        end = end or result.total_pages
        log.info("PDF has %d page(s); extracting %d-%d", result.total_pages, start, end)
        with open_pdf(data) as pdf:
            return TextMaterial(extract_page_range(pdf, start, end))
    return result


def main() -> None:
    args = parse_args()
    try:
        material = load_material(args.file, args.start, args.end)
        payload: dict[str, object] = {
            "source": args.file.name,
            "material": material_to_payload(material),
        }
        if args.generate:
            generator = GeminiQuestionGenerator()
            questions = generator(
                material, QuestionType(args.type), args.count, language_name(args.language)
            )
            payload["questions"] = questions_to_payload(questions)
    except QuizError as exc:
        log.error("%s: %s", exc.kind, exc)
        raise SystemExit(1) from exc

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json_dump(payload), encoding="utf-8")
        print(f"Saved to {args.output}")
    elif isinstance(material, TextMaterial) and not args.generate:
        print(material.text)
    else:
        print(json_dump(payload))


def json_dump(payload: dict[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


if __name__ == "__main__":
    main()
