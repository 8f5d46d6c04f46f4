"""Localized strings used by the session controller and the quiz runtime."""
from __future__ import annotations

DEFAULT_LANGUAGE = "en"

# Passed to the generator so questions come back in the user's language.
LANGUAGE_NAMES = {
    "en": "English",
    "ar": "Arabic",
    "zh": "Chinese",
    "ko": "Korean",
}

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "correct_feedback": "Correct!",
        "incorrect_feedback": "Incorrect. The correct answer is:",
        "true": "True",
        "false": "False",
        "error_generic": "Something went wrong. Please try again.",
        "error_unsupported_file": "Unsupported file type. Please upload a PDF, DOCX, TXT or image file.",
        "error_parsing_failed": "Failed to read the file. Please try another one.",
        "error_invalid_page_range": "Please enter a valid page range.",
        "error_no_text": "Please enter some text or upload a file first.",
        "error_generation_failed": "Failed to generate questions. Please try again.",
    },
    "ar": {
        "correct_feedback": "إجابة صحيحة!",
        "incorrect_feedback": "إجابة خاطئة. الإجابة الصحيحة هي:",
        "true": "صح",
        "false": "خطأ",
        "error_generic": "حدث خطأ ما. يرجى المحاولة مرة أخرى.",
        "error_unsupported_file": "نوع الملف غير مدعوم. يرجى رفع ملف PDF أو DOCX أو TXT أو صورة.",
        "error_parsing_failed": "تعذرت قراءة الملف. يرجى تجربة ملف آخر.",
        "error_invalid_page_range": "يرجى إدخال نطاق صفحات صالح.",
        "error_no_text": "يرجى إدخال نص أو رفع ملف أولاً.",
        "error_generation_failed": "فشل إنشاء الأسئلة. يرجى المحاولة مرة أخرى.",
    },
    "zh": {
        "correct_feedback": "回答正确！",
        "incorrect_feedback": "回答错误。正确答案是：",
        "true": "正确",
        "false": "错误",
        "error_generic": "出现问题，请重试。",
        "error_unsupported_file": "不支持的文件类型。请上传 PDF、DOCX、TXT 或图片文件。",
        "error_parsing_failed": "无法读取文件，请尝试其他文件。",
        "error_invalid_page_range": "请输入有效的页码范围。",
        "error_no_text": "请先输入文本或上传文件。",
        "error_generation_failed": "生成题目失败，请重试。",
    },
    "ko": {
        "correct_feedback": "정답입니다!",
        "incorrect_feedback": "오답입니다. 정답은:",
        "true": "참",
        "false": "거짓",
        "error_generic": "문제가 발생했습니다. 다시 시도해 주세요.",
        "error_unsupported_file": "지원하지 않는 파일 형식입니다. PDF, DOCX, TXT 또는 이미지 파일을 업로드하세요.",
        "error_parsing_failed": "파일을 읽지 못했습니다. 다른 파일을 시도해 주세요.",
        "error_invalid_page_range": "올바른 페이지 범위를 입력하세요.",
        "error_no_text": "먼저 텍스트를 입력하거나 파일을 업로드하세요.",
        "error_generation_failed": "문제 생성에 실패했습니다. 다시 시도해 주세요.",
    },
}


def is_supported(language: str) -> bool:
    return language in TRANSLATIONS


def translate(language: str, key: str) -> str:
    """Look up a string, falling back to English and then to the key itself."""
    table = TRANSLATIONS.get(language) or TRANSLATIONS[DEFAULT_LANGUAGE]
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)


def language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES[DEFAULT_LANGUAGE])
