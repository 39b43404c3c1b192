"""
Lesson validation: invariant and quality checks on a canonical lesson.

Runs every check against a :class:`LessonContent` deterministically.
Never raises: always returns a ValidationReport. A report with any
``failed`` check means the lesson must not reach a consumer.
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable

from asman.constants import GLOBAL_REGIONS
from asman.schemas.lesson import LessonContent

logger = logging.getLogger(__name__)

EXPECTED_QUESTION_COUNT = 3
MIN_GLOBAL_REGIONS = 4


# ---------------------------------------------------------------------------
# Data classes for validation results
# ---------------------------------------------------------------------------

@dataclass
class CheckResult:
    name: str
    status: str  # "passed", "failed", "warning"
    details: dict[str, Any] = field(default_factory=dict)
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationReport:
    passed: bool = True
    checks: list[CheckResult] = field(default_factory=list)
    warnings: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    overall_score: float = 1.0

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if check.status == "failed":
            self.passed = False
            self.errors.append({
                "type": check.name,
                "message": check.message,
                "severity": "high",
            })
        elif check.status == "warning":
            self.warnings.append({
                "type": check.name,
                "message": check.message,
                "severity": "low",
            })

    def compute_score(self) -> None:
        if not self.checks:
            self.overall_score = 0.0
            return
        total = len(self.checks)
        passed = sum(1 for c in self.checks if c.status == "passed")
        warned = sum(1 for c in self.checks if c.status == "warning")
        self.overall_score = round((passed + warned * 0.5) / total, 2)

    def failure_summary(self) -> str:
        return "; ".join(e["message"] for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "checks": [c.to_dict() for c in self.checks],
            "warnings": self.warnings,
            "errors": self.errors,
            "overall_score": self.overall_score,
        }


# ---------------------------------------------------------------------------
# Helper utilities
# ---------------------------------------------------------------------------

def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def regions_mentioned(text: str) -> list[str]:
    """Return the global regions named in *text*, in catalog order."""
    return [
        region for region in GLOBAL_REGIONS
        if re.search(rf"\b{re.escape(region)}\b", text)
    ]


# ---------------------------------------------------------------------------
# LessonValidator: main class
# ---------------------------------------------------------------------------

class LessonValidator:
    """
    Validates a canonical lesson.

    Checks:
      a) question_count      (not exactly 3 → WARNING)
      b) answer_keys
      c) text_fields
      d) glossary_terms      (unmatchable terms → WARNING)
      e) global_coverage     (soft-check → WARNING)
    """

    def validate(self, lesson: LessonContent) -> ValidationReport:
        """
        Run all checks and return a ValidationReport.
        Never raises: all exceptions caught and reported.
        """
        report = ValidationReport()

        checks: list[tuple[str, Callable[[LessonContent], CheckResult]]] = [
            ("question_count", self.question_count_check),
            ("answer_keys", self.answer_keys_check),
            ("text_fields", self.text_fields_check),
            ("glossary_terms", self.glossary_terms_check),
            ("global_coverage", self.global_coverage_check),
        ]

        for check_name, check_fn in checks:
            try:
                report.add_check(check_fn(lesson))
            except Exception as exc:
                logger.error("Validation check '%s' raised: %s", check_name, exc)
                report.add_check(CheckResult(
                    name=check_name,
                    status="failed",
                    details={"error": str(exc)},
                    message=f"Internal error in {check_name}: {exc}",
                ))

        report.compute_score()
        return report

    # ------------------------------------------------------------------
    # CHECK a) Question count
    # ------------------------------------------------------------------

    def question_count_check(self, lesson: LessonContent) -> CheckResult:
        count = len(lesson.questions)
        details = {"count": count, "expected": EXPECTED_QUESTION_COUNT}
        if count == 0:
            return CheckResult(
                name="question_count",
                status="failed",
                details=details,
                message="Lesson has no quiz questions.",
            )
        if count != EXPECTED_QUESTION_COUNT:
            return CheckResult(
                name="question_count",
                status="warning",
                details=details,
                message=f"Lesson has {count} questions, expected {EXPECTED_QUESTION_COUNT}.",
            )
        return CheckResult(name="question_count", status="passed", details=details)

    # ------------------------------------------------------------------
    # CHECK b) Answer keys
    # ------------------------------------------------------------------

    def answer_keys_check(self, lesson: LessonContent) -> CheckResult:
        """Every question needs ≥ 2 non-blank options and an in-range answer."""
        issues: list[str] = []
        for i, q in enumerate(lesson.questions, start=1):
            if _is_blank(q.question):
                issues.append(f"Q{i} has no question text")
            if len(q.options) < 2:
                issues.append(f"Q{i} has {len(q.options)} option(s)")
            if any(_is_blank(opt) for opt in q.options):
                issues.append(f"Q{i} has a blank option")
            if not 0 <= q.correct < len(q.options):
                issues.append(f"Q{i} correct index {q.correct} out of range")

        details = {"questions_checked": len(lesson.questions), "issues": issues}
        if issues:
            return CheckResult(
                name="answer_keys",
                status="failed",
                details=details,
                message="Invalid quiz: " + ", ".join(issues) + ".",
            )
        return CheckResult(name="answer_keys", status="passed", details=details)

    # ------------------------------------------------------------------
    # CHECK c) Text fields
    # ------------------------------------------------------------------

    def text_fields_check(self, lesson: LessonContent) -> CheckResult:
        empty = [
            name
            for name, value in (
                ("explanation", lesson.explanation),
                ("activity", lesson.activity),
                ("globalMethod", lesson.global_method),
            )
            if _is_blank(value)
        ]
        if empty:
            return CheckResult(
                name="text_fields",
                status="failed",
                details={"empty_fields": empty},
                message=f"Empty lesson field(s): {', '.join(empty)}.",
            )
        return CheckResult(name="text_fields", status="passed")

    # ------------------------------------------------------------------
    # CHECK d) Glossary terms
    # ------------------------------------------------------------------

    def glossary_terms_check(self, lesson: LessonContent) -> CheckResult:
        """Blank glossary entries fail; terms that cannot match as whole words warn."""
        blank = [
            english for english, hindi in lesson.hindi_translation.items()
            if _is_blank(english) or _is_blank(hindi)
        ]
        if blank:
            return CheckResult(
                name="glossary_terms",
                status="failed",
                details={"blank_entries": blank},
                message=f"{len(blank)} glossary entr(ies) have a blank term.",
            )

        # \b only anchors next to word characters
        unmatchable = [
            english for english in lesson.hindi_translation
            if not re.match(r"\w", english.strip()) or not re.search(r"\w$", english.strip())
        ]
        details = {"terms": len(lesson.hindi_translation), "unmatchable": unmatchable}
        if unmatchable:
            return CheckResult(
                name="glossary_terms",
                status="warning",
                details=details,
                message=f"Glossary terms never match as whole words: {', '.join(unmatchable)}.",
            )
        return CheckResult(name="glossary_terms", status="passed", details=details)

    # ------------------------------------------------------------------
    # CHECK e) Global coverage
    # ------------------------------------------------------------------

    def global_coverage_check(self, lesson: LessonContent) -> CheckResult:
        if not lesson.is_global_version:
            return CheckResult(
                name="global_coverage",
                status="passed",
                details={"applicable": False},
            )

        found = regions_mentioned(lesson.explanation)
        details = {"regions_found": found, "min_required": MIN_GLOBAL_REGIONS}
        if len(found) < MIN_GLOBAL_REGIONS:
            return CheckResult(
                name="global_coverage",
                status="warning",
                details=details,
                message=(
                    f"Global lesson names {len(found)} of the reference regions; "
                    f"at least {MIN_GLOBAL_REGIONS} expected."
                ),
            )
        return CheckResult(name="global_coverage", status="passed", details=details)
