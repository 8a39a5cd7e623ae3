"""School standards and subjects used to file and browse flashcard sets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, TypeVar


@dataclass(frozen=True)
class Option:
    value: str
    label: str


STANDARDS: tuple[Option, ...] = (
    Option("9th", "9th (SSC)"),
    Option("10th", "10th (SSC)"),
    Option("11th-sci", "11th Science (HSC)"),
    Option("12th-sci", "12th Science (HSC)"),
)

SSC_SUBJECTS: tuple[Option, ...] = (
    Option("english", "English"),
    Option("marathi", "Marathi"),
    Option("hindi", "Hindi"),
    Option("maths-1", "Mathematics 1 (Algebra)"),
    Option("maths-2", "Mathematics 2 (Geometry)"),
    Option("science-1", "Science 1"),
    Option("science-2", "Science 2"),
    Option("history-civics", "History & Civics"),
    Option("geography", "Geography"),
)

HSC_SUBJECTS: tuple[Option, ...] = (
    Option("english", "English"),
    Option("marathi", "Marathi"),
    Option("hindi", "Hindi"),
    Option("physics", "Physics"),
    Option("chemistry", "Chemistry"),
    Option("biology", "Biology"),
    Option("maths-1", "Mathematics 1"),
    Option("maths-2", "Mathematics 2"),
)

ALL_STANDARDS = "all"


def subject_options(standard: str) -> tuple[Option, ...]:
    if standard in ("9th", "10th"):
        return SSC_SUBJECTS
    if standard in ("11th-sci", "12th-sci"):
        return HSC_SUBJECTS
    return ()


def is_known_standard(standard: str) -> bool:
    return any(s.value == standard for s in STANDARDS)


def is_valid_subject(standard: str, subject: str) -> bool:
    return any(s.value == subject for s in subject_options(standard))


def standard_label(standard: str) -> str | None:
    return next((s.label for s in STANDARDS if s.value == standard), None)


def subject_label(standard: str, subject: str) -> str | None:
    return next((s.label for s in subject_options(standard) if s.value == subject), None)


class Catalogued(Protocol):
    title: str
    description: str
    created_by_name: str
    standard: str
    subject: str


T = TypeVar("T", bound=Catalogued)


@dataclass
class SubjectGroup:
    subject: str
    label: str
    sets: list


@dataclass
class StandardGroup:
    standard: str
    label: str
    subjects: list[SubjectGroup]


def group_sets(items: Sequence[T]) -> list[StandardGroup]:
    """Group sets by standard, then subject, in catalogue order.

    Empty groups are omitted, as are sets filed under a standard or subject
    the catalogue does not list.
    """
    groups: list[StandardGroup] = []
    for standard in STANDARDS:
        for_standard = [i for i in items if i.standard == standard.value]
        if not for_standard:
            continue
        subjects: list[SubjectGroup] = []
        for subject in subject_options(standard.value):
            for_subject = [i for i in for_standard if i.subject == subject.value]
            if for_subject:
                subjects.append(
                    SubjectGroup(subject=subject.value, label=subject.label, sets=for_subject)
                )
        if subjects:
            groups.append(
                StandardGroup(standard=standard.value, label=standard.label, subjects=subjects)
            )
    return groups
