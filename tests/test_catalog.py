from dataclasses import dataclass

from app.modules.flashcards.catalog import (
    group_sets,
    is_known_standard,
    is_valid_subject,
    standard_label,
    subject_label,
)


@dataclass
class FakeSet:
    title: str
    standard: str
    subject: str
    description: str = ""
    created_by_name: str = ""


def test_subjects_belong_to_standard():
    assert is_known_standard("10th")
    assert not is_known_standard("8th")
    assert is_valid_subject("9th", "geography")
    assert not is_valid_subject("9th", "physics")
    assert is_valid_subject("12th-sci", "physics")
    assert not is_valid_subject("12th-sci", "history-civics")


def test_labels():
    assert standard_label("11th-sci") == "11th Science (HSC)"
    assert subject_label("9th", "maths-1") == "Mathematics 1 (Algebra)"
    assert subject_label("11th-sci", "maths-1") == "Mathematics 1"
    assert standard_label("nope") is None



def test_group_sets_in_catalogue_order():
    sets = [
        FakeSet("Optics", "12th-sci", "physics"),
        FakeSet("Algebra", "9th", "maths-1"),
        FakeSet("Poems", "9th", "english"),
        FakeSet("Stray", "9th", "physics"),
    ]
    groups = group_sets(sets)

    assert [g.standard for g in groups] == ["9th", "12th-sci"]
    assert [sg.subject for sg in groups[0].subjects] == ["english", "maths-1"]
    assert groups[1].subjects[0].sets[0].title == "Optics"


def test_group_sets_empty():
    assert group_sets([]) == []
