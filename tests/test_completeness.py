"""Unit tests for the completeness gate."""

from exercises.answers import (
    ChoiceAnswer,
    DialogueAnswer,
    SlotsAnswer,
    WordOrderAnswer,
    initialize_answers,
)
from exercises.completeness import is_answer_complete, is_complete


class TestIsAnswerComplete:
    """Per-variant completeness rules."""

    def test_single_requires_choice(self, single_blank):
        assert not is_answer_complete(single_blank, ChoiceAnswer())
        assert not is_answer_complete(single_blank, ChoiceAnswer(choice=""))
        assert is_answer_complete(single_blank, ChoiceAnswer(choice="ist"))

    def test_image_requires_choice(self, image):
        assert not is_answer_complete(image, ChoiceAnswer())
        assert is_answer_complete(image, ChoiceAnswer(choice="der Mann"))

    def test_double_requires_both_slots(self, double_blank):
        assert not is_answer_complete(double_blank, SlotsAnswer(slots=("bin", None)))
        assert not is_answer_complete(double_blank, SlotsAnswer(slots=(None, "Frau")))
        assert is_answer_complete(double_blank, SlotsAnswer(slots=("bist", "Mann")))

    def test_triple_requires_all_slots(self, triple_blank):
        assert not is_answer_complete(
            triple_blank, SlotsAnswer(slots=("Wie", "komme", None))
        )
        assert is_answer_complete(
            triple_blank, SlotsAnswer(slots=("Wo", "kommst", "Deutsch"))
        )

    def test_dialogue_requires_every_user_turn(self, dialogue):
        assert not is_answer_complete(dialogue, DialogueAnswer(slots=("Ja, gern.", None)))
        assert is_answer_complete(dialogue, DialogueAnswer(slots=("Ja, gern.", "Ja, gern.")))

    def test_scramble_empty_is_incomplete(self, scramble):
        assert not is_answer_complete(scramble, WordOrderAnswer())

    def test_scramble_complete_when_all_placed(self, scramble):
        partial = WordOrderAnswer(words=("Ich", "gehe", "nach"))
        assert not is_answer_complete(scramble, partial)
        full = WordOrderAnswer(words=("Ich", "gehe", "nach", "Hause"))
        assert is_answer_complete(scramble, full)

    def test_scramble_complete_regardless_of_order(self, scramble):
        wrong_order = WordOrderAnswer(words=("Ich", "nach", "gehe", "Hause"))
        assert is_answer_complete(scramble, wrong_order)

    def test_wrong_answer_shape_is_incomplete(self, double_blank):
        assert not is_answer_complete(double_blank, ChoiceAnswer(choice="bin"))

    def test_missing_answer_is_incomplete(self, single_blank):
        assert not is_answer_complete(single_blank, None)


class TestIsComplete:
    """Set-level gate."""

    def test_empty_set_is_incomplete(self):
        assert not is_complete([], [])

    def test_fresh_answers_are_incomplete(self, all_exercises):
        assert not is_complete(all_exercises, initialize_answers(all_exercises))

    def test_all_complete(self, single_blank, double_blank):
        answers = [ChoiceAnswer(choice="ist"), SlotsAnswer(slots=("bin", "Mann"))]
        assert is_complete([single_blank, double_blank], answers)

    def test_one_incomplete_blocks_set(self, single_blank, double_blank):
        answers = [ChoiceAnswer(choice="ist"), SlotsAnswer(slots=("bin", None))]
        assert not is_complete([single_blank, double_blank], answers)

    def test_answer_count_mismatch(self, single_blank, double_blank):
        assert not is_complete([single_blank, double_blank], [ChoiceAnswer(choice="bin")])
