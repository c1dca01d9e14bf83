import random

from alarms.challenge import Challenge, check_answer, generate_challenge, parse_answer


def test_generated_operands_stay_in_range():
    rng = random.Random(7)
    for _ in range(500):
        challenge = generate_challenge(rng)
        assert 1 <= challenge.left <= 10
        assert 1 <= challenge.right <= 10
        assert challenge.expected_answer == challenge.left * challenge.right
        assert challenge.prompt_text == f"{challenge.left} × {challenge.right} = ?"


def test_generator_covers_both_bounds():
    rng = random.Random(1)
    seen = set()
    for _ in range(2000):
        challenge = generate_challenge(rng)
        seen.add(challenge.left)
        seen.add(challenge.right)
    assert seen == set(range(1, 11))


def test_generate_without_rng_uses_module_random():
    challenge = generate_challenge()
    assert 1 <= challenge.expected_answer <= 100


def test_prompt_text_format():
    assert Challenge(7, 8).prompt_text == "7 × 8 = ?"
    assert Challenge(7, 8).expected_answer == 56


def test_check_answer_cases():
    assert check_answer("42", 42)
    assert not check_answer("", 42)
    assert not check_answer("abc", 42)
    assert not check_answer("41", 42)


def test_parse_answer_rejects_loose_integer_forms():
    assert parse_answer("+42") == 42
    assert parse_answer("-5") == -5
    assert parse_answer(" 42") is None
    assert parse_answer("4_2") is None
    assert parse_answer("42.0") is None
    assert parse_answer("٤٢") is None
