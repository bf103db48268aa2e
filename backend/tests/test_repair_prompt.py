from app.services.repair_prompt import build_repair_prompt


def test_errors_are_listed_verbatim_before_instructions() -> None:
    prompt = build_repair_prompt(["Weeks array is empty", "6 of 10 days missing session_type"])

    lines = prompt.splitlines()
    assert lines[0] == "The plan you generated had these issues:"
    assert lines[1] == "- Weeks array is empty"
    assert lines[2] == "- 6 of 10 days missing session_type"
    assert "Return ONLY valid JSON" in prompt
    assert "session_type, title, duration_minutes, structure, cue" in prompt


def test_prompt_is_deterministic() -> None:
    errors = ["Missing weeks array"]

    assert build_repair_prompt(errors) == build_repair_prompt(list(errors))
