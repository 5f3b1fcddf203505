from term_ai.agent.prompt_builder import build_single_shot_prompt, build_websearch_system_instruction


def test_single_shot_prompt_includes_system_instructions():
    prompt = build_single_shot_prompt("install rust")

    assert prompt.startswith("You are an expert macOS terminal")
    assert "Respond ONLY with valid shell commands, one per line." in prompt
    assert "Do not include explanations, comments, Markdown, or prose" in prompt
    assert "Homebrew" in prompt
    assert "no rm -rf" in prompt
    assert prompt.endswith("User request:\ninstall rust")


def test_single_shot_prompt_only_interpolates_the_request():
    first = build_single_shot_prompt("setup zsh")
    second = build_single_shot_prompt("install node")

    assert "setup zsh" in first and "setup zsh" not in second
    assert first == build_single_shot_prompt("setup zsh")


def test_websearch_instruction_mentions_tool():
    instruction = build_websearch_system_instruction()

    assert "expert macOS terminal" in instruction
    assert "web_search tool" in instruction
    assert instruction == build_websearch_system_instruction()
