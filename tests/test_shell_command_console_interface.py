import io

import pytest

from term_ai import shell_command_console_interface as console
from term_ai import shell_command_pipeline_builder
from term_ai.llm.client import ChatReply
from conftest import StubLLMClient, StubSearchProvider, tool_call_reply


@pytest.fixture
def stub_llm(monkeypatch, clean_environment):
    llm = StubLLMClient([ChatReply(content="brew install redis")], generate_text="brew install redis")

    def _build(settings, llm_client=None, search_provider=None):
        return shell_command_pipeline_builder.build_shell_command_pipeline(
            settings, llm_client=llm, search_provider=search_provider)

    monkeypatch.setattr(console, "build_shell_command_pipeline", _build)
    return llm


def _main(argv, stdin_text=""):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = console.main(argv, stdin=io.StringIO(stdin_text), stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_prompt_from_stdin(stub_llm):
    code, out, err = _main([], stdin_text="install redis\n")

    assert code == 0
    assert out == "brew install redis\n"
    assert err == ""
    assert stub_llm.generate_calls[0].endswith("User request:\ninstall redis")


def test_argument_wins_over_stdin(stub_llm):
    code, _, _ = _main(["install redis"], stdin_text="something else")

    assert code == 0
    assert stub_llm.generate_calls[0].endswith("User request:\ninstall redis")


def test_empty_stdin_is_an_error(stub_llm):
    code, out, err = _main([], stdin_text="   \n")

    assert code == 1
    assert out == ""
    assert err == "Error: No prompt provided via argument or stdin\n"
    assert stub_llm.total_calls == 0


def test_brave_without_key_is_one_line_error(stub_llm):
    code, out, err = _main(["-w", "--search-provider", "brave", "latest node"])

    assert code == 1
    assert out == ""
    assert err.startswith("Error: credential required")
    assert err.count("\n") == 1
    assert stub_llm.total_calls == 0


def test_unknown_provider_is_one_line_error(stub_llm):
    code, _, err = _main(["--ws", "--search-provider", "bing", "x"])

    assert code == 1
    assert err.startswith("Error: unknown provider: bing")


def test_invalid_max_results(stub_llm):
    code, _, err = _main(["--max-results", "0", "x"])

    assert code == 1
    assert "max_results must be a positive integer" in err


def test_websearch_with_verbose(monkeypatch, stub_llm, rust_results):
    llm = StubLLMClient([tool_call_reply("rust latest stable version"), ChatReply(content="1.93.0")])
    provider = StubSearchProvider(results=rust_results)

    def _build(settings, llm_client=None, search_provider=None):
        return shell_command_pipeline_builder.build_shell_command_pipeline(
            settings, llm_client=llm, search_provider=provider)

    monkeypatch.setattr(console, "build_shell_command_pipeline", _build)

    code, out, _ = _main(["-w", "-v", "latest rust version"])

    assert code == 0
    assert out.startswith("Searched for: rust latest stable version\nSources:\n")
    assert out.endswith("\n1.93.0\n")


def test_environment_model_is_used(monkeypatch, stub_llm):
    captured = {}

    def _build(settings, llm_client=None, search_provider=None):
        captured["settings"] = settings
        return shell_command_pipeline_builder.build_shell_command_pipeline(settings, llm_client=stub_llm)

    monkeypatch.setattr(console, "build_shell_command_pipeline", _build)
    monkeypatch.setenv("TERM_AI_MODEL", "mistral")

    assert _main(["x"])[0] == 0
    assert captured["settings"].model == "mistral"

    _main(["-m", "phi3", "x"])
    assert captured["settings"].model == "phi3"


def test_parse_args_defaults_leave_settings_untouched():
    args = console.parse_args(["install redis"])

    assert args.prompt == "install redis"
    assert args.websearch is None
    assert args.verbose is None
    assert args.model is None
    assert console.parse_args(["--ws", "x"]).websearch is True


def test_undecodable_stdin_is_one_line_error(stub_llm):
    stdin = io.TextIOWrapper(io.BytesIO(b"\xff\xfe install redis"), encoding="utf-8")
    stdout, stderr = io.StringIO(), io.StringIO()

    code = console.main([], stdin=stdin, stdout=stdout, stderr=stderr)

    assert code == 1
    assert stdout.getvalue() == ""
    assert stderr.getvalue().startswith("Error: cannot read prompt from stdin:")
    assert stderr.getvalue().count("\n") == 1
    assert stub_llm.total_calls == 0
