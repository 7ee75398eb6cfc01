import asyncio

import pytest

from openai_helper.actions import ActionDispatcher, build_action_table
from openai_helper.config import load_settings
from openai_helper.llm.types import ConfigurationError, TransportError
from openai_helper.models import SourceContext

from fakes import FakeHost, RecordingProvider


CODE = "function add(a,b){return a+b;}"


def _dispatcher(host, provider):
    return ActionDispatcher(host, provider, load_settings())


def test_ask_without_question_makes_no_request():
    for answer in (None, ""):
        host = FakeHost(source=SourceContext(CODE), answer=answer)
        provider = RecordingProvider()

        result = asyncio.run(_dispatcher(host, provider).ask_about_code())

        assert result is None
        assert len(provider.calls) == 0
        assert host.input_prompts == ["Enter your question about the code"]
        assert host.documents == [] and host.errors == [] and host.infos == []


def test_ask_end_to_end_displays_answer():
    host = FakeHost(source=SourceContext(CODE), answer="what does this do?")
    provider = RecordingProvider(reply="It adds two numbers.")

    result = asyncio.run(_dispatcher(host, provider).ask_about_code())

    assert result == "It adds two numbers."
    assert host.documents == ["It adds two numbers."]
    assert host.progress_titles == ["Querying OpenAI..."]
    prompt, params = provider.calls[0]
    assert prompt.index(CODE) < prompt.index("what does this do?")
    assert len(prompt) <= 20000
    assert params.model == "o3-mini"
    assert params.reasoning_effort == "medium"
    assert params.max_output_tokens == 5000


def test_flowchart_and_improvements_call_once_regardless_of_selection():
    for source in (SourceContext(CODE), SourceContext(CODE, selected_text="a+b")):
        for name in ("flowchart", "improvements"):
            host = FakeHost(source=source)
            provider = RecordingProvider()

            asyncio.run(_dispatcher(host, provider).run(name))

            assert len(provider.calls) == 1
            assert host.input_prompts == []
            assert host.documents == ["reply"]


def test_improvements_prompt_and_parameters():
    host = FakeHost(source=SourceContext("x" * 300000))
    provider = RecordingProvider()

    asyncio.run(_dispatcher(host, provider).analyze_improvements())

    prompt, params = provider.calls[0]
    assert prompt.endswith("\n\n...[truncated]")
    assert len(prompt) == 250000 + len("\n\n...[truncated]")
    assert params.reasoning_effort == "high"


def test_no_active_editor_shows_information_only():
    for name in ("ask", "flowchart", "improvements"):
        host = FakeHost(source=None, answer="question")
        provider = RecordingProvider()

        result = asyncio.run(_dispatcher(host, provider).run(name))

        assert result is None
        assert provider.calls == []
        assert host.infos == ["No active editor found."]
        assert host.input_prompts == []


def test_provider_errors_surface_as_single_error_message():
    cases = [
        ConfigurationError("OpenAI API key not set in environment variable OPENAI_API_KEY."),
        TransportError("OpenAI API error: unauthorized body", status_code=401, body="unauthorized body"),
    ]
    for exc in cases:
        host = FakeHost(source=SourceContext(CODE))
        provider = RecordingProvider(exc=exc)

        result = asyncio.run(_dispatcher(host, provider).generate_flowchart())

        assert result is None
        assert host.errors == [f"Error: {exc}"]
        assert host.documents == []


def test_concurrent_invocations_are_independent():
    host = FakeHost(source=SourceContext(CODE))
    provider = RecordingProvider()
    dispatcher = _dispatcher(host, provider)

    async def _both():
        return await asyncio.gather(dispatcher.generate_flowchart(), dispatcher.generate_flowchart())

    results = asyncio.run(_both())

    assert results == ["reply", "reply"]
    assert len(provider.calls) == 2
    assert host.documents == ["reply", "reply"]


def test_action_table_honours_settings_overrides():
    settings = load_settings()
    settings["actions"]["flowchart"]["max_chars"] = 30
    settings["actions"]["flowchart"]["token_field"] = "max_tokens"
    settings["actions"]["flowchart"]["reasoning_effort"] = None

    table = build_action_table(settings)

    assert table["flowchart"].max_chars == 30
    assert table["flowchart"].parameters.token_field == "max_tokens"
    assert table["flowchart"].parameters.reasoning_effort is None
    assert table["ask"].requires_question is True
    assert table["improvements"].requires_question is False


def test_commands_map_to_actions():
    host = FakeHost(source=SourceContext(CODE))
    provider = RecordingProvider()
    commands = _dispatcher(host, provider).commands()

    assert set(commands) == {
        "openai-helper.askQuestion",
        "openai-helper.getFlowchart",
        "openai-helper.analyzeImprovements",
    }
    asyncio.run(commands["openai-helper.getFlowchart"]())
    assert "high-level flowchart" in provider.calls[0][0]


def test_configured_template_with_braces_reaches_provider():
    settings = load_settings()
    settings["actions"]["flowchart"]["template"] = "Return JSON like {a: 1}"
    host = FakeHost(source=SourceContext(CODE))
    provider = RecordingProvider()

    asyncio.run(ActionDispatcher(host, provider, settings).generate_flowchart())

    assert provider.calls[0][0].endswith("Return JSON like {a: 1}")
    assert host.errors == []


def test_missing_or_invalid_max_chars_is_configuration_error():
    for bad in (None, "lots", 0):
        settings = load_settings()
        if bad is None:
            del settings["actions"]["ask"]["max_chars"]
        else:
            settings["actions"]["ask"]["max_chars"] = bad
        with pytest.raises(ConfigurationError):
            build_action_table(settings)


def test_prepare_prompt_uses_action_template_and_limit():
    dispatcher = _dispatcher(FakeHost(), RecordingProvider())
    ask = dispatcher.actions["ask"]

    prompt = dispatcher.prepare_prompt(ask, SourceContext(CODE, selected_text="a+b"), "why?")

    assert prompt.startswith("I have the following code:")
    assert prompt.endswith("My question: why?")
    assert len(prompt) <= ask.max_chars
