"""Tests for prompt construction."""

from appgen.prompt import SYSTEM_PREAMBLE, construct_prompt


def test_same_input_same_output():
    args = ("a todo list", "add dark mode", "<ul></ul>")
    assert construct_prompt(*args) == construct_prompt(*args)


def test_query_only():
    result = construct_prompt("a red button", "", "")
    assert result.startswith(SYSTEM_PREAMBLE)
    assert "Request:\na red button" in result
    assert "Current HTML" not in result
    assert "Change to apply" not in result


def test_includes_current_html_and_feedback():
    result = construct_prompt("a red button", "  make it blue ", "<button>Go</button>")
    assert "```html\n<button>Go</button>\n```" in result
    assert "Change to apply to the current HTML:\nmake it blue\n" in result
    assert result.index("Current HTML") < result.index("Change to apply")


def test_blank_feedback_is_omitted():
    result = construct_prompt("q", "   ", "<p></p>")
    assert "Change to apply" not in result


def test_depends_only_on_arguments():
    first = construct_prompt("q", "f", "<p></p>")
    construct_prompt("other", "stuff", "<div></div>")
    assert construct_prompt("q", "f", "<p></p>") == first
