"""Fixed prompts for both operating modes.

The instructions are module constants assembled by functions that take no
configuration: nothing the user types can replace the system instruction,
only the ``User request`` slot of the single-shot prompt is interpolated.
"""

# ---------------------------------------------------------------------------
# Prompt sections
# ---------------------------------------------------------------------------

_ROLE_SECTION = "You are an expert macOS terminal and development environment engineer."

_CONSTRAINTS_SECTION = """\
Constraints:
- Respond ONLY with valid shell commands, one per line.
- Do not include explanations, comments, Markdown, or prose.
- Prefer Homebrew for package installation where appropriate.
- Avoid destructive operations (no rm -rf, no disk formatting, no sudo unless clearly necessary and safe)."""

_WEBSEARCH_GUIDANCE_SECTION = (
    "When you need current information (latest versions, recent releases, current documentation), "
    "use the web_search tool to find up-to-date information before responding."
)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_websearch_system_instruction() -> str:
    """System turn for the tool-calling conversation."""
    return f"{_ROLE_SECTION}\n\n{_CONSTRAINTS_SECTION}\n\n{_WEBSEARCH_GUIDANCE_SECTION}"


def build_single_shot_prompt(user_request: str) -> str:
    """Complete prompt for the single-shot generate endpoint."""
    return f"{_ROLE_SECTION}\n\n{_CONSTRAINTS_SECTION}\n\nUser request:\n{user_request}"
