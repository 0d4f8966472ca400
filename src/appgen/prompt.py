"""Build the instruction text shown in the "show prompt" debug view.

This mirrors what the generation service is asked to do, but it is not the
request body itself; the request carries query, HTML and feedback as
separate fields.
"""

SYSTEM_PREAMBLE = """You are an expert web developer. Produce a single, self-contained HTML file.
- Inline all CSS in a <style> tag and all JavaScript in a <script> tag.
- Do not reference external assets unless they are served from a public CDN.
- Return only the HTML document, starting with <!DOCTYPE html>."""


def construct_prompt(query: str, current_feedback: str, current_html: str) -> str:
    """Return the prompt for the given state.

    Pure function of its arguments: the same triple always yields the same
    string.
    """
    sections = [SYSTEM_PREAMBLE, f"Request:\n{query.strip()}"]

    if current_html:
        sections.append(f"Current HTML:\n```html\n{current_html}\n```")

    feedback = current_feedback.strip()
    if feedback:
        sections.append(f"Change to apply to the current HTML:\n{feedback}")

    return "\n\n".join(sections) + "\n"
