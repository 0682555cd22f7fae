"""Title and body templates for follow-up pull requests."""

from __future__ import annotations

# Placeholders understood in title/body templates
PLACEHOLDERS = ('old_title', 'old_pull_request_id', 'target_branch')


def render_template(
    template: str,
    fallback: str | None,
    **values: object,
) -> str | None:
    """Render a title or body template.

    An empty template means "reuse the original", so fallback is
    returned untouched. Otherwise every `{name}` for a name in
    PLACEHOLDERS is replaced; any other braces are left as they are.

    Args:
        template: Configured template, possibly empty
        fallback: Value used when template is empty
        **values: Values for the placeholders

    Returns:
        Rendered text, or fallback when template is empty

    Examples:
        render_template("", "Fix bug") → "Fix bug"
        render_template("[1.x] {old_title}", "Fix bug",
                        old_title="Fix bug") → "[1.x] Fix bug"
    """
    if not template:
        return fallback

    rendered = template
    for name in PLACEHOLDERS:
        if name in values and values[name] is not None:
            rendered = rendered.replace(f'{{{name}}}', str(values[name]))
    return rendered
