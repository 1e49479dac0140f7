"""User-facing message catalogue."""

from __future__ import annotations

MESSAGES: dict[str, str] = {
    "rate_limited": "You've performed this action too many times. Please wait before trying again.",
    "time_must_be_provided": "Time must be provided for all reminders.",
    "invalid_target": "A bookmark must reference a post or a topic.",
    "invalid_parameters": "Invalid parameters: {param}.",
    "name_too_long": "The bookmark name cannot be longer than {max_length} characters.",
    "already_bookmarked": "You've already bookmarked this post.",
    "already_bookmarked_topic": "You've already bookmarked this topic.",
    "too_many": (
        "Sorry, you cannot bookmark more than {limit} posts, visit "
        "{user_bookmarks_url} to remove bookmarks."
    ),
    "not_found": "The requested URL or resource could not be found.",
    "invalid_access": "You are not permitted to view the requested resource.",
    "internal": "An unexpected error occurred. Please try again later.",
}


def t(key: str, **params: object) -> str:
    """Look up a message and interpolate ``params`` into it.

    Raises:
        KeyError: If ``key`` is not in the catalogue.
    """

    template = MESSAGES[key]
    return template.format(**params) if params else template
