"""Shared constants: matcher states and request-context keys."""

from enum import IntEnum

PROXIES = ""


class MatchState(IntEnum):
    """Outcome of feeding text to a matcher."""

    DEFAULT = 0
    MATCHING = 1
    MATCHED = 2


GIN_COMPLETION = "__completion__"
GIN_GENERATION = "__generation__"
GIN_MATCHERS = "__matchers__"
GIN_COMPLETION_USAGE = "__completion-usage__"
GIN_DEBUGGER = "__debug__"
GIN_ECHO = "__echo__"
GIN_TOOL = "__tool__"
GIN_CLOSE = "__close__"
GIN_CHAR_SEQUENCES = "__char_sequences__"
GIN_CANCEL_FUNC = "__cancelFunc__"
GIN_CLAUDE_MESSAGES = "__claude_messages__"