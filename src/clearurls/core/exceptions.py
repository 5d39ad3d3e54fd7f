class ClearUrlsError(Exception):
    pass

# Rules errors
class RulesError(ClearUrlsError):
    pass

class DocumentParseError(RulesError):
    """Rules document is not valid JSON or doesn't have the expected shape."""
    pass

class PatternCompileError(RulesError):
    """A pattern in the rules document is not a valid regular expression."""

    def __init__(self, provider: str, field: str, pattern: str, reason: str):
        self.provider = provider
        self.field = field
        self.pattern = pattern
        super().__init__(
            f"invalid regex {pattern!r} in '{field}' of provider '{provider}': {reason}"
        )

class RulesFileError(RulesError):
    pass

class ConfigError(ClearUrlsError):
    pass

# Cleaning errors
class CleaningError(ClearUrlsError):
    pass

class InvalidUrlError(CleaningError):
    pass

class RedirectionLoopError(CleaningError):
    """Redirection chain is cyclic or deeper than allowed."""
    pass

class RedirectionHasNoCapturingGroupError(CleaningError):
    """A redirection regex matched but doesn't capture the target."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"redirection regex {pattern} has no capture group")

class PercentDecodeError(CleaningError):
    pass

class TextCleaningError(CleaningError):
    """One or more links found in a text could not be cleaned."""

    def __init__(self, errors: list[CleaningError]):
        self.errors = errors
        summary = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} link(s) could not be cleaned: {summary}")
