"""Exception types raised by splitmark."""


class SplitmarkError(Exception):
    """Base class for all splitmark errors."""


class RenderError(SplitmarkError):
    """The markdown rendering service could not produce a preview."""


class FrontMatterError(SplitmarkError):
    """A front matter block could not be built from the given fields."""


class UsageError(SplitmarkError):
    """The command line could not be parsed."""
