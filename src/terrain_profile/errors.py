"""Error types raised by the profile pipeline."""


class InvalidArgument(ValueError):
    """Malformed request to a geometry function (bad count, bad coordinate)."""


class EmptyInput(ValueError):
    """A summary or chart was requested for an empty profile."""


class LookupFailure(Exception):
    """The elevation or search service failed or returned an unusable body."""


class ResultMismatch(LookupFailure):
    """The elevation service answered with a different number of results than requested."""
