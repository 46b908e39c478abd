# core/errors.py


class LinerNotesError(Exception):
    """Base error; str(err) is always safe to show to the user."""


class PlayerError(LinerNotesError):
    pass


class TrackResolutionError(LinerNotesError):
    pass


class CompletionError(LinerNotesError):
    pass
