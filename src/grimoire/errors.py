"""Exception hierarchy for Gaslight & Grimoire.

Missing references at runtime are NOT errors: conditions evaluate false and
effects are skipped. These exceptions cover content integrity, caller misuse
of state machines, and save data the engine cannot safely interpret.
"""


class GrimoireError(Exception):
    """Base class for all engine errors."""


class ContentLoadError(GrimoireError):
    """A case directory is missing a file or contains unparsable JSON."""


class ContentValidationError(GrimoireError):
    """Case content failed validation; carries the aggregated error list."""

    def __init__(self, case_id: str, errors: list[str]):
        self.case_id = case_id
        self.errors = list(errors)
        summary = f"Case '{case_id}' failed validation with {len(self.errors)} error(s)"
        if self.errors:
            summary += ":\n  " + "\n  ".join(self.errors)
        super().__init__(summary)


class SceneNotFoundError(GrimoireError):
    """A scene id is not present in the loaded case."""


class DeductionError(GrimoireError):
    """A deduction was requested from fewer than two revealed clues."""


class InvalidTransitionError(GrimoireError):
    """A clue status change is not allowed by the clue lifecycle."""


class EncounterCompleteError(GrimoireError):
    """A choice was submitted to an encounter that has already finished."""


class UnsupportedSaveVersionError(GrimoireError):
    """A save file has a schema version this engine cannot migrate."""

    def __init__(self, version: int, current: int):
        self.version = version
        self.current = current
        super().__init__(
            f"Save version {version} is not supported (current version is {current})"
        )
