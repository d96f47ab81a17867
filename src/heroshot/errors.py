from __future__ import annotations


class HeroShotError(Exception):
    """Base class for failures the editor reports back to the user."""


class MissingCredentialError(HeroShotError):
    def __init__(self, message: str = "Set an API key before generating.") -> None:
        super().__init__(message)


class GenerationError(HeroShotError):
    """The provider call failed (network, auth, quota, refusal)."""


class NoImageGeneratedError(GenerationError):
    def __init__(self, message: str = "No image generated.") -> None:
        super().__init__(message)


class GenerationBusyError(HeroShotError):
    def __init__(self, message: str = "A generation is already in progress.") -> None:
        super().__init__(message)


class ExportError(HeroShotError):
    """Rasterizing or encoding the composite failed; nothing was produced."""
