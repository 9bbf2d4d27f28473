"""
Failure taxonomy for lesson generation.

Every error carries a ``message`` that is shown to the user as-is.
"""

INVALID_WORD_MESSAGE = "Por favor, introduce una palabra en japonés."
UNKNOWN_ERROR_MESSAGE = "Ocurrió un error desconocido."
TRANSPORT_FALLBACK_MESSAGE = (
    "El servicio de IA no está disponible en este momento. "
    "Inténtalo de nuevo en unos momentos."
)


class LessonError(Exception):
    """Base class for every failure the user can see."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(LessonError):
    """Blank word, rejected before any network call."""

    def __init__(self, message: str = INVALID_WORD_MESSAGE):
        super().__init__(message)


class LessonParseError(LessonError):
    """The model reply does not follow the lesson/prompts layout."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class SeparatorNotFoundError(LessonParseError):
    def __init__(self, raw: str):
        super().__init__(
            "No se pudo encontrar el separador de prompts en la respuesta "
            "de la IA. Respuesta: " + raw,
            raw,
        )


class EmptyLessonError(LessonParseError):
    def __init__(self, raw: str):
        super().__init__(
            "La respuesta de la IA no contiene ninguna lección. Respuesta: " + raw,
            raw,
        )


class TransportError(LessonError):
    """Network, auth, quota or malformed payload from the text service."""

    def __init__(self, message: str = ""):
        super().__init__(message or TRANSPORT_FALLBACK_MESSAGE)
