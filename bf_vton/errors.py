"""Error taxonomy for the try-on pipeline."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of user-facing failure kinds."""
    MISSING_CREDENTIAL = "MissingCredential"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    SAFETY_REJECTED = "SafetyRejected"
    EMPTY_RESULT = "EmptyResult"
    TRANSIENT_PROVIDER_FAULT = "TransientProviderFault"
    UNKNOWN = "Unknown"


USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MISSING_CREDENTIAL: "API_KEY fehlt in der Umgebung.",
    ErrorKind.PAYLOAD_TOO_LARGE: (
        "Das Bild ist zu groß oder konnte nicht verarbeitet werden. Bitte versuche es "
        "mit einem kleineren Foto oder einem anderen Dateiformat."
    ),
    ErrorKind.SAFETY_REJECTED: (
        "Die Anfrage wurde aus Sicherheitsgründen gefiltert. Bitte versuche es mit "
        "einem anderen Foto."
    ),
    ErrorKind.EMPTY_RESULT: (
        "Das Modell hat kein Bild zurückgegeben. Bitte versuche es noch einmal."
    ),
    ErrorKind.TRANSIENT_PROVIDER_FAULT: (
        "Der KI-Dienst oder das Produktbild ist gerade nicht erreichbar. Bitte "
        "versuche es gleich noch einmal."
    ),
    ErrorKind.UNKNOWN: "Fehler bei der KI-Anprobe.",
}

MAX_DETAIL_LENGTH = 200


class PipelineError(Exception):
    """A classified failure of one try-on attempt.

    `detail` holds diagnostic text for logs. Only `Unknown` exposes it
    (trimmed) through `message`.
    """

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        base = USER_MESSAGES[self.kind]
        if self.kind is ErrorKind.UNKNOWN and self.detail:
            return f"{base} ({trim_detail(self.detail)})"
        return base

    def __repr__(self) -> str:
        return f"PipelineError(kind={self.kind.value!r}, detail={self.detail!r})"


def trim_detail(text: str, limit: int = MAX_DETAIL_LENGTH) -> str:
    """Collapse whitespace and cut diagnostic text to `limit` characters."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."
