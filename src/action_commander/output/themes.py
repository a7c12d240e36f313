"""Severity and upgrade-status color maps."""

from action_commander.models import Severity

SEVERITY_COLORS: dict[Severity, str] = {
    Severity.DEBUG: "dim",
    Severity.INFO: "white",
    Severity.WARN: "yellow",
    Severity.ERROR: "red",
}

STATUS_COLORS: dict[str, str] = {
    "up to date": "green",
    "compat upgrade": "yellow",
    "major upgrade": "red bold",
    "no releases": "dim",
    "unresolved": "red",
}


def styled(text: str, color: str) -> str:
    return f"[{color}]{text}[/{color}]"


def styled_severity(severity: Severity, text: str) -> str:
    return styled(text, SEVERITY_COLORS.get(severity, "white"))


def styled_status(status: str) -> str:
    return styled(status, STATUS_COLORS.get(status, "white"))
