"""Data models for wordlists, findings and scan results."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domainsweep.errors import WordlistError


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def label(self) -> str:
        """Display form used on findings (``critical`` -> ``Critical``)."""
        return self.value[:1].upper() + self.value[1:]


class EntryType(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"

    @property
    def finding_type(self) -> str:
        return DIRECTORY_LISTING if self is EntryType.DIRECTORY else SENSITIVE_FILE


class ScanStatus(str, Enum):
    SECURE = "Secure"
    SCANNED = "Scanned"
    POTENTIALLY_VULNERABLE = "Potentially Vulnerable"
    VULNERABLE = "Vulnerable"


DIRECTORY_LISTING = "Directory Listing"
SENSITIVE_FILE = "Sensitive File"


def _keywords(value: Any, field_name: str, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Iterable):
        raise WordlistError(f"{path}: {field_name} must be a list of strings")
    return tuple(str(item) for item in value if str(item))


@dataclass(frozen=True)
class WordlistEntry:
    """One path check loaded from a wordlist."""

    path: str
    type: EntryType
    severity: Severity
    positive_match: tuple[str, ...] = ()
    false_positive_indicators: tuple[str, ...] = ()
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WordlistEntry":
        path = str(data.get("path") or "").strip()
        if not path:
            raise WordlistError("Wordlist entry is missing a path")
        if not path.startswith("/"):
            path = f"/{path}"

        try:
            entry_type = EntryType(str(data.get("type", "file")).lower())
        except ValueError:
            raise WordlistError(f"{path}: unknown type {data.get('type')!r}") from None
        try:
            severity = Severity(str(data.get("severity", "info")).lower())
        except ValueError:
            raise WordlistError(f"{path}: unknown severity {data.get('severity')!r}") from None

        return cls(
            path=path,
            type=entry_type,
            severity=severity,
            positive_match=_keywords(data.get("positive_match"), "positive_match", path),
            false_positive_indicators=_keywords(
                data.get("false_positive_indicators"), "false_positive_indicators", path
            ),
            description=str(data.get("description", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "type": self.type.value,
            "severity": self.severity.value,
            "positive_match": list(self.positive_match),
            "false_positive_indicators": list(self.false_positive_indicators),
            "description": self.description,
        }


Wordlist = tuple[WordlistEntry, ...]


@dataclass(frozen=True)
class Finding:
    """A confirmed exposure on one domain."""

    path: str
    type: str
    severity: str
    details: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.path, self.type)

    @classmethod
    def from_entry(cls, entry: WordlistEntry) -> "Finding":
        return cls(
            path=entry.path,
            type=entry.type.finding_type,
            severity=entry.severity.label,
            details=entry.description,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        return cls(
            path=data["path"],
            type=data["type"],
            severity=data["severity"],
            details=data.get("details", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "type": self.type,
            "severity": self.severity,
            "details": self.details,
        }


def derive_status(findings: Iterable[Finding]) -> ScanStatus:
    """Map finding severities to a domain status."""
    severities = {finding.severity for finding in findings}
    if not severities:
        return ScanStatus.SECURE
    if Severity.CRITICAL.label in severities or Severity.HIGH.label in severities:
        return ScanStatus.VULNERABLE
    if Severity.MEDIUM.label in severities:
        return ScanStatus.POTENTIALLY_VULNERABLE
    return ScanStatus.SCANNED


@dataclass
class ScanResult:
    """Findings for one probed domain."""

    domain: str
    findings: list[Finding] = field(default_factory=list)
    ip: str | None = None

    @property
    def status(self) -> ScanStatus:
        return derive_status(self.findings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanResult":
        return cls(
            domain=data["domain"],
            findings=[Finding.from_dict(item) for item in data.get("findings", [])],
            ip=data.get("ip"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "status": self.status.value,
            "ip": self.ip,
            "findings": [finding.to_dict() for finding in self.findings],
        }


@dataclass
class ScanOutput:
    """Everything produced by one root-domain scan."""

    results: list[ScanResult] = field(default_factory=list)
    raw_subdomain_data: Any = None

    @property
    def has_live_hosts(self) -> bool:
        return bool(self.results)
