"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field


@dataclass
class PushLimitConfig:
    """Push volume limits.

    Attributes:
        max_pushes_per_day: Non-P0 pushes per user per UTC day (0 = unlimited)
        max_recipients_per_push: Upper bound on recipients of one push (0 = unlimited)
    """
    max_pushes_per_day: int = 3
    max_recipients_per_push: int = 0


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        firestore_project: GCP project for Firestore (None for default)
        firestore_database: Firestore database name (None for default)
        fcm_project_id: Firebase project that owns the FCM sender
        fcm_timeout_seconds: Timeout for FCM requests
        cron_secret: Bearer secret required by job endpoints
        push_enabled: Master switch for push delivery
        push_limits: Push volume limits
    """
    firestore_project: str | None = None
    firestore_database: str | None = None
    fcm_project_id: str | None = None
    fcm_timeout_seconds: int = 10
    cron_secret: str | None = None
    push_enabled: bool = True
    push_limits: PushLimitConfig = field(default_factory=PushLimitConfig)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def _is_unresolved(value: str | None) -> bool:
    return bool(value) and value.startswith("${")


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if config.push_limits.max_pushes_per_day < 0:
        errors.append(ValidationError(
            field="push_limits.max_pushes_per_day",
            message=f"Must be >= 0, got {config.push_limits.max_pushes_per_day}",
        ))

    if config.push_limits.max_recipients_per_push < 0:
        errors.append(ValidationError(
            field="push_limits.max_recipients_per_push",
            message=f"Must be >= 0, got {config.push_limits.max_recipients_per_push}",
        ))

    if config.fcm_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="fcm_timeout_seconds",
            message=f"Timeout must be positive, got {config.fcm_timeout_seconds}",
        ))

    if config.push_enabled and not config.fcm_project_id:
        errors.append(ValidationError(
            field="fcm_project_id",
            message="Push is enabled but no FCM project is configured",
            severity="warning",
        ))

    if not config.cron_secret:
        errors.append(ValidationError(
            field="cron_secret",
            message="No cron secret configured; job endpoints will reject every request",
            severity="warning",
        ))
    elif _is_unresolved(config.cron_secret):
        errors.append(ValidationError(
            field="cron_secret",
            message="Cron secret not resolved (still contains placeholder)",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
