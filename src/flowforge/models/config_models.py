"""Configuration data models."""

import os
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, List, Optional, Tuple

ENV_PREFIX = "FLOWFORGE_"


@dataclass
class IntelligenceConfig:
    """Centralized configuration for the recording intelligence services.

    Every table is read-only once a service has been built from it.
    """

    # Noise filtering
    MAX_CONSECUTIVE_NOISE_KEYS: int = 2
    NOISE_KEYS: Tuple[str, ...] = (
        "ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown",
        "Backspace", "Delete",
    )

    # Container-click filtering (substring match against the selector)
    CONTAINER_SELECTORS: Tuple[str, ...] = (
        "#rightcol", "#leftcol", "#maincontent", "#content",
        "#wrapper", "#container",
        ".container", ".wrapper", ".content", ".main",
        'div[class*="view"]', 'div[class*="container"]', 'div[class*="wrapper"]',
    )
    INTERACTIVE_ROLES: Tuple[str, ...] = (
        "button", "link", "checkbox", "radio", "textbox",
        "combobox", "listbox", "menuitem", "tab",
    )

    # Intent segmentation: link names that open a new application module
    MODULE_NAMES: Tuple[str, ...] = (
        "Leave", "Admin", "PIM", "Time", "Recruitment", "Directory",
    )

    # Locator optimization
    MAX_FALLBACKS: int = 3
    ROLE_PREFERENCE_THRESHOLD: float = 0.9

    # Assertion suggestion
    MAX_ASSERTIONS_PER_ACTION: int = 5

    # Naming
    MAX_NAME_WORDS: int = 6

    # Quality analysis: markers of the target test framework
    FRAMEWORK_IMPORT: str = "@mdakhan.mak/cs-playwright-test-framework"
    BASE_PAGE_CLASS: str = "CSBasePage"
    ELEMENT_DECORATOR: str = "@CSGetElement"
    STEP_DECORATOR: str = "@CSBDDStepDef"
    REPORTER_PREFIX: str = "CSReporter."

    _TUPLE_FIELDS: ClassVar[Tuple[str, ...]] = (
        "NOISE_KEYS", "CONTAINER_SELECTORS", "INTERACTIVE_ROLES", "MODULE_NAMES",
    )

    def __post_init__(self) -> None:
        for name in self._TUPLE_FIELDS:
            setattr(self, name, tuple(getattr(self, name)))
        errors = self.validate()
        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "IntelligenceConfig":
        """Create configuration from dictionary. Unknown keys are ignored."""
        known = {f.name for f in fields(cls) if not f.name.startswith("_")}
        return cls(**{k: v for k, v in config.items() if k in known})

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "IntelligenceConfig":
        """Create configuration from ``FLOWFORGE_*`` environment overrides.

        Only scalar fields are read; e.g. ``FLOWFORGE_MAX_FALLBACKS=2``.

        Raises:
            ValueError: If an override cannot be converted to the field type.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        overrides: Dict[str, Any] = {}
        for key, default in defaults.to_dict().items():
            raw = environ.get(f"{ENV_PREFIX}{key}")
            if raw is None or isinstance(default, tuple):
                continue
            try:
                overrides[key] = type(default)(raw.strip())
            except ValueError as e:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{key}: {raw!r}") from e
        return cls.from_dict(overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            key: value for key, value in self.__dict__.items()
            if not key.startswith('_')
        }

    def update(self, **kwargs) -> None:
        """Update configuration values."""
        for key, value in kwargs.items():
            if hasattr(self, key) and not key.startswith('_'):
                if key in self._TUPLE_FIELDS:
                    value = tuple(value)
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration key: {key}")
        errors = self.validate()
        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))

    def validate(self) -> List[str]:
        """Validate configuration values and return any errors."""
        errors = []

        if self.MAX_CONSECUTIVE_NOISE_KEYS < 0:
            errors.append("MAX_CONSECUTIVE_NOISE_KEYS must not be negative")

        if self.MAX_FALLBACKS < 0:
            errors.append("MAX_FALLBACKS must not be negative")

        if self.MAX_ASSERTIONS_PER_ACTION < 0:
            errors.append("MAX_ASSERTIONS_PER_ACTION must not be negative")

        if self.MAX_NAME_WORDS <= 0:
            errors.append("MAX_NAME_WORDS must be positive")

        if not 0.0 <= self.ROLE_PREFERENCE_THRESHOLD <= 1.0:
            errors.append("ROLE_PREFERENCE_THRESHOLD must be between 0 and 1")

        return errors
