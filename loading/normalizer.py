"""Whitespace normalization for decoded novel text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

from .normalization_rules import (
    LEADING_WHITESPACE_PATTERN,
    LINE_ENDING_PATTERN,
    MULTI_NEWLINE_PATTERN,
    MULTI_SPACE_PATTERN,
    TRAILING_WHITESPACE_PATTERN,
)

logger = logging.getLogger(__name__)


@dataclass
class NormalizationConfig:
    """Configuration options for text normalization.

    Every rule is enabled by default. Rules run in the order listed here.

    Attributes:
        normalize_line_endings: Convert CRLF and lone CR to LF.
        collapse_blank_lines: Collapse 3+ consecutive newlines into exactly two.
        strip_leading_whitespace: Remove spaces/tabs at the start of each line.
        strip_trailing_whitespace: Remove spaces/tabs at the end of each line.
        collapse_spaces: Collapse remaining runs of spaces/tabs into one space.
        trim: Trim whitespace and newlines from both ends of the text.
    """

    normalize_line_endings: bool = True
    collapse_blank_lines: bool = True
    strip_leading_whitespace: bool = True
    strip_trailing_whitespace: bool = True
    collapse_spaces: bool = True
    trim: bool = True


@dataclass
class NormalizationResult:
    """Result of text normalization.

    Attributes:
        text: The normalized text content.
        original_length: Character count of the original text.
        normalized_length: Character count of the normalized text.
        rules_applied: Names of the rules that changed the text.
    """

    text: str
    original_length: int
    normalized_length: int
    rules_applied: list[str]


class TextNormalizer:
    """Text normalizer with configurable whitespace rules.

    Non-whitespace characters, including CJK text, pass through unchanged.

    Example:
        >>> normalizer = TextNormalizer()
        >>> normalizer.normalize("a\\r\\n\\n\\n\\n  b  c ").text
        'a\\n\\nb c'
    """

    def __init__(self, config: NormalizationConfig | None = None):
        """Initialize the TextNormalizer.

        Args:
            config: Normalization configuration. Uses defaults if not provided.
        """
        self.config = config or NormalizationConfig()

    def normalize(self, text: str) -> NormalizationResult:
        """Normalize the input text according to configuration.

        Args:
            text: The text to normalize.

        Returns:
            NormalizationResult containing the normalized text and metadata.
        """
        original_length = len(text)
        rules_applied: list[str] = []

        steps = (
            ("normalize_line_endings", lambda t: LINE_ENDING_PATTERN.sub("\n", t)),
            ("collapse_blank_lines", lambda t: MULTI_NEWLINE_PATTERN.sub("\n\n", t)),
            ("strip_leading_whitespace", lambda t: LEADING_WHITESPACE_PATTERN.sub("", t)),
            ("strip_trailing_whitespace", lambda t: TRAILING_WHITESPACE_PATTERN.sub("", t)),
            ("collapse_spaces", lambda t: MULTI_SPACE_PATTERN.sub(" ", t)),
            ("trim", lambda t: t.strip()),
        )

        for name, rule in steps:
            if not getattr(self.config, name):
                continue
            updated = rule(text)
            if updated != text:
                rules_applied.append(name)
                text = updated

        logger.debug(
            "Normalized text %d -> %d chars (%s)",
            original_length,
            len(text),
            ", ".join(rules_applied) or "unchanged",
        )
        return NormalizationResult(
            text=text,
            original_length=original_length,
            normalized_length=len(text),
            rules_applied=rules_applied,
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> TextNormalizer:
        """Create a normalizer from a YAML configuration file.

        The YAML file should contain boolean keys matching NormalizationConfig
        fields. Missing keys keep their defaults.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            TextNormalizer with configuration from file.

        Raises:
            FileNotFoundError: If the YAML file doesn't exist.
            ValueError: If the YAML file contains invalid configuration.
        """
        import yaml

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with yaml_path.open("r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError(f"Invalid configuration in {yaml_path}: expected a mapping")

        known = {f.name for f in fields(NormalizationConfig)}
        unknown = sorted(set(yaml_config) - known)
        if unknown:
            raise ValueError(f"Invalid configuration in {yaml_path}: unknown keys {unknown}")

        for key, value in yaml_config.items():
            if not isinstance(value, bool):
                raise ValueError(f"Invalid configuration in {yaml_path}: {key} must be true or false")

        return cls(NormalizationConfig(**yaml_config))


_DEFAULT_NORMALIZER = TextNormalizer()


def normalize_text(text: str) -> str:
    """Normalize whitespace with the default rules."""
    return _DEFAULT_NORMALIZER.normalize(text).text
