"""Handles the parsing and validation of the CopiBot pattern configuration file."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import patterns

logger = logging.getLogger(__name__)


class PatternSet(BaseModel):
    """
    The named intent patterns used by the bot.

    Every field defaults to the built-in pattern, so a configuration file only
    needs to list the patterns it overrides.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    yes_confirm: str = patterns.YES_CONFIRM
    with_invoice: str = patterns.WITH_INVOICE
    without_invoice: str = patterns.WITHOUT_INVOICE
    invoice_phrase: str = patterns.INVOICE_PHRASE
    no_invoice_phrase: str = patterns.NO_INVOICE_PHRASE
    finish_order: str = patterns.FINISH_ORDER
    quantity: str = patterns.QUANTITY
    support_keywords: tuple[str, ...] = Field(default=patterns.SUPPORT_KEYWORDS)

    @field_validator("yes_confirm", "with_invoice", "without_invoice", "invoice_phrase", "no_invoice_phrase", "finish_order", "quantity")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        """Reject patterns that do not compile."""
        patterns.compile_pattern(value)
        return value

    @field_validator("support_keywords")
    @classmethod
    def _normalize_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase keywords and drop blank entries."""
        return tuple(k.strip().lower() for k in value if k.strip())


class StrictSingleQuoteLoader(yaml.SafeLoader):
    """
    A YAML loader that rejects double-quoted strings.

    Double quotes turn `\\b` into a backspace character, silently breaking
    word-boundary patterns; single-quoted scalars keep backslashes literal.
    """


def _construct_scalar(loader: StrictSingleQuoteLoader, node: yaml.ScalarNode) -> Any:  # noqa: ANN401
    """Construct a scalar node, but first check its style."""
    if node.style == '"':
        line = node.start_mark.line + 1
        col = node.start_mark.column + 1
        msg = f"Double-quoted string found at line {line}, column {col}. Please use single quotes (') instead."
        raise yaml.YAMLError(msg)
    return loader.construct_scalar(node)


StrictSingleQuoteLoader.add_constructor("tag:yaml.org,2002:str", _construct_scalar)


def load_config(config_path: str) -> PatternSet:
    """
    Load, parse, and validate a YAML pattern configuration file.

    Args:
        config_path: The path to the YAML file.

    Returns:
        A PatternSet with the file's overrides applied on top of the defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If there is a syntax error in the YAML file.
        ValueError: If the configuration is invalid.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    def _raise_type_error(msg: str) -> None:
        """Raise a TypeError with a specific message."""
        raise TypeError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.load(f, Loader=StrictSingleQuoteLoader)  # noqa: S506

        if data is None:
            data = {}
        if not isinstance(data, dict):
            _raise_type_error("Config file must be a YAML mapping (dictionary).")

        config = PatternSet(**data)

    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e
    except (TypeError, ValueError) as e:
        msg = f"Invalid or missing configuration: {e}"
        raise ValueError(msg) from e
    else:
        logger.debug("Loaded pattern configuration: %s", config.model_dump_json(indent=2))
        return config
