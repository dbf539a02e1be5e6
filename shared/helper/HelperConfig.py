"""Central configuration helper for the knowledge-base assistant."""

import logging
import os
from typing import Any

from dotenv import load_dotenv


class HelperConfig:
    """Reads every setting from environment variables.

    A .env file in ROOT_DIR (or the working directory) is loaded once on
    construction; variables already present in the process environment win.
    Keys are case-insensitive. An empty variable counts as unset.
    """

    def __init__(self, logger: logging.Logger, load_env_file: bool = True) -> None:
        self._logger = logger
        if load_env_file:
            load_dotenv(os.path.join(os.getenv("ROOT_DIR", os.getcwd()), ".env"), override=False)

    ##########################################
    ################ INTERNAL ################
    ##########################################

    @staticmethod
    def _lookup(key: str) -> tuple[str, str | None]:
        """Return the normalised key and its stripped value (None when unset or blank)."""
        key = key.upper()
        raw = (os.getenv(key) or "").strip()
        return key, raw or None

    @staticmethod
    def _require(key: str, default: Any) -> Any:
        if default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return default

    ##########################################
    ################ READERS #################
    ##########################################

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name.
            default (str | None): Fallback value if the variable is not set.

        Returns:
            str: The value, stripped of surrounding whitespace.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key, raw = self._lookup(key)
        return raw if raw is not None else self._require(key, default)

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable.

        Returns:
            float | int: int when the raw value has no decimal point, float otherwise.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                or if the value cannot be parsed as a number.
        """
        key, raw = self._lookup(key)
        if raw is None:
            return self._require(key, default)
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable ("true", "1", "yes" are truthy)."""
        key, raw = self._lookup(key)
        if raw is None:
            return self._require(key, default)
        return raw.lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Read a list environment variable written as "[elem1,elem2,...]".

        Args:
            key (str): Environment variable name.
            default (list[str] | None): Fallback value if the variable is not set.
            separator (str): Delimiter between elements.
            element_type (type): Type every element is cast to.

        Returns:
            list: The parsed elements; blank elements are dropped.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                if the brackets are missing, or if an element cannot be cast.
        """
        key, raw = self._lookup(key)
        if raw is None:
            return self._require(key, default)
        if not (raw.startswith("[") and raw.endswith("]")):
            raise ValueError(f"Environment variable '{key}' must look like '[a{separator}b{separator}...]', got '{raw}'.")
        try:
            return [element_type(part.strip()) for part in raw[1:-1].split(separator) if part.strip()]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key}' holds an element that is not {element_type.__name__}: {e}")

    def get_logger(self) -> logging.Logger:
        """Return the application logger."""
        return self._logger
