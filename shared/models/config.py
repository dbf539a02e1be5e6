from typing import Literal

from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    A single environment setting a provider client needs before it can boot.

    The full variable name is built by the client as <TYPE>_<ENGINE>_<env_key>,
    e.g. env_key "BASE_URL" on the Qdrant RAG client reads RAG_QDRANT_BASE_URL.

    Attributes:
        env_key (str): Engine-relative name of the variable.
        val_type (str): One of "string", "number", "bool", "list".
        default (str | int | float | bool | list | None): Value used when the variable is unset.
            None marks the setting as required.
    """

    env_key: str
    val_type: Literal["string", "number", "bool", "list"] = "string"
    default: str | int | float | bool | list | None = None
