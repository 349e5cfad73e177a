"""Base comum para modelos de payloads externos."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class LenientModel(BaseModel):
    """Ignora campos desconhecidos e trata `null` como campo ausente.

    Campos ausentes caem no default (string vazia / submodelo vazio).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
