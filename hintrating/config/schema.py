# hintrating/config/schema.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from hintrating.rating.tutor_hint import Validity


class RatingConfig(BaseModel):
    """
    Rating policy for one language/environment.

    Answers which node types may be trimmed when childless, which are
    auto-attached to a freshly added parent, whether new numeric literals
    keep their values and which tutor validity a request needs to be rated.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = "default"
    trim_if_childless_types: List[str] = []
    trim_if_parent_is_added_types: List[str] = []
    specific_numeric_literals: bool = False
    required_validity: Validity = Validity.MultipleTutors
    body_types: List[str] = []

    @field_validator("required_validity", mode="before")
    @classmethod
    def _parse_validity(cls, v):
        if isinstance(v, str):
            return Validity[v]
        return v

    def trim_if_childless(self, type: str) -> bool:
        return type in self.trim_if_childless_types

    def trim_if_parent_is_added(self, type: str) -> bool:
        return type in self.trim_if_parent_is_added_types

    def use_specific_numeric_literals(self) -> bool:
        return self.specific_numeric_literals

    def highest_required_validity(self) -> Validity:
        return self.required_validity

    def is_body_type(self, type: str) -> bool:
        return type in self.body_types


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = "v1"
    rating: RatingConfig = RatingConfig()
    data_dir: Optional[str] = None
    write_results: bool = True
    debug: bool = False
    log_path: str = "logs/hintrating.jsonl"
