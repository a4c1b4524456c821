"""Process settings for a stub session."""

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidArgumentType

TRUTHY = {"1", "true", "yes", "on"}


class FuzzyOptions(BaseModel):
    """Tuning for "did you mean" suggestions."""

    model_config = ConfigDict(validate_assignment=True)

    weight: float = Field(default=0.1, ge=0.0, le=0.25)
    threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    ignore_case: bool = True
    min_score: float = Field(default=0.7, ge=0.0, le=1.0)
    max_suggestions: int = Field(default=4, ge=1)


class Configuration(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    record_metrics: bool = False
    fuzzy: FuzzyOptions = Field(default_factory=FuzzyOptions)

    @classmethod
    def from_env(cls) -> "Configuration":
        """Build a configuration, allowing overrides from the environment."""
        record_metrics = os.getenv("ENDPOINT_STUBS_RECORD_METRICS", "false")
        return cls(record_metrics=record_metrics.strip().lower() in TRUTHY)

    def update(self, **changes) -> "Configuration":
        """
        Assign settings in place. Every change is validated before any is applied.

        Raises:
            InvalidArgumentType: when a setting is unknown or has the wrong type
        """
        staged = {}
        for name, value in changes.items():
            if name not in type(self).model_fields:
                raise InvalidArgumentType(name=name, actual=value, expected=list(type(self).model_fields))
            try:
                if name == "fuzzy":
                    staged[name] = self._validate_fuzzy(value)
                else:
                    staged[name] = getattr(type(self).model_validate({name: value}), name)
            except ValidationError as e:
                raise InvalidArgumentType(name=name, actual=value, expected=[self._field_type(name)]) from e

        for name, value in staged.items():
            if name == "fuzzy":
                # In place, registries hold a reference to these options
                for setting, setting_value in value.model_dump().items():
                    setattr(self.fuzzy, setting, setting_value)
            else:
                setattr(self, name, value)
        return self

    def _field_type(self, name: str) -> str:
        annotation = type(self).model_fields[name].annotation
        return getattr(annotation, "__name__", str(annotation))

    def _validate_fuzzy(self, value) -> FuzzyOptions:
        if isinstance(value, FuzzyOptions):
            value = value.model_dump()
        if not isinstance(value, dict):
            raise InvalidArgumentType(name="fuzzy", actual=value, expected=[FuzzyOptions, dict])
        for name, setting in value.items():
            if name not in FuzzyOptions.model_fields:
                raise InvalidArgumentType(name=f"fuzzy.{name}", actual=setting, expected=list(FuzzyOptions.model_fields))
        return FuzzyOptions.model_validate({**self.fuzzy.model_dump(), **value})
