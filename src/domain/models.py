from __future__ import annotations

import math
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from shared.constants import (
    DEFAULT_Z_PROPERTY,
    IDW_DEFAULT_WEIGHT,
    LOG_LEVELS,
    DistanceMethod,
    GridType,
    LengthUnit,
)
from shared.errors import InvalidInput

_ModelT = TypeVar('_ModelT', bound=BaseModel)


def _lower(v: Any) -> Any:
    return v.lower() if isinstance(v, str) else v


def _positive_finite(v: float, name: str) -> float:
    fv = float(v)
    if not math.isfinite(fv) or fv <= 0:
        msg = f'{name} must be a positive finite number'
        raise ValueError(msg)
    return fv


class InterpolateOptions(BaseModel):
    """Options of interpolate()."""

    model_config = {'extra': 'forbid', 'frozen': True}

    grid_type: GridType = GridType.SQUARE
    # Property holding the sample values
    z_property: str = DEFAULT_Z_PROPERTY
    # Property receiving the estimates; defaults to z_property
    output_property: str | None = None
    units: LengthUnit = LengthUnit.KILOMETERS
    # Distance-decay exponent
    weight: float = IDW_DEFAULT_WEIGHT
    distance_method: DistanceMethod = DistanceMethod.HAVERSINE
    # Grid cells per vectorised chunk; None = from available memory
    chunk_size: int | None = None

    @field_validator('grid_type', 'units', 'distance_method', mode='before')
    @classmethod
    def lower_enums(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator('weight')
    @classmethod
    def validate_weight(cls, v: float) -> float:
        return _positive_finite(v, 'weight')

    @field_validator('chunk_size')
    @classmethod
    def validate_chunk_size(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            msg = 'chunk_size must be positive'
            raise ValueError(msg)
        return v

    @property
    def target_property(self) -> str:
        return self.output_property or self.z_property


class ContourOptions(BaseModel):
    """Options of isobands() and isolines()."""

    model_config = {'extra': 'forbid', 'frozen': True}

    z_property: str = DEFAULT_Z_PROPERTY
    # Merged onto every output feature
    common_properties: dict[str, Any] = Field(default_factory=dict)
    # Merged, in break order, onto the matching feature
    breaks_properties: list[dict[str, Any]] = Field(default_factory=list)
    # Keep features whose geometry came out empty
    keep_empty: bool = False

    def properties_for(self, index: int) -> dict[str, Any]:
        """Common properties overridden by the break-indexed ones."""
        merged = dict(self.common_properties)
        if index < len(self.breaks_properties):
            merged.update(self.breaks_properties[index])
        return merged


class IpolateSettings(BaseModel):
    """
    Defaults for both operations, stored as TOML profiles.

    Flat model; domain.toml_sections maps it to sections on disk.
    """

    model_config = {
        'extra': 'ignore',
    }

    # Grid estimation
    cell_size: float = 100.0
    grid_type: GridType = GridType.SQUARE
    units: LengthUnit = LengthUnit.KILOMETERS
    weight: float = IDW_DEFAULT_WEIGHT
    distance_method: DistanceMethod = DistanceMethod.HAVERSINE
    z_property: str = DEFAULT_Z_PROPERTY
    output_property: str | None = None
    chunk_size: int | None = None

    # Contouring
    contour_z_property: str = DEFAULT_Z_PROPERTY
    keep_empty: bool = False

    # Logging
    log_level: str = 'INFO'
    log_file: str | None = None

    @field_validator('grid_type', 'units', 'distance_method', mode='before')
    @classmethod
    def lower_enums(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator('cell_size', 'weight')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        return _positive_finite(v, 'value')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in LOG_LEVELS:
            msg = f'log_level must be one of {", ".join(LOG_LEVELS)}'
            raise ValueError(msg)
        return level

    def to_interpolate_options(self) -> InterpolateOptions:
        return InterpolateOptions(
            grid_type=self.grid_type,
            z_property=self.z_property,
            output_property=self.output_property,
            units=self.units,
            weight=self.weight,
            distance_method=self.distance_method,
            chunk_size=self.chunk_size,
        )

    def to_contour_options(
        self,
        common_properties: dict[str, Any] | None = None,
        breaks_properties: list[dict[str, Any]] | None = None,
    ) -> ContourOptions:
        return ContourOptions(
            z_property=self.contour_z_property,
            common_properties=common_properties or {},
            breaks_properties=breaks_properties or [],
            keep_empty=self.keep_empty,
        )


def build_options(
    model_cls: type[_ModelT],
    options: _ModelT | dict[str, Any] | None = None,
    **overrides: Any,
) -> _ModelT:
    """
    Validate caller options (model, dict or None) plus keyword overrides.

    Raises InvalidInput instead of pydantic's ValidationError.
    """
    if isinstance(options, model_cls) and not overrides:
        return options
    if options is None:
        data: dict[str, Any] = {}
    elif isinstance(options, BaseModel):
        data = options.model_dump()
    elif isinstance(options, dict):
        data = dict(options)
    else:
        msg = f'options must be a {model_cls.__name__} or a dict'
        raise InvalidInput(msg)
    data.update(overrides)
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        msg = f'Invalid {model_cls.__name__}: {e.errors()[0].get("msg", e)}'
        raise InvalidInput(msg, e) from e
