# luckyfive/sweep.py
"""
Parameter sweep expansion.

A sweep describes a base parameter set plus a list of parameters to vary.
Expansion is the cartesian product of every parameter's values; each
combination is converted to a validated EngineParams and combinations that
fail validation are dropped. Running the variations is left to the caller.
"""
import itertools
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import numpy as np

from .infrastructure.config.settings import EngineParams
from .infrastructure.logging import get_logger
from .utils.error_handling import InvalidConfigurationError

logger = get_logger(__name__)

ENGINE_FIELDS = {f.name: f.type for f in fields(EngineParams)}


@dataclass
class ParameterSweep:
    """One varied parameter: type 'range' (min/max/step) or 'discrete' (values)."""
    name: str
    type: str
    values: Any

    def validate(self) -> None:
        if self.name not in ENGINE_FIELDS:
            raise InvalidConfigurationError(f"Unknown sweep parameter: {self.name}")
        if self.type == 'range':
            if not isinstance(self.values, dict) or not {'min', 'max', 'step'} <= set(self.values):
                raise InvalidConfigurationError(f"Range sweep '{self.name}' needs min, max and step.")
            if self.values['step'] <= 0:
                raise InvalidConfigurationError(f"Range sweep '{self.name}' step must be positive.")
            if self.values['min'] > self.values['max']:
                raise InvalidConfigurationError(f"Range sweep '{self.name}' min exceeds max.")
        elif self.type == 'discrete':
            if not isinstance(self.values, (list, tuple)) or not self.values:
                raise InvalidConfigurationError(f"Discrete sweep '{self.name}' needs a non-empty list.")
        else:
            raise InvalidConfigurationError(f"Unknown sweep type '{self.type}' for {self.name}")

    def grid_values(self) -> List[Any]:
        """Expand to the concrete list of values, in ascending/declared order."""
        if self.type == 'discrete':
            return list(self.values)

        low, high, step = self.values['min'], self.values['max'], self.values['step']
        count = int(np.floor((high - low) / step + 1e-9)) + 1
        grid = [low + i * step for i in range(count)]
        if all(isinstance(x, int) and not isinstance(x, bool) for x in (low, high, step)):
            return [int(x) for x in grid]
        # Round away float accumulation noise (0.30000000000000004 -> 0.3)
        return [round(float(x), 10) for x in grid]


@dataclass
class GeneratedRecipe:
    """One expanded variation. Parameters stay a plain dict at this layer."""
    name: str
    index: int
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SweepConfig:
    name: str
    parameters: List[ParameterSweep]
    base_params: EngineParams = field(default_factory=EngineParams)
    description: str = ""
    max_combinations: int = 1000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SweepConfig":
        try:
            base = EngineParams().with_overrides(**data.get('base_params', {}))
            params = [ParameterSweep(**p) for p in data.get('parameters', [])]
            return cls(
                name=data['name'],
                parameters=params,
                base_params=base,
                description=data.get('description', ""),
                max_combinations=data.get('max_combinations', 1000),
            )
        except (KeyError, TypeError) as e:
            raise InvalidConfigurationError(f"Malformed sweep config: {e}") from e

    def validate(self) -> None:
        if not self.name:
            raise InvalidConfigurationError("Sweep name is required.")
        if not self.parameters:
            raise InvalidConfigurationError("Sweep needs at least one parameter.")
        names = [p.name for p in self.parameters]
        if len(names) != len(set(names)):
            raise InvalidConfigurationError("Sweep parameters must be unique.")
        for p in self.parameters:
            p.validate()
        self.base_params.validate()


def generate_recipes(config: SweepConfig) -> List[GeneratedRecipe]:
    """Cartesian product of all sweep values, capped by max_combinations."""
    config.validate()
    names = [p.name for p in config.parameters]
    grids = [p.grid_values() for p in config.parameters]

    total = 1
    for grid in grids:
        total *= len(grid)
    if total > config.max_combinations:
        raise InvalidConfigurationError(
            f"Sweep '{config.name}' expands to {total} combinations "
            f"(limit {config.max_combinations})."
        )

    recipes = []
    for i, combination in enumerate(itertools.product(*grids)):
        recipes.append(GeneratedRecipe(
            name=f"{config.name}_var_{i}",
            index=i,
            parameters=dict(zip(names, combination)),
        ))
    return recipes


def recipe_to_params(recipe: GeneratedRecipe, base: EngineParams) -> EngineParams:
    """Map the generic parameter dict onto the named EngineParams struct."""
    overrides = {}
    for name, value in recipe.parameters.items():
        field_type = ENGINE_FIELDS[name]
        if field_type in (int, 'int') and isinstance(value, float) and value.is_integer():
            value = int(value)
        overrides[name] = value
    return base.with_overrides(**overrides).validate()


def expand_sweep(config: SweepConfig) -> List[EngineParams]:
    """
    Expand a sweep into validated parameter sets.

    Combinations that violate EngineParams constraints are logged and dropped.
    """
    variations = []
    for recipe in generate_recipes(config):
        try:
            variations.append(recipe_to_params(recipe, config.base_params))
        except InvalidConfigurationError as e:
            logger.debug(f"Dropping {recipe.name} {recipe.parameters}: {e}")
    logger.info(f"Sweep '{config.name}' expanded to {len(variations)} valid variations")
    return variations
