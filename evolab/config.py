"""Configuration loading utilities for evolab runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .comparer import DistanceConfig
from .operators import (
    ComplexifyConfig,
    CrosserConfig,
    SeederConfig,
    WeightMutationConfig,
)
from .selector import SelectorConfig


@dataclass(slots=True)
class NEATConfig:
    population_size: int
    num_inputs: int
    num_outputs: int
    iterations: int = 100
    seed: int | None = None
    workers: int = 1
    # distance
    conns_coefficient: float = 1.0
    nodes_coefficient: float = 1.0
    weight_coefficient: float = 0.4
    # speciation
    compatibility_threshold: float = 3.0
    target_species: int | None = None
    compatibility_modifier: float = 0.3
    # selection
    survival_rate: float = 0.2
    max_stagnation: int = 15
    mutate_only_probability: float = 0.25
    interspecies_mate_probability: float = 0.001
    reenable_probability: float = 1.0
    # seeding, crossover and mutation
    output_activation: str = "sigmoid"
    hidden_activation: str = "steepened-sigmoid"
    weight_power: float = 1.0
    enable_probability: float = 0.2
    mutate_weight_probability: float = 0.8
    replace_weight_probability: float = 0.1
    add_node_probability: float = 0.03
    add_conn_probability: float = 0.05
    allow_recurrent: bool = False

    def __post_init__(self) -> None:
        if self.population_size <= 0:
            msg = "population_size must be positive."
            raise ValueError(msg)
        if self.num_inputs <= 0 or self.num_outputs <= 0:
            msg = "num_inputs and num_outputs must be positive."
            raise ValueError(msg)
        if self.iterations <= 0:
            msg = "iterations must be positive."
            raise ValueError(msg)
        if self.workers <= 0:
            msg = "workers must be positive."
            raise ValueError(msg)
        if self.target_species is not None and self.target_species <= 0:
            msg = "target_species must be positive when provided."
            raise ValueError(msg)

    def distance_config(self) -> DistanceConfig:
        return DistanceConfig(
            conns_coefficient=self.conns_coefficient,
            nodes_coefficient=self.nodes_coefficient,
            weight_coefficient=self.weight_coefficient,
        )

    def selector_config(self) -> SelectorConfig:
        return SelectorConfig(
            survival_rate=self.survival_rate,
            max_stagnation=self.max_stagnation,
            mutate_only_probability=self.mutate_only_probability,
            interspecies_mate_probability=self.interspecies_mate_probability,
            reenable_probability=self.reenable_probability,
        )

    def seeder_config(self) -> SeederConfig:
        return SeederConfig(
            output_activation=self.output_activation,
            weight_power=self.weight_power,
        )

    def crosser_config(self) -> CrosserConfig:
        return CrosserConfig(enable_probability=self.enable_probability)

    def weight_mutation_config(self) -> WeightMutationConfig:
        return WeightMutationConfig(
            mutate_weight_probability=self.mutate_weight_probability,
            replace_weight_probability=self.replace_weight_probability,
        )

    def complexify_config(self) -> ComplexifyConfig:
        return ComplexifyConfig(
            add_node_probability=self.add_node_probability,
            add_conn_probability=self.add_conn_probability,
            allow_recurrent=self.allow_recurrent,
            hidden_activation=self.hidden_activation,
        )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    return data


def _optional_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def neat_config_from_mapping(data: Mapping[str, Any]) -> NEATConfig:
    """Build a ``NEATConfig``; keys may use hyphens or underscores."""
    data = {str(key).replace("-", "_"): value for key, value in data.items()}
    unknown = sorted(set(data) - set(NEATConfig.__dataclass_fields__))
    if unknown:
        msg = f"Unknown configuration option(s): {', '.join(unknown)}"
        raise ValueError(msg)
    missing = [
        name
        for name in ("population_size", "num_inputs", "num_outputs")
        if name not in data
    ]
    if missing:
        msg = f"Missing required configuration option(s): {', '.join(missing)}"
        raise ValueError(msg)

    return NEATConfig(
        population_size=int(data["population_size"]),
        num_inputs=int(data["num_inputs"]),
        num_outputs=int(data["num_outputs"]),
        iterations=int(data.get("iterations", 100)),
        seed=_optional_int(data.get("seed")),
        workers=int(data.get("workers", 1)),
        conns_coefficient=float(data.get("conns_coefficient", 1.0)),
        nodes_coefficient=float(data.get("nodes_coefficient", 1.0)),
        weight_coefficient=float(data.get("weight_coefficient", 0.4)),
        compatibility_threshold=float(data.get("compatibility_threshold", 3.0)),
        target_species=_optional_int(data.get("target_species")),
        compatibility_modifier=float(data.get("compatibility_modifier", 0.3)),
        survival_rate=float(data.get("survival_rate", 0.2)),
        max_stagnation=int(data.get("max_stagnation", 15)),
        mutate_only_probability=float(data.get("mutate_only_probability", 0.25)),
        interspecies_mate_probability=float(
            data.get("interspecies_mate_probability", 0.001)
        ),
        reenable_probability=float(data.get("reenable_probability", 1.0)),
        output_activation=str(data.get("output_activation", "sigmoid")),
        hidden_activation=str(data.get("hidden_activation", "steepened-sigmoid")),
        weight_power=float(data.get("weight_power", 1.0)),
        enable_probability=float(data.get("enable_probability", 0.2)),
        mutate_weight_probability=float(data.get("mutate_weight_probability", 0.8)),
        replace_weight_probability=float(data.get("replace_weight_probability", 0.1)),
        add_node_probability=float(data.get("add_node_probability", 0.03)),
        add_conn_probability=float(data.get("add_conn_probability", 0.05)),
        allow_recurrent=bool(data.get("allow_recurrent", False)),
    )


def load_neat_config(path: Path) -> NEATConfig:
    return neat_config_from_mapping(_load_yaml(Path(path)))


__all__ = ["NEATConfig", "load_neat_config", "neat_config_from_mapping"]
