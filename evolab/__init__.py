"""Core primitives for speciated, generational neuroevolution."""

from __future__ import annotations

from .activations import ACTIVATIONS, activate, activation_function
from .comparer import Comparer, DistanceComparer, DistanceConfig, substrate_distance
from .config import NEATConfig, load_neat_config, neat_config_from_mapping
from .experiment import Event, Experiment, apply_results
from .genome import (
    Genome,
    Population,
    Species,
    average_fitness,
    best_genome,
    rank_genomes,
    ranking_key,
)
from .metrics import MetricsRow, MetricsWriter
from .network import Network, NetworkTranslator
from .operators import (
    ComplexifyConfig,
    ComplexifyMutator,
    CompositeMutator,
    CrosserConfig,
    NEATCrosser,
    NEATSeeder,
    SeederConfig,
    WeightMutationConfig,
    WeightMutator,
)
from .reporters import EventLogger, subscribe_event_logger
from .searcher import (
    ConcurrentSearcher,
    Evaluator,
    Phenome,
    Result,
    SearchError,
    SerialSearcher,
)
from .selector import GenerationalSelector, SelectorConfig
from .speciator import DynamicSpeciator, StaticSpeciator
from .substrate import ActivationType, Conn, Node, NeuronType, Position, Substrate
from .transcriber import NEATTranscriber

__all__ = [
    "ACTIVATIONS",
    "activate",
    "activation_function",
    "ActivationType",
    "NeuronType",
    "Position",
    "Node",
    "Conn",
    "Substrate",
    "Genome",
    "Species",
    "Population",
    "ranking_key",
    "rank_genomes",
    "best_genome",
    "average_fitness",
    "Comparer",
    "DistanceConfig",
    "DistanceComparer",
    "substrate_distance",
    "StaticSpeciator",
    "DynamicSpeciator",
    "SelectorConfig",
    "GenerationalSelector",
    "NEATTranscriber",
    "Network",
    "NetworkTranslator",
    "Phenome",
    "Result",
    "Evaluator",
    "SearchError",
    "SerialSearcher",
    "ConcurrentSearcher",
    "SeederConfig",
    "NEATSeeder",
    "CrosserConfig",
    "NEATCrosser",
    "WeightMutationConfig",
    "WeightMutator",
    "ComplexifyConfig",
    "ComplexifyMutator",
    "CompositeMutator",
    "Event",
    "Experiment",
    "apply_results",
    "NEATConfig",
    "load_neat_config",
    "neat_config_from_mapping",
    "MetricsRow",
    "MetricsWriter",
    "EventLogger",
    "subscribe_event_logger",
]
