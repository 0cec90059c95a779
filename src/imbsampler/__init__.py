from .Dataset import Dataset
from .DifferentialEvolution import DifferentialEvolution, LocalSearch, MutationStrategy
from .ENN import ENN
from .FitnessOracle import FitnessOracle
from .IPADE import IPADE
from .KDTree import KDTree
from .Metrics import HVDM, euclidean
from .NCL import NCL
from .NM import NM
from .exceptions import (
    DegenerateInput,
    DegenerateTrainingSet,
    EmptyIndex,
    ImbSamplerError,
    InsufficientNeighbours,
    InvalidParameter,
)
from .interface import RESAMPLING_ALGORITHMS, get_resampler

__all__ = [
    'Dataset',
    'DifferentialEvolution',
    'ENN',
    'FitnessOracle',
    'HVDM',
    'IPADE',
    'KDTree',
    'LocalSearch',
    'MutationStrategy',
    'NCL',
    'NM',
    'RESAMPLING_ALGORITHMS',
    'euclidean',
    'get_resampler',
    'DegenerateInput',
    'DegenerateTrainingSet',
    'EmptyIndex',
    'ImbSamplerError',
    'InsufficientNeighbours',
    'InvalidParameter'
]
