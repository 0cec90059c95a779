from .ENN import ENN
from .IPADE import IPADE
from .NCL import NCL
from .NM import NM
from .exceptions import InvalidParameter

RESAMPLING_ALGORITHMS = {
    'ENN': ENN,
    'IPADE': IPADE,
    'NCL': NCL,
    'NM': NM
}


def get_resampler(algorithm='ENN', **kwargs):
    for name, resampler in RESAMPLING_ALGORITHMS.items():
        if algorithm.lower() == name.lower():
            return resampler(**kwargs)
    raise InvalidParameter("algorithm", algorithm, list(RESAMPLING_ALGORITHMS))
