from .chacha import ChaCha8Rng
from .clusters import Cluster, Point, generate_cluster, generate_pairs_in_cluster, generate_point_in_cluster
from .generator import GenerationResult, generate_entries, run_generation
from .haversine import EARTH_RADIUS, reference_haversine
from .sampling import sample, sample_many
from .verify import verify_fixture

__all__ = [
    "ChaCha8Rng",
    "Cluster",
    "Point",
    "generate_cluster",
    "generate_point_in_cluster",
    "generate_pairs_in_cluster",
    "GenerationResult",
    "generate_entries",
    "run_generation",
    "EARTH_RADIUS",
    "reference_haversine",
    "sample",
    "sample_many",
    "verify_fixture",
]
