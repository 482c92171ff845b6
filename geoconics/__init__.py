from .errors import (
    ConicError,
    InvalidShapeError,
    DegenerateConicError,
    ConicComputationError,
    CoincidentConicsError,
    SceneError,
)
from .tolerance import (
    Tolerance,
    get_default_tolerance,
    set_default_tolerance,
    is_zero,
    is_gt_zero,
    is_lt_zero,
    numbers_are_equal,
    points_equal,
    select_distinct,
)
from .degenerate import split_degenerate_conic
from .line_conic import intersect_line_with_conic_matrix
from .conic import GeneralizedConic
from .shapes import InfiniteLine, Circle, Ellipse, Parabola, ConicShape
from .intersect import intersect
from .scene import Scene, PairResult, load_scene, read_scene, intersect_scene, results_to_json

__all__ = [
    'ConicError',
    'InvalidShapeError',
    'DegenerateConicError',
    'ConicComputationError',
    'CoincidentConicsError',
    'SceneError',
    'Tolerance',
    'get_default_tolerance',
    'set_default_tolerance',
    'is_zero',
    'is_gt_zero',
    'is_lt_zero',
    'numbers_are_equal',
    'points_equal',
    'select_distinct',
    'split_degenerate_conic',
    'intersect_line_with_conic_matrix',
    'GeneralizedConic',
    'InfiniteLine',
    'Circle',
    'Ellipse',
    'Parabola',
    'ConicShape',
    'intersect',
    'Scene',
    'PairResult',
    'load_scene',
    'read_scene',
    'intersect_scene',
    'results_to_json',
]
