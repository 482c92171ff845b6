from .base import ConicShape, IntersectWithLine, PointMembership, ToGeneralizedConic
from .line import InfiniteLine
from .circle import Circle
from .ellipse import Ellipse
from .parabola import Parabola

__all__ = [
    'ConicShape',
    'IntersectWithLine',
    'PointMembership',
    'ToGeneralizedConic',
    'InfiniteLine',
    'Circle',
    'Ellipse',
    'Parabola',
]
