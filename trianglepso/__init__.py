"""Approximate an image with translucent triangles using particle swarm optimization."""

from .config import DEFAULTS, make_config
from .fitness import evaluate
from .growth import GrowthController
from .kick import StagnationKicker
from .optimizer import Optimizer
from .particle import Particle
from .raster import load_target, render
from .triangle import Triangle

__version__ = "0.1.0"
