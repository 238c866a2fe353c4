from .FpsCounter import FpsCounter
from .FluidWindow import FluidWindow
