from .NumpySink import NumpySink, NumpyBuffer, NumpyProgram
from .Kernels import NumpyKernelSource, KERNELS

__all__ = ["NumpySink", "NumpyBuffer", "NumpyProgram", "NumpyKernelSource", "KERNELS"]
