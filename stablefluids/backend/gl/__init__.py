"""OpenGL backend. Importing this package requires PyOpenGL; using it requires a GL context."""

from .Texture import Texture, draw_quad
from .Fbo import Fbo
from .Shader import Shader
from .ShaderLibrary import ShaderLibrary
from .GLSink import GLSink, uniform_name

__all__ = ["Texture", "Fbo", "Shader", "ShaderLibrary", "GLSink", "uniform_name", "draw_quad"]
