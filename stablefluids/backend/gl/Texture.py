from OpenGL.GL import * # type: ignore
from OpenGL.constant import Constant

from ...Exceptions import BackendError


# components -> (internal format, pixel format); three-component fields use
# RGBA because RGB32F is not required to be colour-renderable
FORMATS: dict[int, tuple[Constant, Constant]] = {
    1: (GL_R32F, GL_RED),
    2: (GL_RG32F, GL_RG),
    3: (GL_RGBA32F, GL_RGBA),
    4: (GL_RGBA32F, GL_RGBA),
}


def draw_quad() -> None :
    """Full-screen quad in normalized device coordinates."""
    glBegin(GL_QUADS)
    glTexCoord2f( 0.0,  0.0)
    glVertex2f(  -1.0, -1.0)
    glTexCoord2f( 1.0,  0.0)
    glVertex2f(   1.0, -1.0)
    glTexCoord2f( 1.0,  1.0)
    glVertex2f(   1.0,  1.0)
    glTexCoord2f( 0.0,  1.0)
    glVertex2f(  -1.0,  1.0)
    glEnd()


class Texture():
    """Float texture sampled with linear filtering and edge clamping."""

    def __init__(self) -> None :
        self.allocated = False
        self.width: int = 0
        self.height: int = 0
        self.components: int = 0
        self.internal_format: Constant = GL_NONE
        self.format: Constant = GL_NONE
        self.tex_id = 0

    def allocate(self, width: int, height: int, components: int) -> None :
        if components not in FORMATS:
            raise BackendError(f"Unsupported component count {components}")

        self.width = width
        self.height = height
        self.components = components
        self.internal_format, self.format = FORMATS[components]
        self.tex_id = glGenTextures(1)

        glBindTexture(GL_TEXTURE_2D, self.tex_id)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexImage2D(GL_TEXTURE_2D, 0, self.internal_format, self.width, self.height, 0, self.format, GL_FLOAT, None)
        glBindTexture(GL_TEXTURE_2D, 0)

        self.allocated = True

    def deallocate(self) -> None :
        if not self.allocated: return
        self.allocated = False
        glDeleteTextures(1, [self.tex_id])
        self.tex_id = 0
        self.width = 0
        self.height = 0

    def bind(self) -> None :
        glBindTexture(GL_TEXTURE_2D, self.tex_id)

    def unbind(self) -> None :
        glBindTexture(GL_TEXTURE_2D, 0)
