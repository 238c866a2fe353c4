from OpenGL.GL import * # type: ignore

from ...Exceptions import BackendError
from .Texture import Texture


class Fbo(Texture):
    """Texture with a framebuffer attached, usable as a dispatch target."""

    def __init__(self) -> None :
        super(Fbo, self).__init__()
        self.fbo_id = 0

    def allocate(self, width: int, height: int, components: int) -> None :
        super(Fbo, self).allocate(width, height, components)

        self.fbo_id = glGenFramebuffers(1)
        glBindFramebuffer(GL_FRAMEBUFFER, self.fbo_id)
        glFramebufferTexture2D(GL_FRAMEBUFFER, GL_COLOR_ATTACHMENT0, GL_TEXTURE_2D, self.tex_id, 0)
        status = glCheckFramebufferStatus(GL_FRAMEBUFFER)
        glBindFramebuffer(GL_FRAMEBUFFER, 0)

        if status != GL_FRAMEBUFFER_COMPLETE:
            self.deallocate()
            raise BackendError(f"Framebuffer {width}x{height}x{components} incomplete (status {status})")

    def deallocate(self) -> None :
        if self.fbo_id:
            glDeleteFramebuffers(1, [self.fbo_id])
            self.fbo_id = 0
        super(Fbo, self).deallocate()

    def begin(self) -> None:
        glBindFramebuffer(GL_FRAMEBUFFER, self.fbo_id)
        glViewport(0, 0, self.width, self.height)

    def end(self) -> None:
        glBindFramebuffer(GL_FRAMEBUFFER, 0)

    def clear(self) -> None:
        self.begin()
        glClearColor(0.0, 0.0, 0.0, 0.0)
        glClear(GL_COLOR_BUFFER_BIT)
        self.end()
