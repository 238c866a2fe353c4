from .Mouse import Mouse, Motion, Button

__all__ = ["Mouse", "Motion", "Button"]
