from .triton_object import TritonObject
from .machine import Machine

__all__ = ['TritonObject', 'Machine']
