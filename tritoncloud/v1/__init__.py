from .client import Client
from .errors import APIError, MachineNotFound, NetworkError
from .objects import Machine, TritonObject

__all__ = ['Client', 'APIError', 'MachineNotFound', 'NetworkError', 'Machine', 'TritonObject']
