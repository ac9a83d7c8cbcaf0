from .cloudprovider import InstanceNotFound, NodeAddress, NodeName, Unimplemented, get_cloud_provider
from .provider import PROVIDER_NAME, Triton, new_triton

__all__ = [
    'InstanceNotFound',
    'NodeAddress',
    'NodeName',
    'Unimplemented',
    'get_cloud_provider',
    'PROVIDER_NAME',
    'Triton',
    'new_triton',
]
