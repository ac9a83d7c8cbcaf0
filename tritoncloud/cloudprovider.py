"""The orchestrator facing side of a cloud provider.

Types and sentinels the orchestrator understands, plus the registry providers add themselves to.
"""
import collections
import logging
import threading

log = logging.getLogger(__name__)

# address kinds reported for a node
NODE_LEGACY_HOST_IP = 'LegacyHostIP'
NODE_INTERNAL_IP = 'InternalIP'
NODE_EXTERNAL_IP = 'ExternalIP'


class NodeName(str):
    """The name the orchestrator uses for a node.

    It may be a primary IP, a host name or a machine id; nothing marks which.
    """

    def __repr__(self):
        return 'NodeName({0})'.format(str.__repr__(self))


NodeAddress = collections.namedtuple('NodeAddress', ['type', 'address'])


class InstanceNotFound(Exception):
    """The node does not match any instance, or the instance is not in a state that can answer the question"""

    def __init__(self, name, reason=None):
        message = 'instance not found: {0}'.format(name)
        if reason:
            message = '{0} ({1})'.format(message, reason)

        super(InstanceNotFound, self).__init__(message)

        self.name = name
        self.reason = reason


class Unimplemented(NotImplementedError):
    """The provider deliberately does not support this operation"""


_providers = {}
_providers_lock = threading.Lock()


def register_cloud_provider(name, factory):
    """Make a provider available under ``name``

    Args:
        name (str): The provider name, as used in the orchestrator's configuration
        factory (callable): Called with an open config file (or None) and returns the provider

    Raises:
        ValueError: A provider is already registered under ``name``
    """
    with _providers_lock:
        if name in _providers:
            raise ValueError('cloud provider {0!r} was registered twice'.format(name))

        _providers[name] = factory

    log.info('Registered cloud provider %r', name)


def cloud_providers():
    """Return the names of every registered provider"""
    with _providers_lock:
        return sorted(_providers)


def get_cloud_provider(name, config):
    """Build the provider registered under ``name``

    Args:
        name (str): The provider name
        config (file-like or None): The provider's configuration

    Returns:
        The provider, or None if no provider is registered under ``name``
    """
    with _providers_lock:
        factory = _providers.get(name)

    if factory is None:
        log.debug('No cloud provider registered under %r', name)
        return None

    return factory(config)
