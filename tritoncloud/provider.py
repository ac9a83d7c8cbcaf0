import functools
import logging

from tritoncloud import cloudprovider
from tritoncloud.config import read_config
from tritoncloud.http import PrivateKeySigner, SignedHttp
from tritoncloud.instances import Instances
from tritoncloud.metadata import discover_local_identity
from tritoncloud.resolver import Resolver
from tritoncloud.v1 import Client

log = logging.getLogger(__name__)

PROVIDER_NAME = 'triton'


class Triton(object):
    """The Triton cloud provider

    Only instances are supported. Load balancers, zones, clusters and routes are reported as unavailable.

    """

    def __init__(self, client, identity):
        """
        Args:
            client (tritoncloud.v1.Client): An authenticated CloudAPI client
            identity (tritoncloud.metadata.LocalIdentity): The instance we are running on

        """
        self.client = client
        self.identity = identity

        self._instances = Instances(Resolver(client, identity), client)

    def provider_name(self):
        return PROVIDER_NAME

    def instances(self):
        log.debug('Triton.instances() called')
        return self._instances, True

    def scrub_dns(self, nameservers, searches):
        """DNS settings are passed through unchanged"""
        return nameservers, searches

    def load_balancer(self):
        return None, False

    def zones(self):
        return None, False

    def clusters(self):
        return None, False

    def routes(self):
        return None, False


def new_triton(config, http=None, discover=discover_local_identity):
    """Build a Triton provider from its configuration

    Args:
        config (tritoncloud.config.Config): The provider configuration
        http (httplib2.Http, optional): A single transport to use instead of a signing one per thread
        discover (callable): Returns our LocalIdentity, defaults to asking the metadata service

    Returns:
        Triton: The provider

    Raises:
        ValueError: The private key could not be loaded
        tritoncloud.metadata.MetadataUnavailable: We could not find out which instance we are
    """
    http_factory = None
    if http is None:
        signer = PrivateKeySigner(config.key_id, config.key_path, config.account)
        http_factory = functools.partial(SignedHttp, signer)

    client = Client(config.endpoint_url, config.account, http=http, http_factory=http_factory)

    identity = discover()
    log.info('Triton cloud provider running on %s (%s)', identity.hostname, identity.uuid)

    return Triton(client, identity)


def _factory(config):
    return new_triton(read_config(config))


cloudprovider.register_cloud_provider(PROVIDER_NAME, _factory)
