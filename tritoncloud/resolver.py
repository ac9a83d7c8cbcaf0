import collections
import logging

from tritoncloud.cloudprovider import InstanceNotFound
from tritoncloud.v1.errors import MachineNotFound

log = logging.getLogger(__name__)


ResolvedInstance = collections.namedtuple('ResolvedInstance', ['machine', 'is_self'])


class Resolver(object):
    """Find the machine a node name refers to

    A node name may be a primary IP, a host name or a machine id. Our own host name is looked up directly by
    uuid; anything else needs a full listing because CloudAPI cannot search by IP or host name.

    Nothing is cached, every call asks CloudAPI.

    """

    def __init__(self, client, identity):
        """
        Args:
            client (tritoncloud.v1.Client): Used to look machines up
            identity (tritoncloud.metadata.LocalIdentity): Who we are

        """
        self._client = client
        self._identity = identity

    @property
    def identity(self):
        return self._identity

    def resolve(self, name):
        """Find the machine for a node name

        Args:
            name (str): A primary IP, host name or machine id

        Returns:
            ResolvedInstance: the machine and whether it is the one we are running on

        Raises:
            tritoncloud.cloudprovider.InstanceNotFound: No machine matches, or we matched ourselves and are
                                                        not running
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be asked
        """
        if name == self._identity.hostname:
            return ResolvedInstance(machine=self._resolve_self(name), is_self=True)

        return ResolvedInstance(machine=self._resolve_peer(name), is_self=False)

    def _resolve_self(self, name):
        try:
            machine = self._client.get_machine(self._identity.uuid)
        except MachineNotFound as exc:
            raise InstanceNotFound(name, reason='local instance {0} is gone'.format(self._identity.uuid)) from exc

        if not machine.running:
            raise InstanceNotFound(name, reason='local instance is {0}'.format(machine.state))

        return machine

    def _resolve_peer(self, name):
        by_host_name = None
        by_id = None

        for machine in self._client.list_machines():
            # an IP match beats any other kind of match
            if machine.primary_ip == name:
                return machine

            if by_host_name is None and machine.host_name == name:
                by_host_name = machine

            if by_id is None and machine.id == name:
                by_id = machine

        if by_host_name is not None:
            return by_host_name

        if by_id is not None:
            return by_id

        log.debug('No machine has a primary IP, host name or id of %s', name)
        raise InstanceNotFound(name)
