import ipaddress
import logging

from tritoncloud.cloudprovider import (
    NODE_EXTERNAL_IP,
    NODE_INTERNAL_IP,
    NODE_LEGACY_HOST_IP,
    InstanceNotFound,
    NodeAddress,
    NodeName,
    Unimplemented,
)

log = logging.getLogger(__name__)


class Instances(object):
    """Answer the orchestrator's questions about nodes running on Triton

    Every question resolves the node name to a machine first, see tritoncloud.resolver.Resolver.

    """

    def __init__(self, resolver, client):
        """
        Args:
            resolver (tritoncloud.resolver.Resolver): Turns node names into machines
            client (tritoncloud.v1.Client): Used for listing every machine

        """
        self._resolver = resolver
        self._client = client

    def node_addresses(self, name):
        """Return the addresses of a node

        Triton gives each machine one primary IP, it is reported as every kind of address.

        Args:
            name (str): The node name

        Returns:
            list: NodeAddress tuples

        Raises:
            tritoncloud.cloudprovider.InstanceNotFound: No machine matches ``name``
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be asked
            ValueError: The machine has no usable primary IP
        """
        log.debug('Instances.node_addresses() called with %s', name)

        machine = self._resolver.resolve(name).machine

        if not machine.primary_ip:
            raise ValueError('machine {0} has no primary IP'.format(machine.id))

        address = str(ipaddress.ip_address(machine.primary_ip))

        return [
            NodeAddress(type=NODE_LEGACY_HOST_IP, address=address),
            NodeAddress(type=NODE_INTERNAL_IP, address=address),
            NodeAddress(type=NODE_EXTERNAL_IP, address=address),
        ]

    def _running_machine_id(self, name):
        machine = self._resolver.resolve(name).machine

        # a machine that isn't running has no identity as far as the orchestrator is concerned
        if not machine.running:
            raise InstanceNotFound(name, reason='machine {0} is {1}'.format(machine.id, machine.state))

        return machine.id

    def external_id(self, name):
        """Return the cloud provider ID of a node

        Args:
            name (str): The node name

        Returns:
            str: The machine id

        Raises:
            tritoncloud.cloudprovider.InstanceNotFound: No machine matches ``name`` or it is not running
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be asked
        """
        log.debug('Instances.external_id() called with %s', name)
        return self._running_machine_id(name)

    def instance_id(self, name):
        """Return the cloud provider ID of a node, same as external_id"""
        log.debug('Instances.instance_id() called with %s', name)
        return self._running_machine_id(name)

    def instance_type(self, name):
        """Return the instance type (the machine brand) of a node, whatever state it is in"""
        log.debug('Instances.instance_type() called with %s', name)
        return self._resolver.resolve(name).machine.instance_class

    def list(self, pattern):
        """List the names of every machine in the account

        Args:
            pattern (str): Accepted for the orchestrator's interface. It is not applied, every machine id is
                           returned and the caller filters.

        Returns:
            list: NodeName for each machine id, whatever its state

        Raises:
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be asked
        """
        log.debug('Instances.list() called with %s', pattern)

        if pattern:
            log.debug('Instances.list() does not apply filters, returning every machine')

        return [NodeName(machine.id) for machine in self._client.list_machines()]

    def add_ssh_key_to_all_instances(self, user, key_data):
        """Not supported on Triton"""
        raise Unimplemented('add_ssh_key_to_all_instances is not supported by the triton cloud provider')

    def current_node_name(self, hostname):
        """Return the name of the node we are running on

        This is the host name the metadata service gave us, which is what our own queries are looked up by. When
        that lookup failed it is our uuid.

        Args:
            hostname (str): The host name the orchestrator sees

        Returns:
            NodeName: our host name
        """
        log.debug('Instances.current_node_name() called with %s', hostname)

        name = self._resolver.identity.hostname
        if hostname != name:
            log.warning('Host name %s differs from the metadata host name %s, reporting %s', hostname, name, name)

        return NodeName(name)
