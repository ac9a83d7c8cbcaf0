from .triton_object import TritonObject


class Machine(TritonObject):
    """A Machine represents a single instance in a Triton account. It uses the instance UUID as a unique identifier.

    Attributes (as returned by CloudAPI, all are readonly):
        id: unique identifier of Machine entity
        name: the machine alias, which Triton also uses as the guest host name
        state: provisioning state of the machine ("running", "stopped", "provisioning", ...)
        brand: the virtualization brand ("joyent", "lx", "kvm", "bhyve")
        primaryIp: IP address that should be used to communicate with this machine
        ips: every IP address assigned to the machine
        tags: dictionary of key-value tags set on the machine
    """

    RUNNING = 'running'

    def __init__(self, data=None):
        data = dict(data or {})

        # CloudAPI leaves these keys out while a machine is provisioning
        # we want to return empty values in those cases for consistency
        data.setdefault('ips', [])
        data.setdefault('tags', {})

        super(Machine, self).__init__(data=data)

    @property
    def primary_ip(self):
        return self._data.get('primaryIp')

    @property
    def host_name(self):
        return self._data.get('name')

    @property
    def instance_class(self):
        return self._data.get('brand')

    @property
    def running(self):
        """True when CloudAPI reports the machine as running"""
        return self._data.get('state') == self.RUNNING

    @property
    def state(self):
        return self._data.get('state')
