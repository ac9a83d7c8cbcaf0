"""Discover who we are from the Triton in-guest metadata service."""
import collections
import logging
import subprocess

log = logging.getLogger(__name__)

MDATA_GET = '/usr/sbin/mdata-get'
UUID_KEY = 'sdc:uuid'
HOSTNAME_KEY = 'sdc:hostname'

DEFAULT_TIMEOUT = 0.4


LocalIdentity = collections.namedtuple('LocalIdentity', ['uuid', 'hostname'])


class MetadataUnavailable(Exception):
    """The metadata service could not tell us our own instance id"""


def read_metadata(key, command=MDATA_GET, timeout=DEFAULT_TIMEOUT):
    """Read a single key from the metadata service

    Args:
        key (str): The metadata key. Example: 'sdc:uuid'
        command (str): Path to the mdata-get binary
        timeout (float): Seconds to wait before giving up, a call that times out is not retried

    Returns:
        str: The value with surrounding whitespace removed

    Raises:
        MetadataUnavailable: The command is missing, failed, timed out or printed nothing
    """
    try:
        out = subprocess.check_output([command, key], stderr=subprocess.DEVNULL, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise MetadataUnavailable('{0} {1} timed out after {2}s'.format(command, key, timeout)) from exc
    except subprocess.CalledProcessError as exc:
        raise MetadataUnavailable('{0} {1} exited with status {2}'.format(command, key, exc.returncode)) from exc
    except OSError as exc:
        raise MetadataUnavailable('Unable to run {0}: {1}'.format(command, exc)) from exc

    value = out.decode('utf-8', 'replace').strip()
    if not value:
        raise MetadataUnavailable('{0} {1} returned nothing'.format(command, key))

    return value


def discover_local_identity(command=MDATA_GET, timeout=DEFAULT_TIMEOUT):
    """Find the uuid and host name of the instance we are running on

    The uuid is required. The host name is not; when it can't be read the uuid is used in its place.

    Args:
        command (str): Path to the mdata-get binary
        timeout (float): Seconds allowed for each lookup

    Returns:
        LocalIdentity: our uuid and host name

    Raises:
        MetadataUnavailable: The uuid could not be read
    """
    uuid = read_metadata(UUID_KEY, command=command, timeout=timeout)

    try:
        hostname = read_metadata(HOSTNAME_KEY, command=command, timeout=timeout)
    except MetadataUnavailable as exc:
        log.warning('Could not read %s, using %s as the host name: %s', HOSTNAME_KEY, uuid, exc)
        hostname = uuid

    log.debug('Local instance is %s (%s)', uuid, hostname)
    return LocalIdentity(uuid=uuid, hostname=hostname)
