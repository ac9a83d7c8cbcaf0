import collections
import configparser

SECTION = 'Global'

# option name in the file -> Config field
_OPTIONS = collections.OrderedDict([
    ('endpoint-url', 'endpoint_url'),
    ('account', 'account'),
    ('key-id', 'key_id'),
    ('key-path', 'key_path'),
])


Config = collections.namedtuple('Config', list(_OPTIONS.values()))


def read_config(config):
    """Read the provider configuration

    The file is INI formatted with a single [Global] section:

        [Global]
        endpoint-url = https://us-sw-1.api.joyent.com
        key-id = 95:ec:59:3d:73:a8:ae:6b:d0:ec:21:d7:6e:e9:f5:6e
        key-path = /etc/kubernetes/api_key
        account = testuser

    Args:
        config (file-like): An open configuration file

    Returns:
        Config: The parsed configuration

    Raises:
        ValueError: No file was given, it could not be parsed, or an option is missing or empty
    """
    if config is None:
        raise ValueError('no Triton cloud provider config file given')

    parser = configparser.ConfigParser(interpolation=None)

    try:
        parser.read_file(config)
    except configparser.Error as exc:
        raise ValueError('Unable to parse Triton cloud provider config: {0}'.format(exc)) from exc

    if not parser.has_section(SECTION):
        raise ValueError('Triton cloud provider config has no [{0}] section'.format(SECTION))

    values = {}
    for option, field in _OPTIONS.items():
        value = parser.get(SECTION, option, fallback='').strip()
        if not value:
            raise ValueError('Triton cloud provider config is missing {0} in [{1}]'.format(option, SECTION))

        values[field] = value

    return Config(**values)
