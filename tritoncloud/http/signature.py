import base64
import logging

from email.utils import formatdate

import httplib2
import paramiko

log = logging.getLogger(__name__)


class PrivateKeySigner(object):
    """Sign CloudAPI requests with an account SSH key, using the HTTP Signature scheme

    CloudAPI authenticates a request by checking a signature over its Date header against a public key
    registered to the account. The key is identified by its MD5 fingerprint.

    """

    ALGORITHM = 'rsa-sha256'

    # the name paramiko uses for the same algorithm
    _SSH_ALGORITHM = 'rsa-sha2-256'

    def __init__(self, key_id, key_path, account, password=None):
        """Load the private key from disk

        Args:
            key_id (str): The key fingerprint as registered with CloudAPI. Example: '95:ec:59:...:f5:6e'
            key_path (str): Path to the PEM/OpenSSH encoded RSA private key
            account (str): The account the key belongs to
            password (str, optional): Passphrase for an encrypted key

        Raises:
            ValueError: The key could not be read or is not an RSA key
        """

        if not key_id:
            raise ValueError('key_id must not be empty')

        if not account:
            raise ValueError('account must not be empty')

        try:
            self._key = paramiko.RSAKey.from_private_key_file(key_path, password=password)
        except IOError as exc:
            raise ValueError('Could not read private key {0}: {1}'.format(key_path, exc)) from exc
        except paramiko.ssh_exception.SSHException as exc:
            raise ValueError('{0} is not a usable RSA private key: {1}'.format(key_path, exc)) from exc

        self.key_id = key_id
        self.account = account

        fingerprint = self.fingerprint
        if fingerprint != key_id.lower():
            # key ids may also be key names
            log.warning('key-id %s does not match the fingerprint %s of %s', key_id, fingerprint, key_path)

    @property
    def fingerprint(self):
        """The MD5 fingerprint of the loaded key, colon separated"""
        return ':'.join('{0:02x}'.format(byte) for byte in self._key.get_fingerprint())

    @property
    def key_ref(self):
        return '/{0}/keys/{1}'.format(self.account, self.key_id)

    def sign(self, data):
        """Sign data with the private key

        Args:
            data (bytes): The bytes to sign

        Returns:
            str: The base64 encoded PKCS#1 v1.5 SHA-256 signature
        """
        # paramiko wraps the signature in an SSH message: string algorithm, string blob
        message = paramiko.Message(self._key.sign_ssh_data(data, algorithm=self._SSH_ALGORITHM).asbytes())
        message.get_text()

        return base64.b64encode(message.get_binary()).decode('ascii')

    def authorization(self, date):
        """Build the Authorization header value for a request sent at ``date``

        Args:
            date (str): The RFC 1123 date that will be sent in the Date header

        Returns:
            str: The header value
        """
        signature = self.sign('date: {0}'.format(date).encode('utf-8'))

        return 'Signature keyId="{0}",algorithm="{1}",headers="date",signature="{2}"'.format(
            self.key_ref,
            self.ALGORITHM,
            signature
        )


class SignedHttp(httplib2.Http):
    """An httplib2.Http that adds CloudAPI authentication headers to every request"""

    def __init__(self, signer, **kwargs):
        """
        Args:
            signer (PrivateKeySigner): Used to sign each request
            **kwargs: Passed directly to httplib2.Http

        """
        super(SignedHttp, self).__init__(**kwargs)

        self.signer = signer

    def request(self, uri, method='GET', body=None, headers=None,
                redirections=httplib2.DEFAULT_MAX_REDIRECTS, connection_type=None):
        headers = dict(headers or {})

        date = formatdate(usegmt=True)
        headers['date'] = date
        headers['authorization'] = self.signer.authorization(date)

        return super(SignedHttp, self).request(
            uri,
            method=method,
            body=body,
            headers=headers,
            redirections=redirections,
            connection_type=connection_type
        )
