import json
import logging
import socket
import threading

from urllib.parse import quote, urlencode

import googleapiclient.errors
import httplib2
from googleapiclient.http import HttpRequest
from googleapiclient.model import JsonModel

from tritoncloud.v1.errors import APIError, MachineNotFound, NetworkError
from tritoncloud.v1.objects import Machine

log = logging.getLogger(__name__)


class Client(object):
    """A python wrapper for the compute instance calls of the Triton CloudAPI

    The CloudAPI is documented here: https://apidocs.joyent.com/cloudapi/

    Every call goes to the network. Nothing is cached and nothing is retried; callers decide what to do
    with a failure.

    """

    _API_VERSION = '~8'
    _MAX_PAGE_SIZE = 1000

    # CloudAPI answers 410 Gone for machines that have been destroyed
    _NOT_FOUND = (404, 410)

    def __init__(self, endpoint, account, http=None, http_factory=None, page_size=_MAX_PAGE_SIZE):
        """Create a client for one CloudAPI account

        Args:
            endpoint (str): The CloudAPI URL. Example: https://us-sw-1.api.joyent.com
            account (str): The account (login) whose machines are listed

            http (httplib2.Http): An instance of httplib2.Http (or something that acts like it) that every HTTP request
            will be made through. httplib2.Http is not thread safe, so only pass this if the client is used from one
            thread at a time, or to pass in a mock for testing.

            http_factory (callable): Called with no arguments to build an httplib2.Http for each thread that uses
            the client. In production this builds a tritoncloud.http.SignedHttp so requests are authenticated.
            Defaults to httplib2.Http.

            page_size (int): How many machines to request per page when listing, defaults to the CloudAPI maximum
            of 1000.

        Raises:
            ValueError: endpoint or account is empty, page_size is out of range, or both http and http_factory
                        were given
        """

        if not endpoint:
            raise ValueError('endpoint must not be empty')

        if not account:
            raise ValueError('account must not be empty')

        # only one way to get a transport, not both
        if http is not None and http_factory is not None:
            raise ValueError('You cannot specify your own http client, and an http_factory.')

        if page_size < 1 or page_size > self._MAX_PAGE_SIZE:
            raise ValueError('page_size must be between 1 and {0}'.format(self._MAX_PAGE_SIZE))

        # stash this for later
        self._endpoint = endpoint.strip('/')
        self._account = account
        self._page_size = page_size

        if http_factory is None:
            http_factory = httplib2.Http

        self._http = http
        self._http_factory = http_factory

        # one transport per thread, built on first use
        self._local = threading.local()

        self._model = JsonModel(data_wrapper=False)

    def _thread_http(self):
        """Return the httplib2.Http requests from the calling thread go through

        Returns:
            httplib2.Http: The http passed to the constructor if there was one, otherwise this thread's own
                           instance from http_factory
        """
        if self._http is not None:
            return self._http

        http = getattr(self._local, 'http', None)
        if http is None:
            http = self._http_factory()
            self._local.http = http

        return http

    def _url(self, path, **query):
        """Build the absolute URL of an account scoped CloudAPI resource

        Args:
            path (str): The resource path below the account. Example: 'machines'
            **query: Query string parameters, None values are dropped

        Returns:
            str: The URL
        """
        url = '{0}/{1}/{2}'.format(self._endpoint, quote(self._account, safe=''), path)

        params = sorted((key, value) for key, value in query.items() if value is not None)
        if params:
            url = '{0}?{1}'.format(url, urlencode(params))

        return url

    def _single_request(self, path, **query):
        """Make a single GET request to the CloudAPI endpoint

        Args:
            path (str): The resource path below the account. Example: 'machines'
            **query: Query string parameters

        Returns:
            The decoded JSON response

        Raises:
            tritoncloud.v1.errors.APIError: CloudAPI returned a response code >= 300
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be reached
        """

        uri = self._url(path, **query)

        request = HttpRequest(
            self._thread_http(),
            self._model.response,
            uri,
            method='GET',
            headers={
                'accept': 'application/json',
                'accept-version': self._API_VERSION,
            }
        )

        # Execute the method and return it's output directly
        try:
            return request.execute()
        except googleapiclient.errors.HttpError as exc:
            raise self._api_error(exc) from exc
        except (httplib2.HttpLib2Error, socket.error) as exc:
            log.debug('GET %s failed: %s', uri, exc)
            raise NetworkError('Unable to reach CloudAPI at {0}: {1}'.format(self._endpoint, exc), cause=exc) from exc

    def _api_error(self, exc, error_class=APIError):
        """Convert a googleapiclient HttpError into one of our exceptions

        CloudAPI error bodies look like {"code": "ResourceNotFound", "message": "VM not found"}

        Args:
            exc (googleapiclient.errors.HttpError): The error raised by the transport
            error_class (type): The APIError subclass to build

        Returns:
            APIError: The converted error
        """
        status = exc.resp.status

        try:
            response = json.loads((exc.content or b'').decode('utf-8'))
        except ValueError:
            response = None

        if not isinstance(response, dict):
            response = {}

        message = response.get('message') or 'CloudAPI returned HTTP {0}'.format(status)

        log.debug('CloudAPI returned an error: %s (%s)', message, status)

        return error_class(code=status, message=message, http_error=exc, rest_code=response.get('code'))

    def _request(self, path, **query):
        """Make a request with automatic pagination handling

        CloudAPI pages list calls with 'limit' and 'offset'. A page shorter than the requested limit is the last one.

        Args:
            path (str): The resource path below the account. Example: 'machines'
            **query: Query string parameters.
                        Note: This method will inject the 'limit' and 'offset' keys into `**query` overwriting any
                        value specified by the caller. If you wish to handle pagination manually use the
                        `_single_request` method

        Yields:
            list: The next page of responses from the method called.

        Raises:
            tritoncloud.v1.errors.APIError: CloudAPI returned a response code >= 300
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be reached

        """

        # This is set to 0 and not None so that the while loop below will execute at least once
        offset = 0

        while offset is not None:
            query['limit'] = self._page_size
            query['offset'] = offset

            page = self._single_request(path, **query)

            if not isinstance(page, list):
                raise NetworkError('CloudAPI returned a {0} where a list was expected for {1}'.format(
                    type(page).__name__,
                    path
                ))

            # a short page means there is nothing left to fetch
            if len(page) < self._page_size:
                offset = None
            else:
                offset += len(page)

            yield page

    def list_machines(self):
        """Retrieve every machine in the account

        All pages are fetched before anything is returned; a failure part way through raises rather than
        returning a partial list.

        Returns:
            list: Machine objects, in the order CloudAPI returned them

        Raises:
            tritoncloud.v1.errors.APIError: CloudAPI returned a response code >= 300
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be reached

        """
        machines = []

        # loop through each page of results
        for page in self._request('machines'):
            for machine in page:
                machines.append(Machine(data=machine))

        log.debug('Client.list_machines() found %d machines', len(machines))
        return machines

    def get_machine(self, machine_id):
        """Retrieve a single machine by id

        Args:
            machine_id (str): The machine UUID

        Returns:
            Machine: The machine identified by ``machine_id``

        Raises:
            tritoncloud.v1.errors.MachineNotFound: There is no such machine, or it has been destroyed
            tritoncloud.v1.errors.APIError: CloudAPI returned another response code >= 300
            tritoncloud.v1.errors.NetworkError: CloudAPI could not be reached

        """
        try:
            data = self._single_request('machines/{0}'.format(quote(str(machine_id), safe='')))
        except APIError as exc:
            if exc.code not in self._NOT_FOUND:
                raise

            raise self._api_error(exc.http_error, error_class=MachineNotFound) from exc.http_error

        if not isinstance(data, dict):
            raise NetworkError('CloudAPI returned a {0} where a machine was expected for {1}'.format(
                type(data).__name__,
                machine_id
            ))

        return Machine(data=data)
