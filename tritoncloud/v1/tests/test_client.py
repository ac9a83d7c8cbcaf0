import unittest
import mock

import json, socket, threading  # NOQA
from urllib.parse import parse_qs, urlparse

import httplib2
from googleapiclient.http import HttpMockSequence

from ..client import Client
from ..errors import APIError, MachineNotFound, NetworkError
from ..objects import Machine


def machine(id, name, ip, state='running', brand='joyent'):
    return {'id': id, 'name': name, 'primaryIp': ip, 'state': state, 'brand': brand}


class TestTritonClient(unittest.TestCase):
    def setUp(self):
        self.endpoint = 'https://us-sw-1.api.joyent.com/'
        self.client = Client(self.endpoint, 'testuser', http=HttpMockSequence([]))

    def mock(self, http):
        self.client._http = http

    def query(self, uri):
        return dict((key, value[0]) for key, value in parse_qs(urlparse(uri).query).items())

    def test_init(self):
        """Test constructor"""
        assert self.client._endpoint == 'https://us-sw-1.api.joyent.com'
        assert self.client._account == 'testuser'
        assert self.client._page_size == 1000

    def test_init_default_http(self):
        """An httplib2.Http is created for the calling thread if one isn't provided"""
        client = Client(self.endpoint, 'testuser')

        http = client._thread_http()

        assert isinstance(http, httplib2.Http)
        assert id(client._thread_http()) == id(http)

    def test_init_http_and_factory(self):
        """Providing both http and http_factory raises ValueError"""

        def test():
            Client(self.endpoint, 'testuser', http=HttpMockSequence([]), http_factory=httplib2.Http)

        self.assertRaises(ValueError, test)

    def test_http_shared_when_given(self):
        """An http passed to the constructor is used from every thread"""
        http = HttpMockSequence([])
        client = Client(self.endpoint, 'testuser', http=http)
        seen = []

        thread = threading.Thread(target=lambda: seen.append(client._thread_http()))
        thread.start()
        thread.join(10)

        assert seen == [http]
        assert client._thread_http() is http

    def test_http_per_thread(self):
        """Each thread gets its own http from the factory and keeps using it"""
        created = []

        def factory():
            http = HttpMockSequence([
                ({'status': '200'}, json.dumps(machine('a1', 'node-a', '10.0.0.1')))
            ] * 3)
            created.append(http)
            return http

        client = Client(self.endpoint, 'testuser', http_factory=factory)
        results = {}

        def worker(n):
            results[n] = [client.get_machine('a1').id for _ in range(3)]

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.daemon = True
            thread.start()
        for thread in threads:
            thread.join(10)

        assert results == dict((n, ['a1', 'a1', 'a1']) for n in range(4))
        assert len(created) == 4
        assert all(len(http.request_sequence) == 3 for http in created)

    def test_init_bad_params(self):
        """Empty endpoint or account, or a bad page size raises ValueError"""

        def test_no_endpoint():
            Client('', 'testuser')

        def test_no_account():
            Client(self.endpoint, '')

        def test_page_size_too_small():
            Client(self.endpoint, 'testuser', page_size=0)

        def test_page_size_too_large():
            Client(self.endpoint, 'testuser', page_size=1001)

        for test in [test_no_endpoint, test_no_account, test_page_size_too_small, test_page_size_too_large]:
            self.assertRaises(ValueError, test)

    def test_url(self):
        """URLs are scoped to the account and query parameters are sorted"""
        assert self.client._url('machines') == 'https://us-sw-1.api.joyent.com/testuser/machines'

        url = self.client._url('machines', offset=0, limit=10, name=None)
        assert url == 'https://us-sw-1.api.joyent.com/testuser/machines?limit=10&offset=0'

    def test_single_request_good(self):
        """A single request returns the decoded body and sends CloudAPI headers"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps(machine('a1', 'node-a', '10.0.0.1')))
        ])
        self.mock(http)

        output = self.client._single_request('machines/a1')

        assert output['id'] == 'a1'

        (uri, method, body, headers) = http.request_sequence[0]
        assert uri == 'https://us-sw-1.api.joyent.com/testuser/machines/a1'
        assert method == 'GET'
        assert headers['accept'] == 'application/json'
        assert headers['accept-version'] == '~8'

    def test_single_request_bad(self):
        """A 500 return causes APIError to be raised with the CloudAPI error details"""
        self.mock(HttpMockSequence([
            ({'status': '500'}, '{"code":"InternalError","message":"Internal Error"}')
        ]))

        with self.assertRaises(APIError) as ctx:
            self.client._single_request('machines')

        assert ctx.exception.code == 500
        assert ctx.exception.rest_code == 'InternalError'
        assert ctx.exception.message == 'Internal Error'
        assert ctx.exception.http_error.resp.status == 500

    def test_single_request_bad_no_json(self):
        """An error without a JSON body still raises APIError"""
        self.mock(HttpMockSequence([
            ({'status': '502'}, '<html>Bad Gateway</html>')
        ]))

        with self.assertRaises(APIError) as ctx:
            self.client._single_request('machines')

        assert ctx.exception.code == 502
        assert ctx.exception.rest_code is None
        assert '502' in ctx.exception.message

    def test_single_request_unreachable(self):
        """Transport errors raise NetworkError with the cause attached"""
        for error in [httplib2.ServerNotFoundError('no such host'), socket.timeout('timed out')]:
            http = mock.Mock()
            http.request.side_effect = error
            self.mock(http)

            with self.assertRaises(NetworkError) as ctx:
                self.client._single_request('machines')

            assert ctx.exception.cause is error
            assert not isinstance(ctx.exception, APIError)

    def test_request_with_no_pagination(self):
        """A paging request with a short first page makes one request"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps([machine('a1', 'node-a', '10.0.0.1')]))
        ])
        self.mock(http)

        output = list(self.client._request('machines'))

        assert len(output) == 1
        assert len(http.request_sequence) == 1

        assert self.query(http.request_sequence[0][0]) == {'limit': '1000', 'offset': '0'}

    def test_request_with_pagination(self):
        """Pagination works automatically"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps([machine('a1', 'node-a', '10.0.0.1'), machine('b2', 'node-b', '10.0.0.2')])),
            ({'status': '200'}, json.dumps([machine('c3', 'node-c', '10.0.0.3'), machine('d4', 'node-d', '10.0.0.4')])),
            ({'status': '200'}, '[]')
        ])

        self.client = Client(self.endpoint, 'testuser', http=http, page_size=2)

        output = list(self.client._request('machines'))

        assert len(output) == 3
        assert output[2] == []

        offsets = [self.query(uri)['offset'] for (uri, _, _, _) in http.request_sequence]
        assert offsets == ['0', '2', '4']

    def test_request_not_a_list(self):
        """A list call that doesn't return a list raises NetworkError"""
        self.mock(HttpMockSequence([
            ({'status': '200'}, '{"machines": []}')
        ]))

        def test():
            list(self.client._request('machines'))

        self.assertRaises(NetworkError, test)

    def test_list_machines(self):
        """List Machines across pages"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps([machine('a1', 'node-a', '10.0.0.1')])),
            ({'status': '200'}, json.dumps([machine('b2', 'node-b', '10.0.0.2', state='stopped')])),
            ({'status': '200'}, '[]')
        ])
        self.client = Client(self.endpoint, 'testuser', http=http, page_size=1)

        machines = self.client.list_machines()

        assert isinstance(machines, list)
        assert [m.id for m in machines] == ['a1', 'b2']
        assert all(isinstance(m, Machine) for m in machines)

    def test_list_machines_fails_part_way(self):
        """A failure on a later page raises instead of returning what was already fetched"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps([machine('a1', 'node-a', '10.0.0.1')])),
            ({'status': '503'}, '{"code":"ServiceUnavailable","message":"try again"}')
        ])
        self.client = Client(self.endpoint, 'testuser', http=http, page_size=1)

        self.assertRaises(APIError, self.client.list_machines)

    def test_get_machine(self):
        """Get an individual machine"""
        http = HttpMockSequence([
            ({'status': '200'}, json.dumps(machine('a1', 'node-a', '10.0.0.1')))
        ])
        self.mock(http)

        m = self.client.get_machine('a1')

        assert m.id == 'a1'
        assert m.running
        assert http.request_sequence[0][0].endswith('/testuser/machines/a1')

    def test_get_machine_not_found(self):
        """404 and 410 raise MachineNotFound"""
        for status in ['404', '410']:
            self.mock(HttpMockSequence([
                ({'status': status}, '{"code":"ResourceNotFound","message":"VM not found"}')
            ]))

            with self.assertRaises(MachineNotFound) as ctx:
                self.client.get_machine('a1')

            assert ctx.exception.code == int(status)
            assert ctx.exception.rest_code == 'ResourceNotFound'

    def test_get_machine_other_error(self):
        """Other errors are not turned into MachineNotFound"""
        self.mock(HttpMockSequence([
            ({'status': '403'}, '{"code":"NotAuthorized","message":"nope"}')
        ]))

        with self.assertRaises(APIError) as ctx:
            self.client.get_machine('a1')

        assert not isinstance(ctx.exception, MachineNotFound)

    def test_get_machine_not_an_object(self):
        """A body that isn't a machine raises NetworkError"""
        self.mock(HttpMockSequence([
            ({'status': '200'}, '[]')
        ]))

        self.assertRaises(NetworkError, self.client.get_machine, 'a1')
