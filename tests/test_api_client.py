import unittest
import uuid

import httpx

from ulta_delta.api_client import DOWNLOAD_PATH, fetch_config
from ulta_delta.errors import MissingApiKeyError, RemoteError
from ulta_delta.settings import ApiSettings


SETTINGS = ApiSettings(base_url="https://api.test", user_agent="ulta-android/1.2.2.37", timeout=None)
WG_CONFIG = "[Interface]\nPrivateKey = abc\nAddress = 10.8.1.2/32\n"


def make_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class FetchConfigTests(unittest.TestCase):
    def test_request_shape(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": WG_CONFIG})

        with make_client(handler) as client:
            fetch_config("abc123", settings=SETTINGS, client=client)
            fetch_config("abc123", settings=SETTINGS, client=client)

        request = seen[0]
        self.assertEqual("GET", request.method)
        self.assertEqual("api.test", request.url.host)
        self.assertEqual(DOWNLOAD_PATH, request.url.path)
        self.assertEqual("abc123", request.url.params["public_request_id"])
        self.assertEqual("ulta-android/1.2.2.37", request.headers["User-Agent"])
        uuid.UUID(request.headers["X-Device-Id"])
        self.assertNotEqual(request.headers["X-Device-Id"], seen[1].headers["X-Device-Id"])

    def test_data_field(self) -> None:
        with make_client(lambda request: httpx.Response(200, json={"data": WG_CONFIG})) as client:
            self.assertEqual(WG_CONFIG, fetch_config("k", settings=SETTINGS, client=client))

    def test_plain_text_body(self) -> None:
        with make_client(lambda request: httpx.Response(200, text=WG_CONFIG)) as client:
            self.assertEqual(WG_CONFIG, fetch_config("k", settings=SETTINGS, client=client))

    def test_localized_error_message(self) -> None:
        body = {"error": {"localized_message": "Key expired"}}
        with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with self.assertRaisesRegex(RemoteError, "^API error: Key expired$"):
                fetch_config("k", settings=SETTINGS, client=client)

    def test_unknown_error(self) -> None:
        with make_client(lambda request: httpx.Response(200, json={"status": "fail"})) as client:
            with self.assertRaisesRegex(RemoteError, "^API error: Unknown error$"):
                fetch_config("k", settings=SETTINGS, client=client)

    def test_http_status_error(self) -> None:
        with make_client(lambda request: httpx.Response(404, text="nope")) as client:
            with self.assertRaises(RemoteError) as ctx:
                fetch_config("k", settings=SETTINGS, client=client)
        self.assertEqual("HTTP Error: 404 Not Found", str(ctx.exception))
        self.assertEqual(404, ctx.exception.status_code)

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with self.assertRaisesRegex(RemoteError, "^HTTP Error: connection refused"):
                fetch_config("k", settings=SETTINGS, client=client)

    def test_empty_key_sends_nothing(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text=WG_CONFIG)

        with make_client(handler) as client:
            with self.assertRaises(MissingApiKeyError):
                fetch_config("", settings=SETTINGS, client=client)
        self.assertEqual([], calls)

    def test_caller_client_stays_open(self) -> None:
        client = make_client(lambda request: httpx.Response(200, text=WG_CONFIG))
        fetch_config("k", settings=SETTINGS, client=client)
        self.assertFalse(client.is_closed)
        client.close()


if __name__ == "__main__":
    unittest.main()
