import unittest

import requests

from weather_agent.ollama_client import OllamaClient


class DummyResponse:
    def __init__(self, status_code=200, content="ok", tool_calls=None):
        self.status_code = status_code
        self._content = content
        self._tool_calls = tool_calls
        self.text = content
        self.elapsed = type("Elapsed", (), {"total_seconds": lambda self: 0.123})()

    def json(self):
        message = {"role": "assistant", "content": self._content}
        if self._tool_calls is not None:
            message["tool_calls"] = self._tool_calls
        return {"message": message}


class TestOllamaClient(unittest.TestCase):
    def setUp(self):
        from weather_agent import ollama_client as oc
        self.oc = oc
        self._orig_post = oc.requests.post
        self.payloads = []

    def tearDown(self):
        self.oc.requests.post = self._orig_post

    def _fake(self, *responses):
        queue = list(responses)

        def fake_post(url, json=None, timeout=None):
            self.payloads.append(json)
            item = queue.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        self.oc.requests.post = fake_post

    def test_chat_success(self):
        self._fake(DummyResponse(200, "hi"))
        client = OllamaClient()
        out = client.chat([{"role": "user", "content": "hi"}])
        self.assertEqual(out, "hi")
        self.assertFalse(self.payloads[0]["stream"])
        self.assertNotIn("tools", self.payloads[0])
        self.assertNotIn("format", self.payloads[0])

    def test_chat_message_returns_tool_calls_and_sends_tools(self):
        calls = [{"function": {"name": "weatherTool", "arguments": {"location": "Paris"}}}]
        self._fake(DummyResponse(200, "", tool_calls=calls))
        tools = [{"type": "function", "function": {"name": "weatherTool"}}]
        msg = OllamaClient(model="m1").chat_message([{"role": "user", "content": "hi"}], tools=tools)
        self.assertEqual(msg["tool_calls"], calls)
        self.assertEqual(msg["content"], "")
        self.assertEqual(self.payloads[0]["tools"], tools)
        self.assertEqual(self.payloads[0]["model"], "m1")

    def test_chat_passes_format_schema(self):
        self._fake(DummyResponse(200, '{"a": 1}'))
        schema = {"type": "object"}
        out = OllamaClient().chat([], format=schema)
        self.assertEqual(out, '{"a": 1}')
        self.assertEqual(self.payloads[0]["format"], schema)

    def test_chat_non_200(self):
        self._fake(DummyResponse(500, "err"))
        with self.assertRaises(RuntimeError):
            OllamaClient().chat([])

    def test_eof_is_retried_once(self):
        self._fake(DummyResponse(500, "unexpected EOF"), DummyResponse(200, "recovered"))
        client = OllamaClient()
        client.retry_backoff_sec = 0
        self.assertEqual(client.chat([]), "recovered")
        self.assertEqual(len(self.payloads), 2)

    def test_network_error_raises_after_retries(self):
        boom = requests.exceptions.ConnectionError("down")
        self._fake(boom, boom)
        client = OllamaClient()
        client.retry_backoff_sec = 0
        with self.assertRaises(requests.exceptions.ConnectionError):
            client.chat([])


if __name__ == "__main__":
    unittest.main()
