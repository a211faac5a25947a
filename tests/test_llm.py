import base64
import unittest
from types import SimpleNamespace
from unittest import mock

from fridgechef_backend.services.llm import VisionLLMClient, VisionLLMSettings


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class VisionLLMClientTests(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("fridgechef_backend.services.llm.OpenAI")
        self.openai_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.create = self.openai_cls.return_value.chat.completions.create
        self.settings = VisionLLMSettings(
            api_key="sk-ant-api03-test",
            model="claude-test",
            max_tokens=123,
        )

    def test_client_is_built_without_retries(self):
        VisionLLMClient(self.settings)

        kwargs = self.openai_cls.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "sk-ant-api03-test")
        self.assertEqual(kwargs["base_url"], "https://api.anthropic.com/v1/")
        self.assertEqual(kwargs["max_retries"], 0)

    def test_sends_image_and_prompt(self):
        self.create.return_value = _completion('{"title": "Soup"}')
        client = VisionLLMClient(self.settings)

        text = client.analyze_image(
            image_bytes=b"png-bytes", prompt="  Suggest a recipe ", mime_type="image/png"
        )

        self.assertEqual(text, '{"title": "Soup"}')
        kwargs = self.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "claude-test")
        self.assertEqual(kwargs["max_tokens"], 123)
        content = kwargs["messages"][0]["content"]
        expected_uri = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode("ascii")
        self.assertEqual(content[0], {"type": "image_url", "image_url": {"url": expected_uri}})
        self.assertEqual(content[1], {"type": "text", "text": "Suggest a recipe"})

    def test_missing_content_returns_empty_text(self):
        self.create.return_value = _completion(None)
        client = VisionLLMClient(self.settings)
        self.assertEqual(
            client.analyze_image(image_bytes=b"x", prompt="p", mime_type=None), ""
        )

    def test_rejects_empty_inputs(self):
        client = VisionLLMClient(self.settings)
        with self.assertRaises(ValueError):
            client.analyze_image(image_bytes=b"", prompt="p")
        with self.assertRaises(ValueError):
            client.analyze_image(image_bytes=b"x", prompt="   ")
        self.create.assert_not_called()

    def test_provider_errors_propagate(self):
        self.create.side_effect = RuntimeError("boom")
        client = VisionLLMClient(self.settings)
        with self.assertRaises(RuntimeError):
            client.analyze_image(image_bytes=b"x", prompt="p")


if __name__ == "__main__":
    unittest.main()
