import json
import unittest

from fridgechef_backend.models import Difficulty
from fridgechef_backend.services.analysis import (
    AnalysisConfig,
    AnalysisDependencies,
    AnalysisInput,
    analyze_user_fridge,
    analyze_with_factory,
    create_default_dependencies,
)
from fridgechef_backend.services.errors import (
    AuthError,
    MissingApiKeyError,
    UpstreamFormatError,
    ValidationError,
)
from fridgechef_backend.services.uploads import UploadedImage

VALID_RECIPE = {
    "title": "Veggie Omelette",
    "description": "A fluffy omelette with peppers and cheese.",
    "cookingTime": "15 minutes",
    "difficulty": "Easy",
    "servings": 2,
    "ingredients": ["4 eggs", "1 bell pepper"],
    "instructions": ["Whisk the eggs.", "Cook and fold."],
}

IMAGE = UploadedImage(data=b"\xff\xd8\xff\xe0", content_type="image/jpeg", filename="fridge.jpg")


class _StubModelClient:
    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict[str, object]] = []

    def analyze_image(self, *, image_bytes, prompt, mime_type=None):
        self.calls.append(
            {"image_bytes": image_bytes, "prompt": prompt, "mime_type": mime_type}
        )
        if self.error is not None:
            raise self.error
        return self.response


def _deps(client: _StubModelClient, api_key: str = "sk-ant-api03-test") -> AnalysisDependencies:
    return AnalysisDependencies(model_client=client, api_key=api_key)


class AnalyzeUserFridgeTests(unittest.TestCase):
    def test_english_request_returns_recipe_unchanged(self):
        client = _StubModelClient(response=json.dumps(VALID_RECIPE))

        result = analyze_user_fridge(
            AnalysisInput(files=(IMAGE,), locale="en", user_settings=""),
            _deps(client),
        )

        self.assertEqual(result.recipe.to_dict(), VALID_RECIPE)
        self.assertEqual(list(result.recipe.to_dict()), list(VALID_RECIPE))
        self.assertEqual(result.recipe.difficulty, Difficulty.EASY)
        self.assertGreaterEqual(result.processing_time_ms, 0)
        self.assertEqual(len(client.calls), 1)
        call = client.calls[0]
        self.assertEqual(call["image_bytes"], IMAGE.data)
        self.assertEqual(call["mime_type"], "image/jpeg")
        self.assertIn('"difficulty": "Easy|Medium|Hard"', call["prompt"])

    def test_translated_difficulty_from_model_is_rejected(self):
        client = _StubModelClient(
            response=json.dumps({**VALID_RECIPE, "difficulty": "Fácil"})
        )

        with self.assertRaises(UpstreamFormatError):
            analyze_user_fridge(
                AnalysisInput(files=(IMAGE,), locale="es"), _deps(client)
            )
        self.assertTrue(client.calls[0]["prompt"].startswith("Analiza"))

    def test_settings_and_legacy_fields_reach_the_prompt(self):
        client = _StubModelClient(response=json.dumps(VALID_RECIPE))
        settings = json.dumps(
            {"cookingPreferences": {"cuisineTypes": ["thai"]}}
        )

        analyze_user_fridge(
            AnalysisInput(
                files=(IMAGE,),
                preferences="spicy please",
                dietary_restrictions='["vegan"]',
                user_settings=settings,
            ),
            _deps(client),
        )

        prompt = client.calls[0]["prompt"]
        self.assertIn("- Preferred cuisines: thai", prompt)
        self.assertIn("Additional preferences: spicy please", prompt)
        self.assertIn("Legacy dietary restrictions: vegan", prompt)

    def test_malformed_legacy_restrictions_do_not_block_request(self):
        client = _StubModelClient(response=json.dumps(VALID_RECIPE))
        result = analyze_user_fridge(
            AnalysisInput(files=(IMAGE,), dietary_restrictions="not json"),
            _deps(client),
        )
        self.assertEqual(result.recipe.title, VALID_RECIPE["title"])

    def test_local_failures_never_reach_the_model(self):
        cases = {
            "no image": (AnalysisInput(), ValidationError),
            "bad type": (
                AnalysisInput(
                    files=(UploadedImage(data=b"GIF", content_type="image/gif"),)
                ),
                ValidationError,
            ),
            "bad settings": (
                AnalysisInput(files=(IMAGE,), user_settings="not json"),
                ValidationError,
            ),
        }
        for name, (analysis_input, error_cls) in cases.items():
            with self.subTest(case=name):
                client = _StubModelClient(response=json.dumps(VALID_RECIPE))
                with self.assertRaises(error_cls):
                    analyze_user_fridge(analysis_input, _deps(client))
                self.assertEqual(client.calls, [])

    def test_invalid_key_format_is_auth_error(self):
        client = _StubModelClient(response=json.dumps(VALID_RECIPE))
        with self.assertRaises(AuthError) as ctx:
            analyze_user_fridge(
                AnalysisInput(files=(IMAGE,)), _deps(client, api_key="sk-openai-xyz")
            )
        self.assertEqual(str(ctx.exception), "Invalid API key format")
        self.assertEqual(client.calls, [])

    def test_model_errors_propagate_unchanged(self):
        error = ConnectionError("network down")
        client = _StubModelClient(error=error)
        with self.assertRaises(ConnectionError) as ctx:
            analyze_user_fridge(AnalysisInput(files=(IMAGE,)), _deps(client))
        self.assertIs(ctx.exception, error)

    def test_empty_model_output_is_upstream_error(self):
        client = _StubModelClient(response="   ")
        with self.assertRaises(UpstreamFormatError):
            analyze_user_fridge(AnalysisInput(files=(IMAGE,)), _deps(client))


class CreateDefaultDependenciesTests(unittest.TestCase):
    def setUp(self):
        self.built_settings = []

        def factory(settings):
            self.built_settings.append(settings)
            return _StubModelClient()

        self.factory = factory

    def test_personal_key_wins_over_shared_key(self):
        config = AnalysisConfig(
            shared_api_key="sk-ant-api-shared", client_factory=self.factory
        )

        deps = create_default_dependencies("sk-ant-api-personal", config=config)

        self.assertEqual(deps.api_key, "sk-ant-api-personal")
        self.assertTrue(deps.is_personal_key)
        self.assertEqual(self.built_settings[0].api_key, "sk-ant-api-personal")

    def test_falls_back_to_shared_key(self):
        config = AnalysisConfig(
            shared_api_key="sk-ant-api-shared",
            model="claude-test",
            client_factory=self.factory,
        )

        deps = create_default_dependencies(None, config=config)

        self.assertEqual(deps.api_key, "sk-ant-api-shared")
        self.assertFalse(deps.is_personal_key)
        self.assertEqual(self.built_settings[0].model, "claude-test")

    def test_each_call_builds_a_fresh_client(self):
        config = AnalysisConfig(
            shared_api_key="sk-ant-api-shared", client_factory=self.factory
        )

        first = create_default_dependencies("sk-ant-api-one", config=config)
        second = create_default_dependencies("sk-ant-api-two", config=config)

        self.assertIsNot(first.model_client, second.model_client)
        self.assertEqual(
            [s.api_key for s in self.built_settings],
            ["sk-ant-api-one", "sk-ant-api-two"],
        )

    def test_missing_keys(self):
        config = AnalysisConfig(client_factory=self.factory)
        with self.assertRaises(MissingApiKeyError):
            create_default_dependencies(None, config=config)
        self.assertEqual(self.built_settings, [])



class AnalyzeWithFactoryTests(unittest.TestCase):
    def setUp(self):
        self.client = _StubModelClient(response=json.dumps(VALID_RECIPE))
        self.requested_keys = []

    def _factory(self, api_key):
        self.requested_keys.append(api_key)
        return _deps(self.client)

    def test_rejected_upload_never_builds_dependencies(self):
        def missing_key(api_key):
            raise MissingApiKeyError("No API key available")

        with self.assertRaises(ValidationError) as ctx:
            analyze_with_factory(AnalysisInput(), missing_key)
        self.assertEqual(str(ctx.exception), "No image file provided")

        with self.assertRaises(ValidationError):
            analyze_with_factory(
                AnalysisInput(files=(IMAGE,), user_settings="not json"), self._factory
            )
        self.assertEqual(self.requested_keys, [])

    def test_dependencies_built_with_personal_key_after_validation(self):
        result = analyze_with_factory(
            AnalysisInput(files=(IMAGE,), api_key="sk-ant-api-personal"), self._factory
        )
        self.assertEqual(self.requested_keys, ["sk-ant-api-personal"])
        self.assertEqual(result.recipe.title, VALID_RECIPE["title"])
        self.assertEqual(len(self.client.calls), 1)

    def test_missing_key_surfaces_for_valid_input(self):
        def missing_key(api_key):
            raise MissingApiKeyError("No API key available")

        with self.assertRaises(MissingApiKeyError):
            analyze_with_factory(AnalysisInput(files=(IMAGE,)), missing_key)


if __name__ == "__main__":
    unittest.main()
