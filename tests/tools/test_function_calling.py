import unittest
from types import SimpleNamespace

from gemini_afc.models.content import (
    Candidate,
    Content,
    FunctionCall,
    GenerateContentResponse,
    Part,
)
from gemini_afc.tools.executor import Failure, FailureKind, Success
from gemini_afc.tools.function_calling import (
    CallDescriptor,
    build_function_response_turn,
    extract_function_calls,
    extract_model_content_for_api,
    extract_model_turn,
    has_function_calls,
)


def _raw_response(*parts, role="model"):
    return {"candidates": [{"content": {"role": role, "parts": list(parts)}}]}


class TestExtractFunctionCalls(unittest.TestCase):
    def test_typed_response_assigns_positional_ids(self):
        """Calls without a provider ID get call_<index>."""
        response = GenerateContentResponse(
            candidates=[
                Candidate(
                    content=Content(
                        role="model",
                        parts=[
                            Part(text="Let me check."),
                            Part(function_call=FunctionCall(name="get_weather", args={"location": "Paris"})),
                            Part(function_call=FunctionCall(name="get_time", args={})),
                        ],
                    )
                )
            ]
        )
        calls = extract_function_calls(response)
        self.assertEqual(
            calls,
            [
                CallDescriptor(id="call_0", name="get_weather", args={"location": "Paris"}),
                CallDescriptor(id="call_1", name="get_time", args={}),
            ],
        )

    def test_raw_camel_case_keeps_provider_id(self):
        response = _raw_response(
            {"functionCall": {"id": "fc-123", "name": "lookup", "args": {"q": "x"}}}
        )
        calls = extract_function_calls(response)
        self.assertEqual(calls, [CallDescriptor(id="fc-123", name="lookup", args={"q": "x"})])

    def test_raw_snake_case(self):
        response = _raw_response({"function_call": {"name": "lookup", "args": {"q": "y"}}})
        calls = extract_function_calls(response)
        self.assertEqual(calls, [CallDescriptor(id="call_0", name="lookup", args={"q": "y"})])

    def test_part_wrapper(self):
        """A part wrapped one level deep under 'part' is still recognized."""
        response = _raw_response({"part": {"functionCall": {"name": "wrapped", "args": {}}}})
        calls = extract_function_calls(response)
        self.assertEqual([call.name for call in calls], ["wrapped"])

    def test_ids_count_across_candidates(self):
        response = {
            "candidates": [
                {"content": {"parts": [{"functionCall": {"name": "a"}}]}},
                {"content": {"parts": [{"text": "no call here"}]}},
                {"content": {"parts": [{"functionCall": {"name": "b"}}, {"functionCall": {"name": "c"}}]}},
            ]
        }
        calls = extract_function_calls(response)
        self.assertEqual([(c.id, c.name) for c in calls], [("call_0", "a"), ("call_1", "b"), ("call_2", "c")])

    def test_missing_args_become_empty_mapping(self):
        response = _raw_response({"functionCall": {"name": "noargs", "args": None}})
        self.assertEqual(extract_function_calls(response)[0].args, {})

    def test_json_string_args_are_decoded(self):
        response = _raw_response({"functionCall": {"name": "f", "args": '{"n": 3}'}})
        self.assertEqual(extract_function_calls(response)[0].args, {"n": 3})

    def test_undecodable_args_become_empty_mapping(self):
        response = _raw_response({"functionCall": {"name": "f", "args": "{not json"}})
        self.assertEqual(extract_function_calls(response)[0].args, {})

    def test_non_mapping_call_payloads_are_ignored(self):
        """Scalar or list values under functionCall are not calls."""
        for payload in ("garbage", 42, ["name", "args"], True):
            with self.subTest(payload=payload):
                response = _raw_response({"functionCall": payload}, {"function_call": payload})
                self.assertEqual(extract_function_calls(response), [])
                self.assertFalse(has_function_calls(response))

    def test_non_mapping_payload_inside_wrapper_is_ignored(self):
        response = _raw_response({"part": {"functionCall": "garbage"}})
        self.assertEqual(extract_function_calls(response), [])

    def test_duck_typed_part_with_scalar_call_is_ignored(self):
        part = SimpleNamespace(function_call="garbage")
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
        self.assertEqual(extract_function_calls(response), [])

    def test_duck_typed_objects(self):
        """Objects exposing candidates/content/parts attributes are accepted."""
        call = SimpleNamespace(name="get_time", args=None, id=None)
        part = SimpleNamespace(function_call=call, text=None)
        response = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))]
        )
        self.assertEqual(extract_function_calls(response), [CallDescriptor("call_0", "get_time", {})])

    def test_unrecognized_shapes_yield_nothing(self):
        for response in (None, {}, {"candidates": None}, {"candidates": []}, "text", 42, {"candidates": [{}]}):
            with self.subTest(response=response):
                self.assertEqual(extract_function_calls(response), [])
                self.assertFalse(has_function_calls(response))

    def test_text_only_response_has_no_calls(self):
        response = _raw_response({"text": "The answer is 42."})
        self.assertFalse(has_function_calls(response))

    def test_extraction_is_pure(self):
        response = _raw_response(
            {"functionCall": {"name": "a", "args": {"x": 1}}},
            {"functionCall": {"name": "b"}},
        )
        first = extract_function_calls(response)
        second = extract_function_calls(response)
        self.assertEqual(first, second)
        self.assertTrue(has_function_calls(response))

    def test_args_are_copied(self):
        args = {"x": 1}
        response = _raw_response({"functionCall": {"name": "a", "args": args}})
        extract_function_calls(response)[0].args["x"] = 2
        self.assertEqual(args, {"x": 1})


class TestModelTurn(unittest.TestCase):
    def test_typed_response_keeps_all_parts(self):
        response = GenerateContentResponse(
            candidates=[
                Candidate(
                    content=Content(
                        role="model",
                        parts=[
                            Part(text="Checking."),
                            Part(
                                function_call=FunctionCall(name="get_weather", args={"location": "Paris"}),
                                thought_signature="sig-1",
                            ),
                        ],
                    )
                )
            ]
        )
        self.assertEqual(
            extract_model_turn(response),
            {
                "role": "model",
                "parts": [
                    {"text": "Checking."},
                    {
                        "functionCall": {"name": "get_weather", "args": {"location": "Paris"}},
                        "thoughtSignature": "sig-1",
                    },
                ],
            },
        )

    def test_snake_case_keys_are_converted(self):
        response = _raw_response(
            {"function_call": {"name": "f", "args": {"snake_key": 1}}},
            {"inline_data": {"mime_type": "image/png", "data": "aGk="}},
        )
        turn = extract_model_turn(response)
        self.assertEqual(
            turn["parts"],
            [
                # user-supplied args keep their own keys
                {"functionCall": {"name": "f", "args": {"snake_key": 1}}},
                {"inlineData": {"mimeType": "image/png", "data": "aGk="}},
            ],
        )

    def test_camel_case_passes_through(self):
        part = {"fileData": {"fileUri": "gs://bucket/doc.pdf", "mimeType": "application/pdf"}}
        turn = extract_model_turn(_raw_response(part))
        self.assertEqual(turn["parts"], [part])

    def test_wrapper_is_unwrapped(self):
        turn = extract_model_turn(_raw_response({"part": {"text": "hi"}}))
        self.assertEqual(turn["parts"], [{"text": "hi"}])

    def test_only_first_candidate_is_used(self):
        response = {
            "candidates": [
                {"content": {"parts": [{"text": "first"}]}},
                {"content": {"parts": [{"text": "second"}]}},
            ]
        }
        self.assertEqual(extract_model_turn(response)["parts"], [{"text": "first"}])

    def test_no_candidates(self):
        self.assertEqual(extract_model_turn({"candidates": []}), {"role": "model", "parts": []})
        self.assertEqual(extract_model_turn(None), {"role": "model", "parts": []})

    def test_alias(self):
        self.assertIs(extract_model_content_for_api, extract_model_turn)


class TestFunctionResponseTurn(unittest.TestCase):
    def test_success_and_failure_parts(self):
        calls = [
            CallDescriptor("call_0", "add", {"a": 2, "b": 3}),
            CallDescriptor("call_1", "nope", {}),
            CallDescriptor("call_2", "explode", {}),
        ]
        results = [
            Success(5),
            Failure(FailureKind.UNKNOWN_FUNCTION, "nope"),
            Failure(FailureKind.EXECUTION_ERROR, RuntimeError("Boom!")),
        ]
        turn = build_function_response_turn(calls, results)
        self.assertEqual(turn["role"], "function")
        self.assertEqual(
            turn["parts"],
            [
                {"functionResponse": {"name": "add", "id": "call_0", "response": {"result": 5}}},
                {"functionResponse": {"name": "nope", "id": "call_1", "response": {"error": "Unknown function: nope"}}},
                {"functionResponse": {"name": "explode", "id": "call_2", "response": {"error": "Execution error: Boom!"}}},
            ],
        )

    def test_turn_parses_as_content(self):
        """The built turn is valid wire content."""
        turn = build_function_response_turn([CallDescriptor("call_0", "add", {})], [Success(5)])
        content = Content.from_api(turn)
        self.assertEqual(content.role, "function")
        self.assertEqual(content.parts[0].function_response.response, {"result": 5})

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            build_function_response_turn([CallDescriptor("call_0", "add", {})], [])


if __name__ == "__main__":
    unittest.main()
