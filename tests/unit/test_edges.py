"""Unit tests for edge extraction."""

import logging
from typing import Any

import pytest

from cf_to_mermaid.cloudformation.template import template_from_document
from cf_to_mermaid.extraction.edges import EDGE_RULES, EdgeExtractor, extract_graph
from cf_to_mermaid.models import Edge, Node, ResourceKind
from tests.fixtures.documents import (
    api_method,
    event_source_mapping,
    lambda_function,
    lambda_invoke_uri,
    sqs_queue,
)

API = ResourceKind.API_GATEWAY_METHOD
LAMBDA = ResourceKind.LAMBDA_FUNCTION
QUEUE = ResourceKind.SQS_QUEUE


def _edges(resources: dict[str, Any], deduplicate: bool = False) -> list[tuple[str, str]]:
    template = template_from_document({"Resources": resources})
    return [
        (edge.source.name, edge.target.name)
        for edge in extract_graph(template, deduplicate=deduplicate)
    ]


class TestEdgeRules:
    """Tests for the rule table."""

    def test_every_kind_has_a_rule(self) -> None:
        """Test no resource kind is left without a rule."""
        assert set(EDGE_RULES) == set(ResourceKind)

    def test_empty_template(self) -> None:
        """Test a template without resources yields no edges."""
        assert _edges({}) == []

    def test_endpoints_alone_yield_nothing(self) -> None:
        """Test functions and queues never produce edges by themselves."""
        assert _edges({"Fn": lambda_function(), "Q": sqs_queue()}) == []


class TestApiGatewayMethod:
    """Tests for API method -> Lambda edges."""

    def test_sub_integration_uri(self) -> None:
        """Test an invoke URI built with Fn::Sub links the method to the function."""
        edges = _edges({"Fn": lambda_function(), "Api": api_method(lambda_invoke_uri("Fn"))})

        assert edges == [("Api", "Fn")]

    def test_edge_carries_kinds(self) -> None:
        """Test edge endpoints carry their node kinds."""
        template = template_from_document(
            {"Resources": {"Fn": lambda_function(), "Api": api_method(lambda_invoke_uri("Fn"))}}
        )

        graph = extract_graph(template)

        assert list(graph) == [Edge(Node("Api", API), Node("Fn", LAMBDA))]

    def test_getatt_integration_uri(self) -> None:
        """Test a GetAtt anywhere in the integration is followed."""
        method = api_method({"Fn::Join": ["", ["arn:", {"Fn::GetAtt": ["Fn", "Arn"]}]]})

        assert _edges({"Fn": lambda_function(), "Api": method}) == [("Api", "Fn")]

    def test_multiple_functions_in_reference_order(self) -> None:
        """Test each referenced function gets an edge, in reference order."""
        method = api_method({"Fn::Sub": "${Second.Arn}/${First.Arn}"})

        edges = _edges({"First": lambda_function(), "Second": lambda_function(), "Api": method})

        assert edges == [("Api", "Second"), ("Api", "First")]

    def test_non_lambda_reference_ignored(self) -> None:
        """Test references to other kinds add nothing."""
        method = api_method({"Fn::Sub": "${Q.Arn}/${Role.Arn}"})

        edges = _edges(
            {"Q": sqs_queue(), "Role": {"Type": "AWS::IAM::Role"}, "Api": method}
        )

        assert edges == []

    def test_references_outside_integration_ignored(self) -> None:
        """Test only the Integration property is inspected."""
        method = {
            "Type": "AWS::ApiGateway::Method",
            "Properties": {"AuthorizerId": {"Ref": "Fn"}, "HttpMethod": "GET"},
        }

        assert _edges({"Fn": lambda_function(), "Api": method}) == []

    def test_dangling_reference_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test an unknown target is skipped and logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="cf_to_mermaid"):
            edges = _edges({"Api": api_method(lambda_invoke_uri("Gone"))})

        assert edges == []
        assert "unknown resource Gone" in caplog.text


class TestEventSourceMapping:
    """Tests for SQS queue -> Lambda edges."""

    def test_queue_to_function(self) -> None:
        """Test a mapping links its queue to its function."""
        edges = _edges(
            {
                "Fn": lambda_function(),
                "Q": sqs_queue(),
                "Map": event_source_mapping({"Fn::GetAtt": ["Q", "Arn"]}, {"Ref": "Fn"}),
            }
        )

        assert edges == [("Q", "Fn")]

    def test_mapping_is_not_a_node(self) -> None:
        """Test the mapping itself never appears in the graph."""
        template = template_from_document(
            {
                "Resources": {
                    "Fn": lambda_function(),
                    "Q": sqs_queue(),
                    "Map": event_source_mapping({"Fn::GetAtt": ["Q", "Arn"]}, {"Ref": "Fn"}),
                }
            }
        )

        names = [node.name for node in extract_graph(template).nodes]

        assert names == ["Q", "Fn"]

    def test_function_given_by_getatt(self) -> None:
        """Test the target may also be given with GetAtt."""
        edges = _edges(
            {
                "Fn": lambda_function(),
                "Q": sqs_queue(),
                "Map": event_source_mapping(
                    {"Fn::GetAtt": "Q.Arn"}, {"Fn::GetAtt": ["Fn", "Arn"]}
                ),
            }
        )

        assert edges == [("Q", "Fn")]

    def test_non_queue_source_ignored(self) -> None:
        """Test stream and other sources produce no edge."""
        edges = _edges(
            {
                "Fn": lambda_function(),
                "Stream": {"Type": "AWS::Kinesis::Stream"},
                "Map": event_source_mapping({"Fn::GetAtt": ["Stream", "Arn"]}, {"Ref": "Fn"}),
            }
        )

        assert edges == []

    def test_literal_arns_ignored(self) -> None:
        """Test plain ARN strings are not followed."""
        edges = _edges(
            {
                "Fn": lambda_function(),
                "Q": sqs_queue(),
                "Map": event_source_mapping("arn:aws:sqs:us-east-1:123:Q", "Fn"),
            }
        )

        assert edges == []

    def test_missing_source(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a mapping whose queue is dangling yields nothing and does not fail."""
        with caplog.at_level(logging.DEBUG, logger="cf_to_mermaid"):
            edges = _edges(
                {
                    "Fn": lambda_function(),
                    "Map": event_source_mapping({"Fn::GetAtt": ["Gone", "Arn"]}, {"Ref": "Fn"}),
                }
            )

        assert edges == []
        assert "Map.EventSourceArn references unknown resource Gone" in caplog.text

    def test_missing_function(self) -> None:
        """Test a mapping whose function is dangling yields nothing."""
        edges = _edges(
            {
                "Q": sqs_queue(),
                "Map": event_source_mapping({"Fn::GetAtt": ["Q", "Arn"]}, {"Ref": "Gone"}),
            }
        )

        assert edges == []

    def test_missing_properties(self) -> None:
        """Test a mapping without properties yields nothing."""
        edges = _edges({"Map": {"Type": "AWS::Lambda::EventSourceMapping"}})

        assert edges == []


class TestExtraction:
    """Tests for whole-template extraction."""

    def test_fan_in(self, fan_in_document: dict[str, Any]) -> None:
        """Test two producers feeding one function, in declaration order."""
        assert _edges(fan_in_document["Resources"]) == [
            ("MyAPI", "MyLambda"),
            ("MyQueue", "MyLambda"),
        ]

    def test_declaration_order_not_name_order(self) -> None:
        """Test edges follow resource declaration order."""
        edges = _edges(
            {
                "Fn": lambda_function(),
                "Zed": api_method(lambda_invoke_uri("Fn")),
                "Alpha": api_method(lambda_invoke_uri("Fn")),
            }
        )

        assert edges == [("Zed", "Fn"), ("Alpha", "Fn")]

    def test_deterministic(self, fan_in_document: dict[str, Any]) -> None:
        """Test repeated extraction gives identical graphs."""
        template = template_from_document(fan_in_document)

        assert extract_graph(template) == extract_graph(template)

    def test_unsupported_resources_skipped(self) -> None:
        """Test unsupported resources neither fail nor add edges."""
        edges = _edges(
            {
                "Role": {"Type": "AWS::IAM::Role", "Properties": {"Fn": {"Ref": "Fn"}}},
                "Odd": {"Properties": "not-a-mapping"},
                "Fn": lambda_function(),
                "Api": api_method(lambda_invoke_uri("Fn")),
            }
        )

        assert edges == [("Api", "Fn")]

    def test_duplicates_kept_by_default(self) -> None:
        """Test two mappings wiring the same pair produce two edges."""
        resources = {
            "Fn": lambda_function(),
            "Q": sqs_queue(),
            "MapA": event_source_mapping({"Fn::GetAtt": ["Q", "Arn"]}, {"Ref": "Fn"}),
            "MapB": event_source_mapping({"Fn::GetAtt": ["Q", "Arn"]}, {"Ref": "Fn"}),
        }

        assert _edges(resources) == [("Q", "Fn"), ("Q", "Fn")]
        assert _edges(resources, deduplicate=True) == [("Q", "Fn")]

    def test_edges_for_single_resource(self, fan_in_document: dict[str, Any]) -> None:
        """Test per-resource edges match the rule for its kind."""
        template = template_from_document(fan_in_document)
        extractor = EdgeExtractor()

        assert extractor.edges_for(template.get("MyLambda"), template) == []
        assert [
            (edge.source.name, edge.target.name)
            for edge in extractor.edges_for(template.get("MyMapping"), template)
        ] == [("MyQueue", "MyLambda")]
