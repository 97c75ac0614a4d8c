"""Tests for esi/rewriter.py and esi/models.py.

Covers:
- PlaceholderRewriter.process() gating on capability
- Directive URL and markup format
- dispatcher-based filtering
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from edgeinclude.esi.codec import PlaceholderCodec, decode, encode
from edgeinclude.esi.dispatch import CallbackRegistry
from edgeinclude.esi.models import Directive, PlaceholderDescriptor
from edgeinclude.esi.negotiation import CapabilityNegotiator
from edgeinclude.esi.rewriter import PlaceholderRewriter

CAPABLE = {"Surrogate-Capability": 'key="ESI/1.0"'}


@pytest.fixture
def rewriter() -> PlaceholderRewriter:
    return PlaceholderRewriter(CapabilityNegotiator(), PlaceholderCodec())


@pytest.fixture
def descriptors() -> dict[str, PlaceholderDescriptor]:
    return {
        "<!--ph:1-->": PlaceholderDescriptor("<!--ph:1-->", "blockA", ("x", 1)),
        "<!--ph:2-->": PlaceholderDescriptor("<!--ph:2-->", markup="<p>static</p>"),
        "<!--ph:3-->": PlaceholderDescriptor("<!--ph:3-->", "cart", ({"user": 7},)),
    }


class TestDirective:
    def test_markup(self) -> None:
        directive = Directive(url="/esi/block/?id=abc")
        assert directive.markup == '<esi:include src="/esi/block/?id=abc" />'
        assert str(directive) == directive.markup

    def test_markup_escapes_attribute(self) -> None:
        directive = Directive(url='https://edge.example/esi/?a=1&b="2"')
        assert directive.markup == (
            '<esi:include src="https://edge.example/esi/?a=1&amp;b=&quot;2&quot;" />'
        )

    def test_immutable(self) -> None:
        directive = Directive(url="/x")
        with pytest.raises(AttributeError):
            directive.url = "/y"  # type: ignore[misc]


class TestPlaceholderDescriptor:
    def test_lazy_when_callback_present(self) -> None:
        assert PlaceholderDescriptor("k", "blockA").is_lazy is True
        assert PlaceholderDescriptor("k").is_lazy is False
        assert PlaceholderDescriptor("k", "").is_lazy is False


class TestProcess:
    """Tests for PlaceholderRewriter.process."""

    @pytest.mark.parametrize("headers", [{}, {"Surrogate-Capability": ""}, {"Other": "ESI/1.0"}])
    def test_no_capability_returns_empty(
        self,
        rewriter: PlaceholderRewriter,
        descriptors: dict[str, PlaceholderDescriptor],
        headers: dict[str, str],
    ) -> None:
        assert rewriter.process(headers, descriptors) == {}

    def test_rewrites_only_lazy_descriptors(
        self, rewriter: PlaceholderRewriter, descriptors: dict[str, PlaceholderDescriptor]
    ) -> None:
        result = rewriter.process(CAPABLE, descriptors)
        assert list(result) == ["<!--ph:1-->", "<!--ph:3-->"]

    def test_directive_url_encodes_callback(
        self, rewriter: PlaceholderRewriter, descriptors: dict[str, PlaceholderDescriptor]
    ) -> None:
        directive = rewriter.process(CAPABLE, descriptors)["<!--ph:1-->"]

        parts = urlsplit(directive.url)
        assert parts.path == "/esi/block/"
        identifier = parse_qs(parts.query)["id"][0]
        assert identifier == encode("blockA", ["x", 1])
        assert decode(identifier) == ("blockA", ["x", 1])

    def test_directive_markup_exact(
        self, rewriter: PlaceholderRewriter, descriptors: dict[str, PlaceholderDescriptor]
    ) -> None:
        directive = rewriter.process(CAPABLE, descriptors)["<!--ph:1-->"]
        identifier = encode("blockA", ["x", 1])
        assert directive.markup == f'<esi:include src="/esi/block/?id={identifier}" />'

    def test_empty_descriptor_map(self, rewriter: PlaceholderRewriter) -> None:
        assert rewriter.process(CAPABLE, {}) == {}

    def test_base_url_prefix(self) -> None:
        rewriter = PlaceholderRewriter(
            CapabilityNegotiator(),
            PlaceholderCodec(),
            base_url="https://origin.example.com/",
            fragment_path="/fragments/",
        )
        url = rewriter.fragment_url("blockA", [])
        assert url.startswith("https://origin.example.com/fragments/?id=")

    def test_same_descriptor_same_url(self, rewriter: PlaceholderRewriter) -> None:
        assert rewriter.fragment_url("blockA", ("x", 1)) == rewriter.fragment_url(
            "blockA", ["x", 1]
        )

    def test_dispatcher_filters_unknown_callbacks(
        self, descriptors: dict[str, PlaceholderDescriptor]
    ) -> None:
        registry = CallbackRegistry()
        registry.add("blockA", lambda label, count: f"{label}{count}")
        rewriter = PlaceholderRewriter(
            CapabilityNegotiator(), PlaceholderCodec(), dispatcher=registry
        )

        result = rewriter.process(CAPABLE, descriptors)

        assert list(result) == ["<!--ph:1-->"]

    def test_rewrite_skips_capability_check(
        self, rewriter: PlaceholderRewriter, descriptors: dict[str, PlaceholderDescriptor]
    ) -> None:
        assert len(rewriter.rewrite(descriptors)) == 2
