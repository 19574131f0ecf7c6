"""Recording Domain Services.

The RecordingAnalyzer runs a raw recording through every analysis stage
and returns one RecordingAnalysis:

    filter -> locators -> flows, intents, pages -> names
           -> verification points -> test data

Stages after the filter all work on the filtered actions, so every index
in the result refers to the same sequence.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from flowforge.domains.assertion.services import AssertionSuggester
from flowforge.domains.filtering.services import ActionFilter
from flowforge.domains.flow.page_boundaries import PageBoundaryDetector
from flowforge.domains.flow.services import FlowDetector, IntentSegmenter
from flowforge.domains.flow.value_objects import DetectedFlow, PageBoundary
from flowforge.domains.locator.services import LocatorOptimizer
from flowforge.domains.naming.aggregates import NameScope
from flowforge.domains.naming.services import NamingEngine
from flowforge.domains.naming.value_objects import NamingBundle
from flowforge.domains.quality.services import CodeQualityAnalyzer
from flowforge.domains.quality.value_objects import GeneratedCode, QualityReport
from flowforge.domains.shared.kernel import Action
from flowforge.domains.test_data.services import TestDataExtractor

from .events import RecordingAnalyzed
from .value_objects import RecordingAnalysis

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Protocol for publishing domain events."""
    def publish(self, event: object) -> None: ...


@dataclass
class RecordingAnalyzer:
    """Runs the full analysis chain over one recording.

    Usage from MCP tool adapter:

        analyzer = RecordingAnalyzer(action_filter, locator_optimizer, ...)
        analysis = analyzer.analyze(parse_actions(payload))
        analysis.flows[0].method_name     # "performLogin"
        analysis.test_data["password"]    # masked datum
        analysis.to_dict()                # JSON-ready bundle
    """
    action_filter: ActionFilter = field(default_factory=ActionFilter)
    locator_optimizer: LocatorOptimizer = field(default_factory=LocatorOptimizer)
    flow_detector: FlowDetector = field(default_factory=FlowDetector)
    intent_segmenter: IntentSegmenter = field(default_factory=IntentSegmenter)
    page_detector: PageBoundaryDetector = field(default_factory=PageBoundaryDetector)
    naming_engine: NamingEngine = field(default_factory=NamingEngine)
    assertion_suggester: AssertionSuggester = field(default_factory=AssertionSuggester)
    data_extractor: TestDataExtractor = field(default_factory=TestDataExtractor)
    quality_analyzer: CodeQualityAnalyzer = field(default_factory=CodeQualityAnalyzer)
    event_publisher: Optional[EventPublisher] = None

    def analyze(self, actions: Sequence[Action]) -> RecordingAnalysis:
        """Analyze a recording. Never raises for well-typed input."""
        filtered = self.action_filter.filter(actions)
        kept = filtered.actions

        locators = self.locator_optimizer.optimize_all(kept)
        flows = self.flow_detector.detect_or_default(kept)
        user_flows = self.intent_segmenter.segment(kept)
        pages = self.page_detector.detect(kept)
        namings = self.name_actions(kept, flows, pages)
        points = self.assertion_suggester.suggest(kept)
        test_data = self.data_extractor.extract(kept)

        analysis = RecordingAnalysis(
            filter_result=filtered,
            locators=tuple(locators),
            flows=tuple(flows),
            user_flows=tuple(user_flows),
            pages=tuple(pages),
            namings=tuple(namings),
            verification_points=tuple(points),
            test_data=test_data,
        )

        logger.info(
            f"Analyzed recording: {len(actions)} actions, {len(kept)} kept, "
            f"{len(flows)} flows, {len(pages)} pages, "
            f"{len(points)} verification points, {len(test_data)} data values"
        )
        self._publish(RecordingAnalyzed(
            action_count=len(actions),
            kept_count=len(kept),
            flow_count=len(flows),
            verification_count=len(points),
            data_count=len(test_data),
        ))
        return analysis

    def name_actions(
        self,
        actions: Sequence[Action],
        flows: Sequence[DetectedFlow],
        pages: Sequence[PageBoundary],
    ) -> List[NamingBundle]:
        """Name every action with its flow and page as context.

        Property names are unique per page; repeated actions on the same
        element share one property name.
        """
        scopes: Dict[Optional[str], NameScope] = {}
        claimed: Dict[Tuple[Optional[str], Tuple[str, str, str]], str] = {}
        bundles: List[NamingBundle] = []

        for index, action in enumerate(actions):
            flow = next((f for f in flows if f.covers(index)), None)
            page = next(
                (p.page_name for p in pages if p.start_index <= index <= p.end_index),
                None,
            )
            bundle = self.naming_engine.name_action(action, flow=flow, page=page, index=index)

            if action.target is not None:
                element_key = (
                    action.target.type, action.target.selector, action.target.name or ""
                )
                property_name = claimed.get((page, element_key))
                if property_name is None:
                    scope = scopes.setdefault(page, NameScope())
                    property_name = scope.claim(bundle.element.property_name)
                    claimed[(page, element_key)] = property_name
                if property_name != bundle.element.property_name:
                    bundle = replace(
                        bundle, element=replace(bundle.element, property_name=property_name)
                    )
            bundles.append(bundle)
        return bundles

    def analyze_quality(self, code: GeneratedCode) -> QualityReport:
        return self.quality_analyzer.analyze(code)

    def _publish(self, event: object) -> None:
        """Publish a domain event if a publisher is configured."""
        if self.event_publisher:
            self.event_publisher.publish(event)
