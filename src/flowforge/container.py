"""Dependency Injection Container for the flowforge bounded contexts.

This container wires every analysis service to one shared
IntelligenceConfig:
- Filtering Context: noise and redundancy removal
- Locator Context: stability scoring and fallbacks
- Flow Context: flow detection, intent segmentation, page boundaries
- Naming, Assertion and Test Data Contexts
- Quality Context: scoring of generated code
- Recording Context: the end-to-end analyzer

Usage:
    from flowforge.container import get_container

    container = get_container()
    analysis = container.recording_analyzer.analyze(actions)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from flowforge.models.config_models import IntelligenceConfig

if TYPE_CHECKING:
    from flowforge.domains.assertion import AssertionSuggester
    from flowforge.domains.filtering import ActionFilter
    from flowforge.domains.flow import FlowDetector, IntentSegmenter, PageBoundaryDetector
    from flowforge.domains.locator import LocatorOptimizer
    from flowforge.domains.naming import NamingEngine
    from flowforge.domains.quality import CodeQualityAnalyzer
    from flowforge.domains.recording import EventPublisher, RecordingAnalyzer
    from flowforge.domains.test_data import TestDataExtractor

logger = logging.getLogger(__name__)

# Singleton container instance
_container: Optional["ServiceContainer"] = None


@dataclass
class ServiceContainer:
    """Simple dependency injection container for the analysis services.

    Services are created on first access and shared afterwards. All of
    them are stateless between calls, so one instance serves every
    recording.

    Attributes:
        config: Configuration every service is built from
        event_publisher: Receives domain events from the recording analyzer
    """

    config: IntelligenceConfig = field(default_factory=IntelligenceConfig.from_env)
    event_publisher: Optional["EventPublisher"] = None

    _action_filter: Optional["ActionFilter"] = field(default=None, repr=False)
    _locator_optimizer: Optional["LocatorOptimizer"] = field(default=None, repr=False)
    _flow_detector: Optional["FlowDetector"] = field(default=None, repr=False)
    _intent_segmenter: Optional["IntentSegmenter"] = field(default=None, repr=False)
    _page_detector: Optional["PageBoundaryDetector"] = field(default=None, repr=False)
    _naming_engine: Optional["NamingEngine"] = field(default=None, repr=False)
    _assertion_suggester: Optional["AssertionSuggester"] = field(default=None, repr=False)
    _data_extractor: Optional["TestDataExtractor"] = field(default=None, repr=False)
    _quality_analyzer: Optional["CodeQualityAnalyzer"] = field(default=None, repr=False)
    _recording_analyzer: Optional["RecordingAnalyzer"] = field(default=None, repr=False)

    @property
    def action_filter(self) -> "ActionFilter":
        """Get the action filter."""
        if self._action_filter is None:
            from flowforge.domains.filtering import ActionFilter
            self._action_filter = ActionFilter(self.config)
        return self._action_filter

    @property
    def locator_optimizer(self) -> "LocatorOptimizer":
        """Get the locator optimizer."""
        if self._locator_optimizer is None:
            from flowforge.domains.locator import LocatorOptimizer
            self._locator_optimizer = LocatorOptimizer(self.config)
        return self._locator_optimizer

    @property
    def flow_detector(self) -> "FlowDetector":
        """Get the flow detector with the built-in patterns."""
        if self._flow_detector is None:
            from flowforge.domains.flow import FlowDetector
            self._flow_detector = FlowDetector()
        return self._flow_detector

    @property
    def intent_segmenter(self) -> "IntentSegmenter":
        if self._intent_segmenter is None:
            from flowforge.domains.flow import IntentSegmenter
            self._intent_segmenter = IntentSegmenter(self.config)
        return self._intent_segmenter

    @property
    def page_detector(self) -> "PageBoundaryDetector":
        if self._page_detector is None:
            from flowforge.domains.flow import PageBoundaryDetector
            self._page_detector = PageBoundaryDetector()
        return self._page_detector

    @property
    def naming_engine(self) -> "NamingEngine":
        """Get the naming engine."""
        if self._naming_engine is None:
            from flowforge.domains.naming import NamingEngine
            self._naming_engine = NamingEngine(self.config)
        return self._naming_engine

    @property
    def assertion_suggester(self) -> "AssertionSuggester":
        """Get the assertion suggester."""
        if self._assertion_suggester is None:
            from flowforge.domains.assertion import AssertionSuggester
            self._assertion_suggester = AssertionSuggester(self.config)
        return self._assertion_suggester

    @property
    def data_extractor(self) -> "TestDataExtractor":
        """Get the test data extractor."""
        if self._data_extractor is None:
            from flowforge.domains.test_data import TestDataExtractor
            self._data_extractor = TestDataExtractor()
        return self._data_extractor

    @property
    def quality_analyzer(self) -> "CodeQualityAnalyzer":
        """Get the code quality analyzer."""
        if self._quality_analyzer is None:
            from flowforge.domains.quality import CodeQualityAnalyzer
            self._quality_analyzer = CodeQualityAnalyzer(self.config)
        return self._quality_analyzer

    @property
    def recording_analyzer(self) -> "RecordingAnalyzer":
        """Get the end-to-end recording analyzer, sharing this container's services."""
        if self._recording_analyzer is None:
            from flowforge.domains.recording import RecordingAnalyzer
            self._recording_analyzer = RecordingAnalyzer(
                action_filter=self.action_filter,
                locator_optimizer=self.locator_optimizer,
                flow_detector=self.flow_detector,
                intent_segmenter=self.intent_segmenter,
                page_detector=self.page_detector,
                naming_engine=self.naming_engine,
                assertion_suggester=self.assertion_suggester,
                data_extractor=self.data_extractor,
                quality_analyzer=self.quality_analyzer,
                event_publisher=self.event_publisher,
            )
            logger.debug("Created recording analyzer")
        return self._recording_analyzer


def get_container() -> ServiceContainer:
    """Get the singleton service container.

    Returns:
        The shared ServiceContainer instance
    """
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Reset the container (for testing).

    Clears the singleton instance so a fresh container is created
    on next get_container() call.
    """
    global _container
    _container = None
