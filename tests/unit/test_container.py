"""Tests for the service container."""

import pytest

from flowforge.container import ServiceContainer, get_container, reset_container
from flowforge.domains.assertion import AssertionSuggester
from flowforge.domains.filtering import ActionFilter
from flowforge.domains.flow import FlowDetector, IntentSegmenter, PageBoundaryDetector
from flowforge.domains.locator import LocatorOptimizer
from flowforge.domains.naming import NamingEngine
from flowforge.domains.quality import CodeQualityAnalyzer
from flowforge.domains.recording import RecordingAnalyzer
from flowforge.domains.test_data import TestDataExtractor
from flowforge.models.config_models import IntelligenceConfig


class TestGlobalContainer:
    def test_get_container_is_singleton(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        c = get_container()
        reset_container()
        assert get_container() is not c

    def test_config_from_environment(self, monkeypatch):
        monkeypatch.setenv("FLOWFORGE_MAX_FALLBACKS", "2")
        assert get_container().config.MAX_FALLBACKS == 2


class TestLazyServices:
    @pytest.mark.parametrize(
        "attribute, service_type",
        [
            ("action_filter", ActionFilter),
            ("locator_optimizer", LocatorOptimizer),
            ("flow_detector", FlowDetector),
            ("intent_segmenter", IntentSegmenter),
            ("page_detector", PageBoundaryDetector),
            ("naming_engine", NamingEngine),
            ("assertion_suggester", AssertionSuggester),
            ("data_extractor", TestDataExtractor),
            ("quality_analyzer", CodeQualityAnalyzer),
            ("recording_analyzer", RecordingAnalyzer),
        ],
    )
    def test_service_is_singleton(self, attribute, service_type):
        c = get_container()
        assert getattr(c, f"_{attribute}") is None
        first = getattr(c, attribute)
        assert isinstance(first, service_type)
        assert getattr(c, attribute) is first

    def test_services_share_config(self):
        config = IntelligenceConfig(MAX_FALLBACKS=1)
        c = ServiceContainer(config=config)
        assert c.action_filter.config is config
        assert c.locator_optimizer.config is config
        assert c.naming_engine.config is config
        assert c.quality_analyzer.config is config


class TestRecordingAnalyzerWiring:
    def test_analyzer_reuses_container_services(self):
        c = get_container()
        analyzer = c.recording_analyzer
        assert analyzer.action_filter is c.action_filter
        assert analyzer.locator_optimizer is c.locator_optimizer
        assert analyzer.flow_detector is c.flow_detector
        assert analyzer.naming_engine is c.naming_engine
        assert analyzer.data_extractor is c.data_extractor

    def test_analyzer_has_event_publisher(self):
        events = []

        class Publisher:
            def publish(self, event):
                events.append(event)

        publisher = Publisher()
        c = ServiceContainer(event_publisher=publisher)
        assert c.recording_analyzer.event_publisher is publisher
        c.recording_analyzer.analyze([])
        assert len(events) == 1
