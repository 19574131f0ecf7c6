"""Recording Domain Value Objects."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from flowforge.domains.assertion.value_objects import VerificationPoint
from flowforge.domains.filtering.value_objects import FilterResult
from flowforge.domains.flow.value_objects import DetectedFlow, PageBoundary, UserFlow
from flowforge.domains.locator.value_objects import LocatorAnalysis
from flowforge.domains.naming.value_objects import NamingBundle
from flowforge.domains.shared.kernel import Action
from flowforge.domains.test_data.value_objects import ExtractedTestData


@dataclass(frozen=True)
class RecordingAnalysis:
    """Every stage's output for one recording.

    All per-action collections (``locators``, ``namings``) are aligned
    with ``actions``, the filtered sequence; flow spans, page segments
    and verification points index into it as well.
    """
    filter_result: FilterResult
    locators: Tuple[LocatorAnalysis, ...]
    flows: Tuple[DetectedFlow, ...]
    user_flows: Tuple[UserFlow, ...]
    pages: Tuple[PageBoundary, ...]
    namings: Tuple[NamingBundle, ...]
    verification_points: Tuple[VerificationPoint, ...]
    test_data: ExtractedTestData

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self.filter_result.actions

    def flow_at(self, index: int) -> Optional[DetectedFlow]:
        for flow in self.flows:
            if flow.covers(index):
                return flow
        return None

    def page_at(self, index: int) -> Optional[str]:
        for page in self.pages:
            if page.start_index <= index <= page.end_index:
                return page.page_name
        return None

    def steps(self) -> List[Dict[str, Any]]:
        """One entry per filtered action joining its locator and naming."""
        return [
            {
                "index": index,
                "action": action.to_dict(),
                "locator": locator.to_dict(),
                "naming": naming.to_dict(),
            }
            for index, (action, locator, naming) in enumerate(
                zip(self.actions, self.locators, self.namings)
            )
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filter": self.filter_result.to_dict(),
            "steps": self.steps(),
            "flows": [f.to_dict() for f in self.flows],
            "userFlows": [f.to_dict() for f in self.user_flows],
            "pages": [p.to_dict() for p in self.pages],
            "verificationPoints": [v.to_dict() for v in self.verification_points],
            "testData": self.test_data.to_dict(),
        }
