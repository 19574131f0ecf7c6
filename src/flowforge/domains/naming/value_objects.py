"""Naming Domain Value Objects."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ElementNaming:
    """Names derived for the target element of an action.

    Attributes:
        property_name: camelCase page-object property (``usernameField``)
        description: Human description (``Username field``)
        element_type: Inferred type suffix (Field, Button, Link, ...)
        method_prefix: PascalCase subject for method names (``Username``)
        parameter_name: camelCase parameter name (``username``)
        page: Page the element belongs to, when known
    """
    property_name: str
    description: str
    element_type: str
    method_prefix: str
    parameter_name: str
    page: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """``<Page>Page.<property>`` when the page is known, else the property."""
        if not self.page:
            return self.property_name
        return f"{self.page}Page.{self.property_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertyName": self.property_name,
            "description": self.description,
            "elementType": self.element_type,
            "methodPrefix": self.method_prefix,
            "parameterName": self.parameter_name,
            "page": self.page,
            "qualifiedName": self.qualified_name,
        }


@dataclass(frozen=True)
class MethodNaming:
    """Method identifier and Gherkin step phrase for an action or flow."""
    method_name: str
    step_pattern: str
    parameter_names: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "methodName": self.method_name,
            "stepPattern": self.step_pattern,
            "parameterNames": list(self.parameter_names),
        }


@dataclass(frozen=True)
class NamingBundle:
    """Everything the code generator needs to name one action.

    ``flow_method`` is set on the last action of a detected flow and
    names the page-object method that performs the whole flow.
    """
    element: ElementNaming
    method: MethodNaming
    flow_method: Optional[MethodNaming] = None

    @property
    def effective_method(self) -> MethodNaming:
        return self.flow_method or self.method

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element.to_dict(),
            "method": self.method.to_dict(),
            "flowMethod": self.flow_method.to_dict() if self.flow_method else None,
        }
