"""Dependency graph of a synthesized CloudFormation template.

Edges come from ``Ref``, ``Fn::GetAtt``, ``Fn::Sub`` placeholders and
``DependsOn``. Pseudo parameters (``AWS::Region`` etc.) are not edges.
"""

import logging
import re
from graphlib import TopologicalSorter
from typing import Any, Dict, Iterator, List, Set

logger = logging.getLogger(__name__)

# ${Name} or ${Name.Attr}; ${!Literal} is an escape, not a reference
_SUB_PLACEHOLDER = re.compile(r"\$\{([^!}][^}]*)\}")


def _references(value: Any) -> Iterator[str]:
    """Yield every logical id or parameter name referenced inside ``value``."""
    if isinstance(value, list):
        for item in value:
            yield from _references(item)
        return
    if not isinstance(value, dict):
        return

    for key, inner in value.items():
        if key == "Ref" and isinstance(inner, str):
            yield inner
        elif key == "Fn::GetAtt":
            if isinstance(inner, list):
                yield inner[0]
            else:
                yield inner.split(".")[0]
        elif key == "Fn::Sub":
            if isinstance(inner, str):
                text, variables = inner, {}
            else:
                text = inner[0]
                variables = inner[1] if len(inner) > 1 else {}
            for placeholder in _SUB_PLACEHOLDER.findall(text):
                name = placeholder.split(".")[0]
                if name not in variables:
                    yield name
            yield from _references(variables)
        else:
            yield from _references(inner)


def _is_pseudo(name: str) -> bool:
    return name.startswith("AWS::")


def resource_dependencies(template: Dict[str, Any]) -> Dict[str, Set[str]]:
    """
    Map each resource's logical id to the ids it depends on.

    Args:
        template: Synthesized CloudFormation template

    Returns:
        Logical id -> referenced logical ids and parameter names
    """
    dependencies: Dict[str, Set[str]] = {}
    for logical_id, resource in template.get("Resources", {}).items():
        refs = {
            name
            for name in _references(resource.get("Properties", {}))
            if not _is_pseudo(name)
        }
        depends_on = resource.get("DependsOn", [])
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        refs.update(depends_on)
        dependencies[logical_id] = refs
    return dependencies


def dangling_references(template: Dict[str, Any]) -> Dict[str, Set[str]]:
    """
    Find references to ids the template does not declare.

    Resources and outputs are both checked. Outputs are reported under
    ``Outputs.<name>``.
    """
    known = (
        set(template.get("Resources", {}))
        | set(template.get("Parameters", {}))
        | set(template.get("Conditions", {}))
    )

    referencing = dict(resource_dependencies(template))
    for name, output in template.get("Outputs", {}).items():
        referencing[f"Outputs.{name}"] = {
            ref for ref in _references(output) if not _is_pseudo(ref)
        }

    dangling: Dict[str, Set[str]] = {}
    for source, refs in referencing.items():
        missing = refs - known
        if missing:
            dangling[source] = missing
    return dangling


def creation_order(template: Dict[str, Any]) -> List[str]:
    """
    Return resource logical ids in an order that satisfies every dependency.

    Raises:
        graphlib.CycleError: if the resources depend on each other in a cycle
    """
    resources = set(template.get("Resources", {}))
    graph = {
        logical_id: refs & resources
        for logical_id, refs in resource_dependencies(template).items()
    }
    order = list(TopologicalSorter(graph).static_order())
    logger.debug("Creation order: %s", " -> ".join(order))
    return order
