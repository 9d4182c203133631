"""
Tree construction for hierarchical select fields

Turns a flat, self referencing record set (identity, label, parent)
into the nested node structure consumed by the select tree widget::

    records = [
        Record(id=1, label="Root", parent=None),
        Record(id=2, label="Child", parent=1),
    ]
    build_tree(records)
    # [Node(name="Root", value=1, disabled=False,
    #       children=[Node(name="Child", value=2, disabled=False)])]

Records whose parent is neither the configured sentinel nor an existing
identity are orphans and never show up on the tree.
"""

import logging
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Dict, FrozenSet, Hashable, Iterable, List, Optional, Tuple

from .const import LOGMSG_DEB_TREE_BUILT, LOGMSG_DEB_TREE_ORPHANS, LOGMSG_ERR_TREE_CYCLE
from .exceptions import TreeCycleError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    """Flat input item, decided at the data source boundary."""
    id: Hashable
    label: str
    parent: Optional[Hashable] = None


@dataclass
class Node:
    """Tree node. ``children`` is None for leaves, never an empty list."""
    name: str
    value: Hashable
    disabled: bool = False
    children: Optional[List["Node"]] = None

    def _as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "disabled": self.disabled}

    def to_dict(self) -> Dict[str, Any]:
        """Nested dict form, ``children`` only present on branch nodes"""
        result = self._as_dict()
        stack = [(self, result)]
        while stack:
            node, data = stack.pop()
            if node.children is None:
                continue
            data["children"] = []
            for child in node.children:
                child_data = child._as_dict()
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result


@dataclass
class TreeConfig:
    """
    How to read records and which parent value marks a root.

    :param parent_null_value: The root sentinel, compared by equality
    :param root_aliases: Other parent values explicitly declared
        equivalent to the sentinel
    :param disabled_ids: Identities rendered as disabled nodes
    :param get_id: Returns a record's identity
    :param get_label: Returns a record's display label
    :param get_parent: Returns a record's parent reference
    """
    parent_null_value: Optional[Hashable] = None
    root_aliases: Tuple[Hashable, ...] = ()
    disabled_ids: FrozenSet[Hashable] = frozenset()
    get_id: Callable[[Any], Hashable] = attrgetter("id")
    get_label: Callable[[Any], str] = attrgetter("label")
    get_parent: Callable[[Any], Optional[Hashable]] = attrgetter("parent")

    def __post_init__(self):
        self.root_aliases = tuple(self.root_aliases)
        self.disabled_ids = frozenset(self.disabled_ids)

    @classmethod
    def for_attributes(
        cls,
        title_attribute: str,
        parent_attribute: str,
        id_attribute: str = "id",
        **kwargs
    ) -> "TreeConfig":
        """Config reading records by attribute name, ORM rows for example"""
        return cls(
            get_id=attrgetter(id_attribute),
            get_label=attrgetter(title_attribute),
            get_parent=attrgetter(parent_attribute),
            **kwargs
        )

    def parent_key(self, item) -> Hashable:
        parent = self.get_parent(item)
        if parent in self.root_aliases:
            return self.parent_null_value
        return parent


def group_by(items: Iterable, key: Callable[[Any], Hashable]) -> Dict[Hashable, List]:
    """
    Groups items by ``key`` in one pass. Both the groups and the items
    inside each group keep their encounter order.
    """
    groups = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def build_tree(records: Iterable, config: Optional[TreeConfig] = None) -> List[Node]:
    """
    Builds the nested node tree for ``records``.

    Descends with an explicit stack, deep hierarchies don't touch
    the interpreter's recursion limit. Reaching an identity twice
    raises :class:`TreeCycleError`.

    :param records: Flat records, roots first is the usual order
    :param config: A :class:`TreeConfig`, defaults read
        :class:`Record` fields with a ``None`` sentinel
    :return: The list of root nodes
    """
    config = config or TreeConfig()
    records = list(records)
    buckets = group_by(records, config.parent_key)

    roots = []
    visited = set()
    # (record, list that receives its node), siblings pushed reversed
    stack = [(record, roots) for record in reversed(buckets.get(config.parent_null_value, []))]
    while stack:
        record, siblings = stack.pop()
        node_id = config.get_id(record)
        if node_id in visited:
            log.error(LOGMSG_ERR_TREE_CYCLE, node_id)
            raise TreeCycleError(node_id)
        visited.add(node_id)
        node = Node(
            name=config.get_label(record),
            value=node_id,
            disabled=node_id in config.disabled_ids,
        )
        siblings.append(node)
        children = buckets.get(node_id)
        if children:
            node.children = []
            stack.extend((child, node.children) for child in reversed(children))

    orphans = len(records) - len(visited)
    if orphans:
        log.debug(LOGMSG_DEB_TREE_ORPHANS, orphans)
    log.debug(LOGMSG_DEB_TREE_BUILT, len(roots), len(visited), len(records))
    return roots


def build_tree_from_queries(
    root_records: Iterable,
    other_records: Iterable,
    config: Optional[TreeConfig] = None,
) -> List[Node]:
    """
    Builds the tree from the two data source queries. Root candidates
    (possibly filtered by the caller) come first, then every other
    record unfiltered.
    """
    return build_tree(list(root_records) + list(other_records), config)
