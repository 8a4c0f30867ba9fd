"""
Pennyekart agent hierarchy builder.

Turns a flat agent list (each row optionally pointing at a parent agent) into
a forest grouped by panchayath. Parent pointers come straight from the
database and are not guaranteed to be acyclic, so every traversal carries an
explicit visited set.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field

from apps.core.constants import LEAF_AGENT_ROLE, ROLE_LABELS, ROOT_AGENT_ROLE, UNKNOWN_PANCHAYATH
from apps.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentRecord:
    """Normalized view of one agent row."""
    id: str
    name: str
    mobile: str
    role: str
    parent_agent_id: str | None
    panchayath_name: str
    ward: str
    customer_count: int

    @classmethod
    def from_row(cls, row: dict) -> 'AgentRecord':
        parent = row.get('parent_agent_id')
        return cls(
            id=str(row['id']),
            name=row.get('name') or '',
            mobile=row.get('mobile') or '',
            role=row.get('role') or '',
            parent_agent_id=str(parent) if parent else None,
            panchayath_name=row.get('panchayath_name') or UNKNOWN_PANCHAYATH,
            ward=row.get('ward') or 'N/A',
            customer_count=int(row.get('customer_count') or 0),
        )


class AgentIndex:
    """
    Agents addressed by id plus a parent id -> child ids adjacency index.

    Child lists keep input order. Built once per hierarchy build.
    """

    def __init__(self, agents: list[AgentRecord]):
        self.agents: dict[str, AgentRecord] = {}
        self.children: dict[str, list[str]] = defaultdict(list)
        for agent in agents:
            if agent.id in self.agents:
                logger.debug(f'Duplicate agent id {agent.id} ignored')
                continue
            self.agents[agent.id] = agent
            if agent.parent_agent_id:
                self.children[agent.parent_agent_id].append(agent.id)
        self._totals: dict[str, int] | None = None

    def __len__(self):
        return len(self.agents)

    def __iter__(self):
        return iter(self.agents.values())

    def get(self, agent_id: str) -> AgentRecord | None:
        return self.agents.get(agent_id)

    def child_ids(self, agent_id: str) -> list[str]:
        return [
            child_id for child_id in self.children.get(agent_id, [])
            if child_id != agent_id
        ]

    def total_customers(self, agent_id: str) -> int:
        """
        Customers attributed to an agent's subtree.

        A pro agent contributes its own customer_count; any other role sums
        its children. Every agent is counted at most once per subtree, so
        parent cycles never double count.
        """
        if self._totals is None:
            self._totals = self._subtree_totals()
        return self._totals.get(agent_id, 0)

    def _parent_cycles(self) -> list[list[str]]:
        """
        Parent-pointer cycles, each listed from parent to child.

        Every agent has one parent, so each agent lies on at most one cycle.
        """
        cycles = []
        seen: set[str] = set()
        for start in self.agents:
            path: list[str] = []
            position: dict[str, int] = {}
            current = start
            while current in self.agents and current not in seen:
                seen.add(current)
                position[current] = len(path)
                path.append(current)
                current = self.agents[current].parent_agent_id
            if current in position:
                cycles.append(path[position[current]:][::-1])
        return cycles

    def _subtree_totals(self) -> dict[str, int]:
        cycles = self._parent_cycles()
        on_cycle = {agent_id for cycle in cycles for agent_id in cycle}
        totals: dict[str, int] = {}

        # Off-cycle agents form trees hanging below the cycles; post-order
        for start in self.agents:
            if start in totals or start in on_cycle:
                continue
            stack = [(start, False)]
            while stack:
                agent_id, expanded = stack.pop()
                if agent_id in totals:
                    continue
                agent = self.agents[agent_id]
                if agent.role == LEAF_AGENT_ROLE:
                    totals[agent_id] = agent.customer_count
                elif expanded:
                    totals[agent_id] = sum(totals[c] for c in self.children.get(agent_id, []))
                else:
                    stack.append((agent_id, True))
                    stack.extend((c, False) for c in self.children.get(agent_id, []) if c not in totals)

        for cycle in cycles:
            local = {
                agent_id: sum(totals[c] for c in self.children.get(agent_id, []) if c not in on_cycle)
                for agent_id in cycle
            }
            pro_positions = [i for i, agent_id in enumerate(cycle) if self.agents[agent_id].role == LEAF_AGENT_ROLE]
            if not pro_positions:
                # Walking down from any member visits the whole ring once
                ring_total = sum(local.values())
                for agent_id in cycle:
                    totals[agent_id] = ring_total
                continue

            # Walking down stops at the next pro; accumulate backwards from one
            size = len(cycle)
            start = pro_positions[0]
            totals[cycle[start]] = self.agents[cycle[start]].customer_count
            for step in range(1, size):
                agent_id = cycle[(start - step) % size]
                agent = self.agents[agent_id]
                if agent.role == LEAF_AGENT_ROLE:
                    totals[agent_id] = agent.customer_count
                else:
                    totals[agent_id] = local[agent_id] + totals[cycle[(start - step + 1) % size]]

        return totals


@dataclass
class AgentNode:
    agent: AgentRecord
    depth: int
    total_customers: int
    children: list['AgentNode'] = field(default_factory=list)

    def iter_nodes(self):
        """Pre-order walk of this subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def _fields(self) -> dict:
        return {
            'id': self.agent.id,
            'name': self.agent.name,
            'mobile': self.agent.mobile,
            'role': self.agent.role,
            'role_label': ROLE_LABELS.get(self.agent.role, self.agent.role),
            'ward': self.agent.ward,
            'customer_count': self.agent.customer_count,
            'total_customers': self.total_customers,
            'depth': self.depth,
            'children': [],
        }

    def to_dict(self) -> dict:
        data = self._fields()
        stack = [(self, data)]
        while stack:
            node, node_data = stack.pop()
            for child in node.children:
                child_data = child._fields()
                node_data['children'].append(child_data)
                stack.append((child, child_data))
        return data


@dataclass
class PanchayathGroup:
    panchayath_name: str
    agent_count: int
    roots: list[AgentNode] = field(default_factory=list)

    def node_count(self) -> int:
        return sum(1 for root in self.roots for _ in root.iter_nodes())

    def to_dict(self) -> dict:
        return {
            'panchayath_name': self.panchayath_name,
            'agent_count': self.agent_count,
            'roots': [root.to_dict() for root in self.roots],
        }


def _build_tree(index: AgentIndex, root_id: str) -> AgentNode:
    """Expand one root; each branch skips agents already on its own path."""
    root = AgentNode(agent=index.agents[root_id], depth=0, total_customers=index.total_customers(root_id))
    stack = [(root, frozenset({root_id}))]
    while stack:
        node, path = stack.pop()
        for child_id in index.child_ids(node.agent.id):
            if child_id in path:
                logger.debug(f'Parent cycle detected at agent {child_id}')
                continue
            child = AgentNode(
                agent=index.agents[child_id],
                depth=node.depth + 1,
                total_customers=index.total_customers(child_id),
            )
            node.children.append(child)
            stack.append((child, path | {child_id}))
    return root


def group_by_panchayath(agents: list[AgentRecord]) -> dict[str, list[AgentRecord]]:
    """Group agents by panchayath name, groups in first-seen order."""
    groups: dict[str, list[AgentRecord]] = {}
    for agent in agents:
        groups.setdefault(agent.panchayath_name, []).append(agent)
    return groups


def build_hierarchy(agents: list) -> list[PanchayathGroup]:
    """
    Build the agent forest, one group per panchayath.

    Roots are the team leaders of a group; a group without any team leader
    shows every agent as a root instead. Children are only looked up inside
    the same group, and an agent whose parent is missing from the group is
    never attached to anyone.

    Args:
        agents: Agent rows (dicts) or AgentRecord instances

    Returns:
        List of PanchayathGroup
    """
    records = [a if isinstance(a, AgentRecord) else AgentRecord.from_row(a) for a in agents]

    result = []
    for panchayath_name, group_agents in group_by_panchayath(records).items():
        index = AgentIndex(group_agents)
        root_ids = [a.id for a in index if a.role == ROOT_AGENT_ROLE]
        if not root_ids:
            root_ids = [a.id for a in index]

        result.append(PanchayathGroup(
            panchayath_name=panchayath_name,
            agent_count=len(group_agents),
            roots=[_build_tree(index, root_id) for root_id in root_ids],
        ))

    return result


def validate_parent_assignment(agent_id, parent_id, agents: list) -> None:
    """
    Reject a parent assignment that would be invalid or create a cycle.

    Walks up from the proposed parent; reaching agent_id means the new edge
    closes a loop. The walk stops on an existing cycle elsewhere in the data.

    Raises:
        ValidationError
    """
    if not parent_id:
        return

    parent_key = str(parent_id)
    agent_key = str(agent_id) if agent_id else None

    if agent_key and parent_key == agent_key:
        raise ValidationError('An agent cannot be its own parent')

    parents = {}
    for agent in agents:
        record = agent if isinstance(agent, AgentRecord) else AgentRecord.from_row(agent)
        parents[record.id] = record.parent_agent_id

    if parent_key not in parents:
        raise ValidationError('Parent agent not found')

    if not agent_key:
        return

    visited: set[str] = set()
    current = parent_key
    while current and current not in visited:
        if current == agent_key:
            raise ValidationError('Parent assignment would create a cycle')
        visited.add(current)
        current = parents.get(current)
